"""
SQLAlchemy-backed repository used by every portal entity.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from mailportal.domain.repositories.base import BaseRepository
from mailportal.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


def _as_fields(obj_in: Any) -> Dict[str, Any]:
    if isinstance(obj_in, BaseModel):
        return obj_in.model_dump(exclude_unset=True)
    return dict(obj_in)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, id: str) -> Optional[ModelType]:
        return self.find_one(id=id)

    def find_one(self, **filters: Any) -> Optional[ModelType]:
        return self.db.query(self.model).filter_by(**filters).first()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def list(self, order_by: Any = None, limit: Optional[int] = None) -> List[ModelType]:
        query = self.db.query(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit:
            query = query.limit(limit)
        return query.all()

    def create(self, obj_in: Any) -> ModelType:
        return self.save(self.model(**_as_fields(obj_in)))

    def update(self, db_obj: ModelType, obj_in: Any) -> ModelType:
        # Unknown keys are ignored rather than set as stray attributes
        for field, value in _as_fields(obj_in).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        return self.save(db_obj)

    def save(self, db_obj: ModelType) -> ModelType:
        self.db.add(db_obj)
        self.db.commit()
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, db_obj: ModelType) -> None:
        self.db.delete(db_obj)
        self.db.commit()
