"""
Repository contract shared by every portal entity.

Entities use string (UUID) keys. ``update`` applies only the fields the
caller actually sent, so a partial admin edit never blanks other columns.
"""

from typing import Any, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    db: Any

    def get_by_id(self, id: str) -> Optional[T]:
        ...

    def find_one(self, **filters: Any) -> Optional[T]:
        """First row whose columns equal the given values."""
        ...

    def count(self) -> int:
        ...

    def list(self, order_by: Any = None, limit: Optional[int] = None) -> List[T]:
        ...

    def create(self, obj_in: Any) -> T:
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        ...

    def save(self, db_obj: T) -> T:
        """Persist in-place attribute changes (status flips, counters)."""
        ...

    def delete(self, db_obj: T) -> None:
        ...
