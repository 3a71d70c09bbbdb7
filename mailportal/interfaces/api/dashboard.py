"""Dashboard API routes: overview, storage and activity reports."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mailportal.application.services import stats_service
from mailportal.domain.schemas.auth import SessionIdentity
from mailportal.domain.schemas.stats import ActivityReport, DashboardStats, StorageReport
from mailportal.infrastructure.database import get_db
from mailportal.interfaces.api.deps import require_admin

router = APIRouter(prefix="/admin", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db), admin: SessionIdentity = Depends(require_admin)):
    return stats_service.get_dashboard_stats(db)


@router.get("/storage", response_model=StorageReport)
def get_storage(db: Session = Depends(get_db), admin: SessionIdentity = Depends(require_admin)):
    return stats_service.get_storage_report(db)


@router.get("/activity", response_model=ActivityReport)
def get_activity(db: Session = Depends(get_db), admin: SessionIdentity = Depends(require_admin)):
    return stats_service.get_activity_report(db)
