# lucent_shop/routers/admin/logs.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from lucent_shop.dependencies import get_db
from lucent_shop.schemas.log import EventLog, LogStats, PaginatedLogs
from lucent_shop.services import event_log as event_log_service

router = APIRouter()


@router.get("", response_model=PaginatedLogs)
async def get_logs(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    event_category: Optional[str] = Query(None),
    event_type: Optional[str] = Query(None),
    severity: Optional[str] = Query(None),
    user_id: Optional[int] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    search: Optional[str] = Query(None, description="Substring of the log message"),
    ascending: bool = Query(False),
    db: Session = Depends(get_db)
):
    """[ADMIN] Audit trail, newest first unless `ascending` is set."""
    return event_log_service.get_logs(
        db, page, size, ascending=ascending,
        event_category=event_category, event_type=event_type, severity=severity,
        user_id=user_id, date_from=date_from, date_to=date_to, search=search,
    )


@router.get("/stats", response_model=LogStats)
async def get_log_stats(
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    db: Session = Depends(get_db)
):
    return event_log_service.get_stats(db, date_from, date_to)


@router.get("/{log_id}", response_model=EventLog)
async def get_log_entry(log_id: int, db: Session = Depends(get_db)):
    return event_log_service.get_log(db, log_id)
