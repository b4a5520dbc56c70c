# lucent_shop/crud/log.py

from datetime import datetime
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from lucent_shop.models.event_log import EventLog


def create_log(db: Session, **fields) -> EventLog:
    """
    Adds a log row to the session.
    Requires an external db.commit().
    """
    entry = EventLog(**fields)
    db.add(entry)
    return entry

def _logs_query(
    db: Session,
    event_category: str | None = None,
    event_type: str | None = None,
    severity: str | None = None,
    user_id: int | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    search: str | None = None,
):
    query = db.query(EventLog)
    if event_category:
        query = query.filter(EventLog.event_category == event_category)
    if event_type:
        query = query.filter(EventLog.event_type == event_type)
    if severity:
        query = query.filter(EventLog.severity == severity)
    if user_id is not None:
        query = query.filter(EventLog.user_id == user_id)
    if date_from:
        query = query.filter(EventLog.created_at >= date_from)
    if date_to:
        query = query.filter(EventLog.created_at <= date_to)
    if search:
        query = query.filter(EventLog.message.ilike(f"%{search}%"))
    return query

def get_logs(db: Session, skip: int = 0, limit: int = 50, ascending: bool = False, **filters) -> List[EventLog]:
    order = EventLog.created_at.asc() if ascending else EventLog.created_at.desc()
    tiebreak = EventLog.id.asc() if ascending else EventLog.id.desc()
    return _logs_query(db, **filters).order_by(order, tiebreak).offset(skip).limit(limit).all()

def count_logs(db: Session, **filters) -> int:
    return _logs_query(db, **filters).count()

def get_log(db: Session, log_id: int) -> EventLog | None:
    return db.query(EventLog).filter(EventLog.id == log_id).first()

def count_by(db: Session, column, date_from: datetime | None = None, date_to: datetime | None = None) -> Dict[str, int]:
    """Groups logs in the date range by `column` (category or severity)."""
    query = _logs_query(db, date_from=date_from, date_to=date_to).with_entities(column, func.count(EventLog.id))
    return {key: count for key, count in query.group_by(column).all()}
