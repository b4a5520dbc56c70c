# lucent_shop/services/event_log.py
"""
Audit trail of business events (order creation, status changes, downloads).

Writing a log entry is best-effort: it uses its own short-lived session and
never raises, so a failing log write cannot fail or roll back the operation
that triggered it. Callers log after their own commit.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from lucent_shop.core import locales
from lucent_shop.core.exceptions import NotFoundError
from lucent_shop.crud import log as crud_log
from lucent_shop.dependencies import get_db_context
from lucent_shop.models.event_log import EventLog
from lucent_shop.schemas.log import LogStats, PaginatedLogs
from lucent_shop.schemas.log import EventLog as EventLogSchema

logger = logging.getLogger(__name__)


def log(
    event_type: str,
    message: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[int] = None,
    admin_id: Optional[int] = None,
    severity: str = "info",
    event_category: Optional[str] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[Any] = None,
    changes: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> None:
    """Appends one entry. Never raises."""
    try:
        with get_db_context() as session:
            crud_log.create_log(
                session,
                event_type=event_type,
                event_category=event_category or event_type.split('.')[0],
                severity=severity,
                user_id=user_id,
                admin_id=admin_id,
                resource_type=resource_type,
                resource_id=str(resource_id) if resource_id is not None else None,
                message=message,
                meta=metadata,
                changes=changes,
                ip_address=ip_address,
            )
            session.commit()
    except Exception:
        logger.error(f"Failed to write event log '{event_type}'", exc_info=True)


# --- Order events ---

def log_order_created(order_id: int, user_id: int, total_price: int, metadata: Dict[str, Any], ip_address: str | None = None):
    log(
        "order.created",
        locales.LOG_ORDER_CREATED,
        metadata={"total_price": total_price, **metadata},
        user_id=user_id,
        resource_type="order",
        resource_id=order_id,
        ip_address=ip_address,
    )

def log_order_status_changed(order_id: int, user_id: int, admin_id: int | None, old_status: str, new_status: str):
    log(
        f"order.status.{new_status.lower()}",
        locales.LOG_ORDER_STATUS_CHANGED.format(old_status=old_status, new_status=new_status),
        user_id=user_id,
        admin_id=admin_id,
        resource_type="order",
        resource_id=order_id,
        changes={"status_before": old_status, "status_after": new_status},
    )

def log_order_cancelled(order_id: int, user_id: int, reason: str, old_status: str):
    log(
        "order.cancelled",
        locales.LOG_ORDER_CANCELLED,
        metadata={"reason": reason},
        user_id=user_id,
        severity="warning",
        resource_type="order",
        resource_id=order_id,
        changes={"status_before": old_status, "status_after": "CANCELLED"},
    )

def log_item_status_changed(item_id: int, order_id: int, product_id: int, admin_id: int | None, old_status: str, new_status: str):
    log(
        "order.item_status_changed",
        locales.LOG_ITEM_STATUS_CHANGED.format(old_status=old_status, new_status=new_status),
        metadata={"item_id": item_id, "order_id": order_id, "product_id": product_id},
        admin_id=admin_id,
        resource_type="order_item",
        resource_id=item_id,
        changes={"status_before": old_status, "status_after": new_status},
    )

def log_admin_memo_updated(order_id: int, admin_id: int):
    log(
        "order.admin_memo",
        locales.LOG_ADMIN_MEMO_UPDATED,
        admin_id=admin_id,
        resource_type="order",
        resource_id=order_id,
    )

# --- Digital delivery ---

def log_download(product_id: int, order_id: int, user_id: int, metadata: Dict[str, Any], ip_address: str | None = None):
    log(
        "digital_product.download",
        locales.LOG_DOWNLOAD,
        metadata={"order_id": order_id, **metadata},
        user_id=user_id,
        resource_type="product",
        resource_id=product_id,
        ip_address=ip_address,
    )

def log_unauthorized_download(product_id: int, user_id: int | None, ip_address: str | None = None):
    log(
        "digital_product.download.unauthorized",
        locales.LOG_UNAUTHORIZED_DOWNLOAD,
        user_id=user_id,
        severity="warning",
        resource_type="product",
        resource_id=product_id,
        ip_address=ip_address,
    )

# --- Shipments ---

def log_shipment_event(event: str, message: str, shipment_id: int, admin_id: int | None, metadata: Dict[str, Any]):
    log(
        f"order.shipment.{event}",
        message,
        metadata={"shipment_id": shipment_id, **metadata},
        admin_id=admin_id,
        resource_type="shipment",
        resource_id=shipment_id,
    )


# --- Admin reads ---

def get_logs(db: Session, page: int, size: int, ascending: bool = False, **filters) -> PaginatedLogs:
    active_filters = {k: v for k, v in filters.items() if v is not None}
    skip = (page - 1) * size
    entries = crud_log.get_logs(db, skip=skip, limit=size, ascending=ascending, **active_filters)
    total = crud_log.count_logs(db, **active_filters)
    return PaginatedLogs.build(
        items=[EventLogSchema.model_validate(e) for e in entries],
        total_items=total, page=page, size=size,
    )

def get_log(db: Session, log_id: int) -> EventLog:
    entry = crud_log.get_log(db, log_id)
    if not entry:
        raise NotFoundError(locales.ERROR_LOG_NOT_FOUND, error_code="LOG_NOT_FOUND")
    return entry

def get_stats(db: Session, date_from: datetime | None = None, date_to: datetime | None = None) -> LogStats:
    by_category = crud_log.count_by(db, EventLog.event_category, date_from, date_to)
    by_severity = crud_log.count_by(db, EventLog.severity, date_from, date_to)
    return LogStats(
        total=crud_log.count_logs(db, date_from=date_from, date_to=date_to),
        by_category=by_category,
        by_severity=by_severity,
    )
