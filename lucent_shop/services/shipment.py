# lucent_shop/services/shipment.py

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from lucent_shop.core import locales
from lucent_shop.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from lucent_shop.crud import order as crud_order
from lucent_shop.models.order import Shipment, ShippingStatus
from lucent_shop.models.product import ProductType
from lucent_shop.models.user import User
from lucent_shop.schemas.order import ShipmentCreate, ShipmentUpdate
from lucent_shop.services import event_log

logger = logging.getLogger(__name__)


def _not_found() -> NotFoundError:
    return NotFoundError(locales.ERROR_SHIPMENT_NOT_FOUND, error_code="SHIPMENT_NOT_FOUND")


def create_shipment(db: Session, item_id: int, data: ShipmentCreate, admin: User | None = None) -> Shipment:
    item = crud_order.get_order_item(db, item_id)
    if not item:
        raise NotFoundError(locales.ERROR_ORDER_ITEM_NOT_FOUND, error_code="ORDER_ITEM_NOT_FOUND")
    if item.product_type == ProductType.VOICE_PACK:
        raise ValidationError(locales.ERROR_SHIPMENT_DIGITAL, error_code="SHIPMENT_DIGITAL")
    if crud_order.get_shipment_by_item(db, item_id):
        raise ValidationError(locales.ERROR_SHIPMENT_EXISTS, error_code="SHIPMENT_EXISTS")

    shipment = Shipment(order_item_id=item.id, shipping_status=ShippingStatus.PREPARING, **data.model_dump())
    db.add(shipment)
    db.commit()
    db.refresh(shipment)

    admin_id = admin.id if admin else None
    logger.info(f"Shipment {shipment.id} created for order item {item.id}.")
    event_log.log_shipment_event(
        "created", locales.LOG_SHIPMENT_CREATED, shipment.id, admin_id,
        metadata={"order_item_id": item.id, "order_id": item.order_id},
    )
    return shipment


def update_shipment(db: Session, shipment_id: int, data: ShipmentUpdate, admin: User | None = None) -> Shipment:
    """Partial update. Reaching SHIPPED or DELIVERED stamps the matching timestamp."""
    shipment = crud_order.get_shipment(db, shipment_id)
    if not shipment:
        raise _not_found()

    changes = data.model_dump(exclude_unset=True)
    old_status = shipment.shipping_status
    for key, value in changes.items():
        setattr(shipment, key, value)

    new_status = changes.get("shipping_status")
    now = datetime.now(timezone.utc)
    if new_status == ShippingStatus.SHIPPED and shipment.shipped_at is None:
        shipment.shipped_at = now
    elif new_status == ShippingStatus.DELIVERED:
        shipment.shipped_at = shipment.shipped_at or now
        shipment.delivered_at = now

    db.commit()
    db.refresh(shipment)

    admin_id = admin.id if admin else None
    logger.info(f"Shipment {shipment.id} updated: {sorted(changes)}")
    event_log.log_shipment_event(
        "updated", locales.LOG_SHIPMENT_UPDATED, shipment.id, admin_id,
        metadata={
            "order_item_id": shipment.order_item_id,
            "status_before": old_status.value if old_status else None,
            "status_after": shipment.shipping_status.value,
            "fields": sorted(changes),
        },
    )
    return shipment


def get_shipment_for_item(db: Session, order_id: int, item_id: int, user: User | None = None) -> Shipment:
    """With a user given, only the order owner may read the shipment."""
    item = crud_order.get_order_item_in_order(db, order_id=order_id, item_id=item_id)
    if not item:
        raise NotFoundError(locales.ERROR_ORDER_ITEM_NOT_FOUND, error_code="ORDER_ITEM_NOT_FOUND")
    if user is not None and item.order.user_id != user.id:
        raise AuthorizationError(locales.ERROR_SHIPMENT_FORBIDDEN, error_code="SHIPMENT_FORBIDDEN")

    shipment = crud_order.get_shipment_by_item(db, item.id)
    if not shipment:
        raise _not_found()
    return shipment
