# lucent_shop/services/order_status.py
"""
Order status machine.

An order moves forward one step at a time:
PENDING -> PAID -> MAKING -> READY_TO_SHIP -> SHIPPING -> DONE.
PENDING and PAID orders can be cancelled. Orders without shippable goods
may jump from PAID straight to DONE. DONE and CANCELLED are terminal.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from lucent_shop.core import locales
from lucent_shop.core.exceptions import (
    ApiError, AuthorizationError, InvalidStatusTransition, NotFoundError, OrderCannotCancel
)
from lucent_shop.crud import order as crud_order
from lucent_shop.crud import product as crud_product
from lucent_shop.models.order import Order, OrderItem, OrderStatus
from lucent_shop.models.product import is_shippable
from lucent_shop.models.user import User
from lucent_shop.schemas.order import BulkStatusResult
from lucent_shop.services import event_log
from lucent_shop.services.order import get_order_or_404

logger = logging.getLogger(__name__)

TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.MAKING, OrderStatus.CANCELLED},
    OrderStatus.MAKING: {OrderStatus.READY_TO_SHIP},
    OrderStatus.READY_TO_SHIP: {OrderStatus.SHIPPING},
    OrderStatus.SHIPPING: {OrderStatus.DONE},
    OrderStatus.DONE: set(),
    OrderStatus.CANCELLED: set(),
}

CANCELLABLE_STATUSES = {OrderStatus.PENDING, OrderStatus.PAID}
TERMINAL_STATUSES = {OrderStatus.DONE, OrderStatus.CANCELLED}

# Forward order of the fulfilment steps
STATUS_RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.PAID: 1,
    OrderStatus.MAKING: 2,
    OrderStatus.READY_TO_SHIP: 3,
    OrderStatus.SHIPPING: 4,
    OrderStatus.DONE: 5,
}


def has_shippable_items(order: Order) -> bool:
    return any(is_shippable(item.product_type) for item in order.items)


def allowed_transitions(order: Order) -> set:
    allowed = set(TRANSITIONS[order.status])
    if order.status == OrderStatus.PAID and not has_shippable_items(order):
        allowed.add(OrderStatus.DONE)
    return allowed


def can_transition(order: Order, new_status: OrderStatus) -> bool:
    return new_status in allowed_transitions(order)


def _derive_item_status(item: OrderItem, order_status: OrderStatus) -> OrderStatus:
    """
    Digital items are fulfilled as soon as payment is confirmed; shippable
    items follow the order. An item never moves backwards.
    """
    if order_status == OrderStatus.CANCELLED:
        return OrderStatus.CANCELLED

    target = order_status
    if not is_shippable(item.product_type) and order_status != OrderStatus.PENDING:
        target = OrderStatus.DONE

    current = item.item_status
    if current in STATUS_RANK and STATUS_RANK[current] >= STATUS_RANK[target]:
        return current
    return target


def _restore_stock(db: Session, order: Order) -> None:
    """Returns only what was actually taken at order time."""
    for item in order.items:
        if item.stock_reserved:
            crud_product.increment_stock(db, item.product_id, item.stock_reserved)
            item.stock_reserved = 0


def _apply(db: Session, order: Order, new_status: OrderStatus) -> None:
    """Sets the order status, re-derives item statuses and returns stock on cancellation. No commit."""
    if new_status == OrderStatus.CANCELLED:
        _restore_stock(db, order)
    order.status = new_status
    for item in order.items:
        item.item_status = _derive_item_status(item, new_status)


# --- Admin transitions ---

def update_status(db: Session, order_id: int, new_status: OrderStatus, admin: User | None = None) -> Order:
    order = get_order_or_404(db, order_id)
    old_status = order.status

    if not can_transition(order, new_status):
        raise InvalidStatusTransition(
            locales.ERROR_INVALID_STATUS_TRANSITION.format(old_status=old_status.value, new_status=new_status.value)
        )

    _apply(db, order, new_status)
    db.commit()
    db.refresh(order)

    admin_id = admin.id if admin else None
    logger.info(f"Order {order.order_number}: {old_status.value} -> {new_status.value} (admin {admin_id}).")
    event_log.log_order_status_changed(order.id, order.user_id, admin_id, old_status.value, new_status.value)
    return order


def bulk_update_status(db: Session, order_ids: List[int], new_status: OrderStatus, admin: User | None = None) -> BulkStatusResult:
    """Applies the transition order by order. One failure does not stop the batch."""
    updated: List[int] = []
    failed = {}
    for order_id in dict.fromkeys(order_ids):
        try:
            update_status(db, order_id, new_status, admin)
            updated.append(order_id)
        except ApiError as e:
            db.rollback()
            failed[order_id] = e.message

    if failed:
        logger.warning(f"Bulk status update to {new_status.value}: {len(failed)} order(s) failed: {failed}")

    return BulkStatusResult(
        message=locales.SUCCESS_BULK_STATUS_UPDATED.format(count=len(updated)),
        updated_count=len(updated),
        updated_order_ids=updated,
        failed=failed,
    )


# --- Customer cancellation ---

def cancel_order(db: Session, order_id: int, user: User, reason: str | None = None) -> Order:
    order = get_order_or_404(db, order_id)

    if order.user_id != user.id:
        logger.warning(f"User {user.id} tried to cancel order {order_id} of user {order.user_id}.")
        raise AuthorizationError(locales.ERROR_CANCEL_FORBIDDEN, error_code="CANCEL_FORBIDDEN")

    if order.status not in CANCELLABLE_STATUSES:
        raise OrderCannotCancel()

    old_status = order.status
    reason = reason or locales.DEFAULT_CANCEL_REASON
    _apply(db, order, OrderStatus.CANCELLED)
    order.cancel_reason = reason
    db.commit()
    db.refresh(order)

    logger.info(f"Order {order.order_number} cancelled by user {user.id}: {reason}")
    event_log.log_order_cancelled(order.id, user.id, reason, old_status.value)
    return order


# --- Per-item transitions ---

def update_item_status(
    db: Session,
    item_id: int,
    new_status: OrderStatus,
    admin: User | None = None,
    order_id: int | None = None,
) -> OrderItem:
    """Moves one order line forward. Cancellation only happens for the whole order."""
    if order_id is not None:
        item = crud_order.get_order_item_in_order(db, order_id=order_id, item_id=item_id)
    else:
        item = crud_order.get_order_item(db, item_id)
    if not item:
        raise NotFoundError(locales.ERROR_ORDER_ITEM_NOT_FOUND, error_code="ORDER_ITEM_NOT_FOUND")

    old_status = item.item_status
    if (
        old_status in TERMINAL_STATUSES
        or new_status == OrderStatus.CANCELLED
        or STATUS_RANK[new_status] <= STATUS_RANK[old_status]
    ):
        raise InvalidStatusTransition(
            locales.ERROR_INVALID_ITEM_STATUS_TRANSITION.format(old_status=old_status.value, new_status=new_status.value)
        )

    item.item_status = new_status
    db.commit()
    db.refresh(item)

    admin_id = admin.id if admin else None
    logger.info(f"Order item {item.id}: {old_status.value} -> {new_status.value} (admin {admin_id}).")
    event_log.log_item_status_changed(item.id, item.order_id, item.product_id, admin_id, old_status.value, new_status.value)
    return item
