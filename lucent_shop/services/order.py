# lucent_shop/services/order.py

import json
import logging
import secrets
import time
from collections import OrderedDict
from typing import Iterable, List, Optional

from redis.asyncio import Redis
from sqlalchemy.orm import Session

from lucent_shop.core import locales
from lucent_shop.core.config import settings
from lucent_shop.core.exceptions import (
    ApiError, AuthorizationError, InactiveProduct, InsufficientStock,
    NotFoundError, ProductNotFound, ValidationError
)
from lucent_shop.crud import cart as crud_cart
from lucent_shop.crud import order as crud_order
from lucent_shop.crud import product as crud_product
from lucent_shop.models.order import Order, OrderItem, OrderStatus
from lucent_shop.models.product import is_shippable
from lucent_shop.models.user import User
from lucent_shop.schemas.order import (
    AdminOrder as AdminOrderSchema, BuyerInfo, OrderItemRequest, OrderStats,
    PaginatedAdminOrders, PaginatedOrders, ShippingInfo, VoicePackItem
)
from lucent_shop.schemas.order import Order as OrderSchema
from lucent_shop.services import event_log

logger = logging.getLogger(__name__)

ORDER_STATS_CACHE_KEY = "orders:stats"


def generate_order_number() -> str:
    """ORD-<epoch ms>-<10 uppercase hex chars>; customers quote it as the transfer memo."""
    return f"ORD-{int(time.time() * 1000)}-{secrets.token_hex(5).upper()}"


def _unique_order_number(db: Session) -> str:
    for _ in range(settings.ORDER_NUMBER_MAX_ATTEMPTS):
        order_number = generate_order_number()
        if not crud_order.order_number_exists(db, order_number):
            return order_number
        logger.warning(f"Order number collision on {order_number}, regenerating.")
    raise ApiError(locales.ERROR_ORDER_NUMBER_EXHAUSTED, error_code="ORDER_NUMBER_EXHAUSTED")


def _merge_items(items: Iterable[OrderItemRequest]) -> "OrderedDict[int, int]":
    """Sums quantities of repeated product ids, keeping first-seen order."""
    merged: "OrderedDict[int, int]" = OrderedDict()
    for item in items:
        if item.quantity < 1:
            raise ValidationError(locales.ERROR_INVALID_QUANTITY, error_code="INVALID_QUANTITY")
        merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
    return merged


# --- Order creation ---

def create_order(
    db: Session,
    user: User,
    items: List[OrderItemRequest],
    buyer: Optional[BuyerInfo] = None,
    shipping: Optional[ShippingInfo] = None,
    ip_address: str | None = None,
    clear_cart: bool = False,
) -> Order:
    """
    Validates the requested lines, reserves stock and writes the order.

    Everything happens in one transaction: the order row, the item snapshots,
    the conditional stock decrements and (for checkout) the cart delete.
    Any failure rolls the whole thing back.
    """
    if not items:
        raise ValidationError(locales.ERROR_ORDER_ITEMS_REQUIRED, error_code="ORDER_ITEMS_REQUIRED")

    requested = _merge_items(items)
    products = crud_product.get_products_by_ids(db, requested.keys())

    # --- Step 1: validation, nothing is written yet ---
    items_price = 0
    has_shippable = False
    for product_id, quantity in requested.items():
        product = products.get(product_id)
        if not product:
            raise ProductNotFound(locales.ERROR_PRODUCT_NOT_FOUND_ID.format(product_id=product_id))
        if not product.is_active:
            raise InactiveProduct()
        if product.tracks_stock and product.stock < quantity:
            raise InsufficientStock(locales.ERROR_INSUFFICIENT_STOCK.format(product_name=product.name))
        items_price += product.price * quantity
        has_shippable = has_shippable or is_shippable(product.type)

    if has_shippable and shipping is None:
        raise ValidationError(locales.ERROR_SHIPPING_REQUIRED, error_code="SHIPPING_REQUIRED")

    shipping_fee = settings.SHIPPING_FEE if has_shippable else 0
    total_price = items_price + shipping_fee
    buyer = buyer or BuyerInfo()

    # --- Step 2: single transaction ---
    try:
        order = Order(
            order_number=_unique_order_number(db),
            user_id=user.id,
            status=OrderStatus.DONE if total_price == 0 else OrderStatus.PENDING,
            total_price=total_price,
            buyer_name=buyer.name or user.name,
            buyer_email=buyer.email or user.email,
            buyer_phone=buyer.phone or user.phone,
        )
        if has_shippable:
            order.shipping_name = shipping.name
            order.shipping_phone = shipping.phone
            order.shipping_main_address = shipping.main_address
            order.shipping_detail_address = shipping.detail_address
            order.shipping_memo = shipping.memo
        db.add(order)
        db.flush()

        for product_id, quantity in requested.items():
            product = products[product_id]
            reserved = 0
            if product.tracks_stock:
                if not crud_product.decrement_stock(db, product.id, quantity):
                    raise InsufficientStock(locales.ERROR_INSUFFICIENT_STOCK.format(product_name=product.name))
                reserved = quantity
            db.add(OrderItem(
                order_id=order.id,
                product_id=product.id,
                product_name=product.name,
                product_type=product.type,
                price_snapshot=product.price,
                quantity=quantity,
                item_status=OrderStatus.DONE if product.price == 0 else order.status,
                stock_reserved=reserved,
            ))

        if clear_cart:
            crud_cart.clear_cart(db, user_id=user.id, commit=False)

        db.commit()
    except Exception:
        db.rollback()
        logger.warning(f"Order creation for user {user.id} rolled back.", exc_info=True)
        raise

    db.refresh(order)
    logger.info(f"Order {order.order_number} (ID {order.id}) created for user {user.id}, total {total_price}.")

    event_log.log_order_created(
        order.id, user.id, total_price,
        metadata={
            "order_number": order.order_number,
            "item_count": len(requested),
            "shipping_fee": shipping_fee,
            "has_shippable_items": has_shippable,
        },
        ip_address=ip_address,
    )
    return order


def checkout_cart(
    db: Session,
    user: User,
    buyer: Optional[BuyerInfo] = None,
    shipping: Optional[ShippingInfo] = None,
    ip_address: str | None = None,
) -> Order:
    """Turns the user's cart into an order and empties the cart in the same transaction."""
    cart_items = crud_cart.get_cart_items(db, user_id=user.id)
    if not cart_items:
        raise ValidationError(locales.ERROR_CART_EMPTY, error_code="CART_EMPTY")

    items = [OrderItemRequest(product_id=i.product_id, quantity=i.quantity) for i in reversed(cart_items)]
    return create_order(db, user, items, buyer, shipping, ip_address=ip_address, clear_cart=True)


# --- Customer queries ---

def get_user_orders(db: Session, user: User, page: int, size: int, status: OrderStatus | None = None) -> PaginatedOrders:
    skip = (page - 1) * size
    orders = crud_order.get_orders(db, skip=skip, limit=size, user_id=user.id, status=status)
    total = crud_order.count_orders(db, user_id=user.id, status=status)
    return PaginatedOrders.build(
        items=[OrderSchema.model_validate(o) for o in orders],
        total_items=total, page=page, size=size,
    )


def get_order_or_404(db: Session, order_id: int) -> Order:
    order = crud_order.get_order(db, order_id)
    if not order:
        raise NotFoundError(locales.ERROR_ORDER_NOT_FOUND, error_code="ORDER_NOT_FOUND")
    return order


def get_order(db: Session, order_id: int, user: User) -> Order:
    order = get_order_or_404(db, order_id)
    if order.user_id != user.id:
        logger.warning(f"User {user.id} tried to read order {order_id} of user {order.user_id}.")
        raise AuthorizationError(locales.ERROR_ORDER_FORBIDDEN, error_code="ORDER_FORBIDDEN")
    return order


def get_my_voice_packs(db: Session, user: User) -> List[VoicePackItem]:
    """Voice packs the user can download right now."""
    items = crud_order.get_user_voice_pack_items(db, user_id=user.id)
    return [
        VoicePackItem(
            item_id=item.id,
            order_id=item.order_id,
            order_number=item.order.order_number,
            product_id=item.product_id,
            product_name=item.product_name,
            purchased_at=item.order.created_at,
            download_count=item.download_count,
            last_downloaded_at=item.last_downloaded_at,
            sample_audio_url=item.product.sample_audio_url if item.product else None,
        )
        for item in items
    ]


# --- Admin queries ---

def get_all_orders(db: Session, page: int, size: int, **filters) -> PaginatedAdminOrders:
    active_filters = {k: v for k, v in filters.items() if v is not None}
    skip = (page - 1) * size
    orders = crud_order.get_orders(db, skip=skip, limit=size, **active_filters)
    total = crud_order.count_orders(db, **active_filters)
    return PaginatedAdminOrders.build(
        items=[AdminOrderSchema.model_validate(o) for o in orders],
        total_items=total, page=page, size=size,
    )


async def get_order_stats(db: Session, redis: Redis) -> OrderStats:
    """Dashboard counters, cached for ORDER_STATS_CACHE_SECONDS."""
    cached = await redis.get(ORDER_STATS_CACHE_KEY)
    if cached:
        try:
            return OrderStats.model_validate(json.loads(cached))
        except Exception as e:
            logger.warning(f"Failed to validate cached order stats: {e}. Recounting.")

    stats = OrderStats(
        total_orders=crud_order.count_orders(db),
        pending_orders=crud_order.count_orders(db, status=OrderStatus.PENDING),
    )
    await redis.set(ORDER_STATS_CACHE_KEY, stats.model_dump_json(), ex=settings.ORDER_STATS_CACHE_SECONDS)
    return stats


def get_recent_orders(db: Session, limit: int = 5) -> List[Order]:
    return crud_order.get_recent_orders(db, limit=limit)


def update_admin_memo(db: Session, order_id: int, memo: str | None, admin: User) -> Order:
    order = get_order_or_404(db, order_id)
    order.admin_memo = memo
    db.commit()
    db.refresh(order)
    logger.info(f"Admin {admin.id} updated memo of order {order_id}.")
    event_log.log_admin_memo_updated(order.id, admin.id)
    return order
