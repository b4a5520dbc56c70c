# lucent_shop/crud/order.py

from datetime import datetime
from typing import List

from sqlalchemy import or_, update
from sqlalchemy.orm import Session, selectinload

from lucent_shop.models.order import Order, OrderItem, OrderStatus, Shipment
from lucent_shop.models.product import ProductType

# --- Orders ---

def get_order(db: Session, order_id: int) -> Order | None:
    return db.query(Order).options(selectinload(Order.items)).filter(Order.id == order_id).first()

def get_orders_by_ids(db: Session, order_ids: List[int]) -> List[Order]:
    return db.query(Order).filter(Order.id.in_(order_ids)).all()

def order_number_exists(db: Session, order_number: str) -> bool:
    return db.query(Order.id).filter(Order.order_number == order_number).first() is not None

def _orders_query(
    db: Session,
    user_id: int | None = None,
    status: OrderStatus | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    search: str | None = None,
):
    query = db.query(Order)
    if user_id is not None:
        query = query.filter(Order.user_id == user_id)
    if status:
        query = query.filter(Order.status == status)
    if date_from:
        query = query.filter(Order.created_at >= date_from)
    if date_to:
        query = query.filter(Order.created_at <= date_to)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Order.order_number.ilike(pattern),
            Order.buyer_name.ilike(pattern),
            Order.buyer_email.ilike(pattern),
            Order.shipping_name.ilike(pattern),
        ))
    return query

def get_orders(db: Session, skip: int = 0, limit: int = 20, **filters) -> List[Order]:
    """Paginated orders, newest first. Filters: user_id, status, date_from, date_to, search."""
    return _orders_query(db, **filters).options(selectinload(Order.items)).order_by(
        Order.created_at.desc(), Order.id.desc()
    ).offset(skip).limit(limit).all()

def count_orders(db: Session, **filters) -> int:
    return _orders_query(db, **filters).count()

def get_recent_orders(db: Session, limit: int = 5) -> List[Order]:
    return db.query(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).all()

# --- Order items ---

def get_order_item(db: Session, item_id: int) -> OrderItem | None:
    return db.query(OrderItem).filter(OrderItem.id == item_id).first()

def get_order_item_in_order(db: Session, order_id: int, item_id: int) -> OrderItem | None:
    """Finds an item only if it belongs to the given order."""
    return db.query(OrderItem).filter_by(id=item_id, order_id=order_id).first()

def get_user_voice_pack_items(db: Session, user_id: int) -> List[OrderItem]:
    """Fulfilled voice pack lines of the user, newest order first."""
    return db.query(OrderItem).join(Order).filter(
        Order.user_id == user_id,
        OrderItem.product_type == ProductType.VOICE_PACK,
        OrderItem.item_status == OrderStatus.DONE,
    ).order_by(Order.created_at.desc(), OrderItem.id.desc()).all()

def record_download(db: Session, item_id: int, downloaded_at: datetime) -> None:
    """Bumps the download counter in SQL so concurrent requests never lose a count. Does not commit."""
    db.execute(
        update(OrderItem)
        .where(OrderItem.id == item_id)
        .values(download_count=OrderItem.download_count + 1, last_downloaded_at=downloaded_at)
        .execution_options(synchronize_session=False)
    )

# --- Shipments ---

def get_shipment(db: Session, shipment_id: int) -> Shipment | None:
    return db.query(Shipment).filter(Shipment.id == shipment_id).first()

def get_shipment_by_item(db: Session, order_item_id: int) -> Shipment | None:
    return db.query(Shipment).filter(Shipment.order_item_id == order_item_id).first()
