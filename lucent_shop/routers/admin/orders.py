# lucent_shop/routers/admin/orders.py

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from redis.asyncio import Redis
from sqlalchemy.orm import Session

from lucent_shop.core.redis import get_redis_client
from lucent_shop.dependencies import get_admin_user, get_db
from lucent_shop.models.order import OrderStatus
from lucent_shop.models.user import User
from lucent_shop.schemas.order import (
    AdminMemoUpdate, AdminOrder, AdminShipment, BulkStatusResult, BulkStatusUpdate,
    ItemStatusUpdate, OrderItem, OrderStats, OrderStatusUpdate, PaginatedAdminOrders,
    RecentOrder, ShipmentCreate
)
from lucent_shop.services import order as order_service
from lucent_shop.services import order_status as order_status_service
from lucent_shop.services import shipment as shipment_service

logger = logging.getLogger(__name__)

# Prefix /orders is added in admin/__init__.py
router = APIRouter()


@router.get("", response_model=PaginatedAdminOrders)
async def get_orders_list(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    status: Optional[OrderStatus] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    search: Optional[str] = Query(None, description="Order number, buyer name/email or recipient name"),
    db: Session = Depends(get_db)
):
    """[ADMIN] All orders, newest first."""
    return order_service.get_all_orders(
        db, page, size, status=status, date_from=date_from, date_to=date_to, search=search
    )


@router.get("/stats", response_model=OrderStats)
async def get_orders_stats(
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis_client)
):
    return await order_service.get_order_stats(db, redis)


@router.get("/recent", response_model=List[RecentOrder])
async def get_recent_orders(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db)
):
    return order_service.get_recent_orders(db, limit)


@router.patch("/bulk-status", response_model=BulkStatusResult)
async def bulk_update_status(
    update_data: BulkStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """[ADMIN] Moves several orders at once; failures are reported per order."""
    return order_status_service.bulk_update_status(db, update_data.order_ids, update_data.status, admin)


@router.post("/items/{item_id}/shipment", response_model=AdminShipment, status_code=status.HTTP_201_CREATED)
async def create_item_shipment(
    item_id: int,
    shipment_data: ShipmentCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    return shipment_service.create_shipment(db, item_id, shipment_data, admin)


@router.get("/{order_id}", response_model=AdminOrder)
async def get_order_details(order_id: int, db: Session = Depends(get_db)):
    return order_service.get_order_or_404(db, order_id)


@router.patch("/{order_id}/memo", response_model=AdminOrder)
async def update_order_memo(
    order_id: int,
    memo_data: AdminMemoUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    return order_service.update_admin_memo(db, order_id, memo_data.admin_memo, admin)


@router.patch("/{order_id}/status", response_model=AdminOrder)
async def update_order_status(
    order_id: int,
    status_update: OrderStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    """[ADMIN] Applies one step of the order status machine."""
    return order_status_service.update_status(db, order_id, status_update.status, admin)


@router.patch("/{order_id}/items/{item_id}/status", response_model=OrderItem)
async def update_order_item_status(
    order_id: int,
    item_id: int,
    status_update: ItemStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_admin_user)
):
    return order_status_service.update_item_status(db, item_id, status_update.status, admin, order_id=order_id)
