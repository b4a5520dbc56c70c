# lucent_shop/routers/order.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from lucent_shop.core.config import settings
from lucent_shop.core.limiter import limiter
from lucent_shop.dependencies import get_client_ip, get_current_user, get_db
from lucent_shop.models.order import OrderStatus
from lucent_shop.models.user import User
from lucent_shop.schemas.order import (
    CheckoutRequest, DownloadLink, Order, OrderCancelRequest, OrderCreate,
    PaginatedOrders, Shipment, VoicePackItem
)
from lucent_shop.services import download as download_service
from lucent_shop.services import order as order_service
from lucent_shop.services import order_status as order_status_service
from lucent_shop.services import shipment as shipment_service

router = APIRouter()


@router.post("/orders", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_new_order(
    request: Request,
    order_data: OrderCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Direct purchase of the given items, without touching the cart."""
    return order_service.create_order(
        db, current_user, order_data.items, order_data.buyer, order_data.shipping,
        ip_address=get_client_ip(request),
    )


@router.post("/orders/checkout", response_model=Order, status_code=status.HTTP_201_CREATED)
async def checkout(
    request: Request,
    checkout_data: CheckoutRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Places an order for everything in the cart and empties it."""
    return order_service.checkout_cart(
        db, current_user, checkout_data.buyer, checkout_data.shipping,
        ip_address=get_client_ip(request),
    )


@router.get("/orders", response_model=PaginatedOrders)
async def get_orders_history(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    status: Optional[OrderStatus] = Query(None, description="Filter by order status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Order history of the current user, newest first."""
    return order_service.get_user_orders(db, current_user, page, size, status)


@router.get("/orders/voice-packs", response_model=List[VoicePackItem])
async def get_my_voice_packs(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Voice packs the user has paid for and can download."""
    return order_service.get_my_voice_packs(db, current_user)


@router.get("/orders/{order_id}", response_model=Order)
async def get_single_order(
    order_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return order_service.get_order(db, order_id, current_user)


@router.post("/orders/{order_id}/cancel", response_model=Order)
async def cancel_user_order(
    order_id: int,
    cancel_data: OrderCancelRequest = OrderCancelRequest(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Cancels a PENDING or PAID order of the current user and returns its stock."""
    return order_status_service.cancel_order(db, order_id, current_user, cancel_data.reason)


@router.post("/orders/{order_id}/items/{item_id}/download", response_model=DownloadLink)
@limiter.limit(settings.DOWNLOAD_RATE_LIMIT)
async def request_download_link(
    request: Request,
    order_id: int,
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Issues a time-limited download link for a purchased voice pack."""
    return download_service.request_download(
        db, order_id, item_id, current_user, ip_address=get_client_ip(request)
    )


@router.get("/orders/{order_id}/items/{item_id}/shipment", response_model=Shipment)
async def get_item_shipment(
    order_id: int,
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return shipment_service.get_shipment_for_item(db, order_id, item_id, user=current_user)
