# lucent_shop/schemas/order.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from lucent_shop.core.locales import ORDER_STATUS_LABELS
from lucent_shop.models.order import OrderStatus, ShippingStatus
from lucent_shop.models.product import ProductType
from lucent_shop.schemas.common import PaginatedResponse


# --- Request bodies ---

class OrderItemRequest(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)

class BuyerInfo(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

class ShippingInfo(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    main_address: str = Field(..., min_length=1)
    detail_address: Optional[str] = None
    memo: Optional[str] = None

class CheckoutRequest(BaseModel):
    """Checkout of the current cart."""
    buyer: BuyerInfo = BuyerInfo()
    shipping: Optional[ShippingInfo] = None

class OrderCreate(CheckoutRequest):
    """Direct purchase ("buy now") without going through the cart."""
    items: List[OrderItemRequest] = Field(..., min_length=1)

class OrderCancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


# --- Responses ---

class Shipment(BaseModel):
    id: int
    order_item_id: int
    recipient_name: str
    recipient_phone: str
    recipient_address: str
    delivery_memo: Optional[str] = None
    carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    shipping_status: ShippingStatus
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True

class AdminShipment(Shipment):
    admin_memo: Optional[str] = None


class OrderItem(BaseModel):
    id: int
    product_id: int
    product_name: str
    product_type: ProductType
    price_snapshot: int
    quantity: int
    subtotal: int
    item_status: OrderStatus
    download_count: int = 0
    last_downloaded_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Order(BaseModel):
    id: int
    order_number: str
    status: OrderStatus
    total_price: int
    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
    buyer_phone: Optional[str] = None
    shipping_name: Optional[str] = None
    shipping_phone: Optional[str] = None
    shipping_main_address: Optional[str] = None
    shipping_detail_address: Optional[str] = None
    shipping_memo: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: datetime
    items: List[OrderItem]

    @computed_field
    @property
    def status_label(self) -> str:
        return ORDER_STATUS_LABELS[self.status.value]

    @computed_field
    @property
    def can_be_cancelled(self) -> bool:
        return self.status in (OrderStatus.PENDING, OrderStatus.PAID)

    class Config:
        from_attributes = True


class AdminOrder(Order):
    user_id: int
    admin_memo: Optional[str] = None
    updated_at: datetime


class PaginatedOrders(PaginatedResponse[Order]):
    pass

class PaginatedAdminOrders(PaginatedResponse[AdminOrder]):
    pass


class VoicePackItem(BaseModel):
    item_id: int
    order_id: int
    order_number: str
    product_id: int
    product_name: str
    purchased_at: datetime
    download_count: int
    last_downloaded_at: Optional[datetime] = None
    sample_audio_url: Optional[str] = None


class DownloadLink(BaseModel):
    download_url: str
    expires_in: int
    expires_at: datetime
    filename: str


# --- Admin bodies and responses ---

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class BulkStatusUpdate(BaseModel):
    order_ids: List[int] = Field(..., min_length=1)
    status: OrderStatus

class BulkStatusResult(BaseModel):
    message: str
    updated_count: int
    updated_order_ids: List[int]
    failed: Dict[int, str] = {}

class ItemStatusUpdate(BaseModel):
    status: OrderStatus

class AdminMemoUpdate(BaseModel):
    admin_memo: Optional[str] = Field(None, max_length=2000)

class OrderStats(BaseModel):
    total_orders: int
    pending_orders: int

class RecentOrder(BaseModel):
    id: int
    order_number: str
    buyer_name: Optional[str] = None
    shipping_name: Optional[str] = None
    total_price: int
    status: OrderStatus
    created_at: datetime

    class Config:
        from_attributes = True

class ShipmentCreate(BaseModel):
    recipient_name: str = Field(..., min_length=1)
    recipient_phone: str = Field(..., min_length=1)
    recipient_address: str = Field(..., min_length=1)
    delivery_memo: Optional[str] = None
    carrier: Optional[str] = None
    tracking_number: Optional[str] = None

class ShipmentUpdate(BaseModel):
    carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    shipping_status: Optional[ShippingStatus] = None
    recipient_name: Optional[str] = None
    recipient_phone: Optional[str] = None
    recipient_address: Optional[str] = None
    delivery_memo: Optional[str] = None
    admin_memo: Optional[str] = None
