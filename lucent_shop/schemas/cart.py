# lucent_shop/schemas/cart.py
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List

from .product import ProductSummary

# Add-to-cart body
class CartItemAdd(BaseModel):
    product_id: int
    quantity: int = Field(1, gt=0)

# Quantity change body; non-positive values are rejected by the service
class CartItemQuantityUpdate(BaseModel):
    quantity: int

class CartItemResponse(BaseModel):
    id: int
    product: ProductSummary
    quantity: int
    subtotal: int
    created_at: datetime

class CartResponse(BaseModel):
    items: List[CartItemResponse]

    items_price: int
    shipping_fee: int = 0
    total_price: int
    has_physical_items: bool

class CartCount(BaseModel):
    count: int
