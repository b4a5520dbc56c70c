# lucent_shop/routers/cart.py

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from lucent_shop.core import locales
from lucent_shop.dependencies import get_current_user, get_db
from lucent_shop.models.user import User
from lucent_shop.schemas.cart import CartCount, CartItemAdd, CartItemQuantityUpdate, CartResponse
from lucent_shop.schemas.common import StatusMessage
from lucent_shop.services import cart as cart_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/cart", response_model=CartResponse)
async def get_cart(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Cart contents of the current user with totals."""
    return cart_service.get_cart(db, current_user.id)


@router.get("/cart/count", response_model=CartCount)
async def get_cart_count(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return CartCount(count=cart_service.count(db, current_user.id))


@router.post("/cart/items", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def add_cart_item(
    item_data: CartItemAdd,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Adds a product to the cart, or raises its quantity if it is already there.
    Stock is checked against the live product.
    """
    cart_service.add_item(db, current_user.id, item_data.product_id, item_data.quantity)
    return cart_service.get_cart(db, current_user.id)


@router.patch("/cart/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: int,
    item_data: CartItemQuantityUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    cart_service.update_quantity(db, current_user.id, item_id, item_data.quantity)
    return cart_service.get_cart(db, current_user.id)


@router.delete("/cart/items/{item_id}", response_model=StatusMessage)
async def remove_cart_item(
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    cart_service.remove_item(db, current_user.id, item_id)
    return StatusMessage(message=locales.SUCCESS_ITEM_REMOVED_FROM_CART)


@router.delete("/cart", response_model=StatusMessage)
async def clear_cart(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    cart_service.clear(db, current_user.id)
    return StatusMessage(message=locales.SUCCESS_CART_CLEARED)
