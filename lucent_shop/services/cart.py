# lucent_shop/services/cart.py

import logging

from sqlalchemy.orm import Session

from lucent_shop.core import locales
from lucent_shop.core.config import settings
from lucent_shop.core.exceptions import (
    InactiveProduct, InvalidQuantity, NotFoundError, OutOfStock, ProductNotFound
)
from lucent_shop.crud import cart as crud_cart
from lucent_shop.crud import product as crud_product
from lucent_shop.models.cart import CartItem
from lucent_shop.models.product import Product, is_shippable
from lucent_shop.schemas.cart import CartItemResponse, CartResponse
from lucent_shop.schemas.product import ProductSummary

logger = logging.getLogger(__name__)


def _check_available(product: Product, quantity: int) -> None:
    """
    Re-validates a cart line against the live product row.
    Voice packs and unlimited stock only need the product to be active.
    """
    if not product.is_active:
        raise InactiveProduct()

    if product.tracks_stock:
        if product.stock <= 0:
            raise OutOfStock(locales.ERROR_PRODUCT_SOLD_OUT)
        if quantity > product.stock:
            raise OutOfStock(locales.ERROR_NOT_ENOUGH_STOCK.format(available_quantity=product.stock))


def add_item(db: Session, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
    """
    Adds a product to the cart. A product already in the cart gets
    its quantity increased instead of a second row.
    """
    if quantity <= 0:
        raise InvalidQuantity()

    product = crud_product.get_product(db, product_id)
    if not product:
        raise ProductNotFound()

    existing = crud_cart.get_cart_item_by_product(db, user_id, product_id)
    new_quantity = existing.quantity + quantity if existing else quantity
    _check_available(product, new_quantity)

    item = crud_cart.add_or_update_cart_item(db, user_id=user_id, product_id=product_id, quantity=new_quantity)
    logger.info(f"User {user_id} cart: product {product_id} quantity -> {new_quantity}")
    return item


def update_quantity(db: Session, user_id: int, item_id: int, quantity: int) -> CartItem:
    """Sets the quantity of one cart line. Removal is a separate operation."""
    if quantity <= 0:
        raise InvalidQuantity()

    item = crud_cart.get_cart_item(db, user_id, item_id)
    if not item:
        raise NotFoundError(locales.ERROR_ITEM_NOT_IN_CART, error_code="CART_ITEM_NOT_FOUND")

    _check_available(item.product, quantity)
    return crud_cart.set_quantity(db, item, quantity)


def remove_item(db: Session, user_id: int, item_id: int) -> None:
    if not crud_cart.remove_cart_item(db, user_id=user_id, item_id=item_id):
        raise NotFoundError(locales.ERROR_ITEM_NOT_IN_CART, error_code="CART_ITEM_NOT_FOUND")


def clear(db: Session, user_id: int) -> None:
    crud_cart.clear_cart(db, user_id=user_id)


def count(db: Session, user_id: int) -> int:
    return crud_cart.count_cart_items(db, user_id=user_id)


def get_cart(db: Session, user_id: int) -> CartResponse:
    """
    Cart contents with totals. The shipping fee is charged once when any
    line is a shippable product, same as at checkout.
    """
    items = crud_cart.get_cart_items(db, user_id=user_id)

    response_items = []
    items_price = 0
    has_physical_items = False
    for item in items:
        subtotal = item.product.price * item.quantity
        items_price += subtotal
        has_physical_items = has_physical_items or is_shippable(item.product.type)
        response_items.append(CartItemResponse(
            id=item.id,
            product=ProductSummary.model_validate(item.product),
            quantity=item.quantity,
            subtotal=subtotal,
            created_at=item.created_at,
        ))

    shipping_fee = settings.SHIPPING_FEE if has_physical_items else 0
    return CartResponse(
        items=response_items,
        items_price=items_price,
        shipping_fee=shipping_fee,
        total_price=items_price + shipping_fee,
        has_physical_items=has_physical_items,
    )
