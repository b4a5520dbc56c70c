# tests/test_cart.py
import pytest

from lucent_shop.core.config import settings
from lucent_shop.core.exceptions import (
    InactiveProduct, InvalidQuantity, NotFoundError, OutOfStock, ProductNotFound
)
from lucent_shop.crud import cart as crud_cart
from lucent_shop.services import cart as cart_service


def test_add_item_merges_existing_row(db_session, test_user, physical_product):
    cart_service.add_item(db_session, test_user.id, physical_product.id, 1)
    cart_service.add_item(db_session, test_user.id, physical_product.id, 2)

    items = crud_cart.get_cart_items(db_session, test_user.id)
    assert len(items) == 1
    assert items[0].quantity == 3


def test_add_item_over_stock_fails(db_session, test_user, physical_product):
    cart_service.add_item(db_session, test_user.id, physical_product.id, 2)

    with pytest.raises(OutOfStock):
        cart_service.add_item(db_session, test_user.id, physical_product.id, 2)

    assert crud_cart.get_cart_items(db_session, test_user.id)[0].quantity == 2


def test_add_sold_out_product(db_session, test_user, make_product):
    sold_out = make_product(stock=0)
    with pytest.raises(OutOfStock) as exc_info:
        cart_service.add_item(db_session, test_user.id, sold_out.id, 1)
    assert exc_info.value.message == "품절된 상품입니다."


def test_add_inactive_product(db_session, test_user, make_product):
    delisted = make_product(is_active=False)
    with pytest.raises(InactiveProduct):
        cart_service.add_item(db_session, test_user.id, delisted.id, 1)


def test_add_missing_product(db_session, test_user):
    with pytest.raises(ProductNotFound):
        cart_service.add_item(db_session, test_user.id, 9999, 1)


def test_voice_pack_ignores_stock(db_session, test_user, voice_pack):
    item = cart_service.add_item(db_session, test_user.id, voice_pack.id, 50)
    assert item.quantity == 50


def test_unlimited_physical_stock(db_session, test_user, make_product):
    unlimited = make_product(stock=None)
    item = cart_service.add_item(db_session, test_user.id, unlimited.id, 100)
    assert item.quantity == 100


@pytest.mark.parametrize("quantity", [0, -1])
def test_update_quantity_rejects_non_positive(db_session, test_user, physical_product, quantity):
    item = cart_service.add_item(db_session, test_user.id, physical_product.id, 1)
    with pytest.raises(InvalidQuantity):
        cart_service.update_quantity(db_session, test_user.id, item.id, quantity)


def test_update_quantity_revalidates_live_product(db_session, test_user, physical_product):
    item = cart_service.add_item(db_session, test_user.id, physical_product.id, 1)

    updated = cart_service.update_quantity(db_session, test_user.id, item.id, 3)
    assert updated.quantity == 3

    with pytest.raises(OutOfStock):
        cart_service.update_quantity(db_session, test_user.id, item.id, 4)

    physical_product.is_active = False
    db_session.commit()
    with pytest.raises(InactiveProduct):
        cart_service.update_quantity(db_session, test_user.id, item.id, 1)


def test_update_foreign_item_not_found(db_session, test_user, other_user, physical_product):
    item = cart_service.add_item(db_session, other_user.id, physical_product.id, 1)
    with pytest.raises(NotFoundError):
        cart_service.update_quantity(db_session, test_user.id, item.id, 2)


def test_remove_and_clear(db_session, test_user, physical_product, voice_pack):
    item = cart_service.add_item(db_session, test_user.id, physical_product.id, 1)
    cart_service.add_item(db_session, test_user.id, voice_pack.id, 1)

    cart_service.remove_item(db_session, test_user.id, item.id)
    assert cart_service.count(db_session, test_user.id) == 1

    with pytest.raises(NotFoundError):
        cart_service.remove_item(db_session, test_user.id, item.id)

    cart_service.clear(db_session, test_user.id)
    assert cart_service.count(db_session, test_user.id) == 0


def test_get_cart_totals(db_session, test_user, physical_product, voice_pack):
    cart_service.add_item(db_session, test_user.id, voice_pack.id, 1)
    cart_service.add_item(db_session, test_user.id, physical_product.id, 2)

    cart = cart_service.get_cart(db_session, test_user.id)

    assert cart.items_price == 5000 + 15000 * 2
    assert cart.has_physical_items is True
    assert cart.shipping_fee == settings.SHIPPING_FEE
    assert cart.total_price == 35000 + settings.SHIPPING_FEE
    assert {i.product.id for i in cart.items} == {voice_pack.id, physical_product.id}


def test_digital_only_cart_has_no_shipping_fee(db_session, test_user, voice_pack):
    cart_service.add_item(db_session, test_user.id, voice_pack.id, 2)

    cart = cart_service.get_cart(db_session, test_user.id)

    assert cart.shipping_fee == 0
    assert cart.total_price == 10000
    assert cart.has_physical_items is False
