# tests/test_shipment.py
import pytest

from lucent_shop.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from lucent_shop.models.event_log import EventLog
from lucent_shop.models.order import ShippingStatus
from lucent_shop.models.product import ProductType
from lucent_shop.schemas.order import OrderItemRequest, ShipmentCreate, ShipmentUpdate, ShippingInfo
from lucent_shop.services import order as order_service
from lucent_shop.services import shipment as shipment_service


@pytest.fixture
def order(db_session, test_user, voice_pack, physical_product, shipping_info):
    return order_service.create_order(
        db_session, test_user,
        [OrderItemRequest(product_id=voice_pack.id, quantity=1),
         OrderItemRequest(product_id=physical_product.id, quantity=1)],
        shipping=ShippingInfo(**shipping_info),
    )


@pytest.fixture
def shipment_data():
    return ShipmentCreate(recipient_name="김루센", recipient_phone="010-1234-5678", recipient_address="서울 강남구")


def _item(order, product_type):
    return next(i for i in order.items if i.product_type == product_type)


def test_create_and_track_shipment(db_session, order, shipment_data, admin_user):
    item = _item(order, ProductType.PHYSICAL_GOODS)

    shipment = shipment_service.create_shipment(db_session, item.id, shipment_data, admin_user)
    assert shipment.shipping_status == ShippingStatus.PREPARING
    assert shipment.shipped_at is None

    shipment = shipment_service.update_shipment(db_session, shipment.id, ShipmentUpdate(
        carrier="CJ대한통운", tracking_number="1234567890", shipping_status=ShippingStatus.SHIPPED,
    ), admin_user)
    assert shipment.shipped_at is not None
    assert shipment.delivered_at is None

    shipment = shipment_service.update_shipment(
        db_session, shipment.id, ShipmentUpdate(shipping_status=ShippingStatus.DELIVERED), admin_user
    )
    assert shipment.delivered_at is not None
    assert shipment.tracking_number == "1234567890"

    events = [e.event_type for e in db_session.query(EventLog).filter(EventLog.resource_type == "shipment").order_by(EventLog.id)]
    assert events == ["order.shipment.created", "order.shipment.updated", "order.shipment.updated"]


def test_voice_pack_has_no_shipment(db_session, order, shipment_data, admin_user):
    with pytest.raises(ValidationError):
        shipment_service.create_shipment(db_session, _item(order, ProductType.VOICE_PACK).id, shipment_data, admin_user)


def test_one_shipment_per_item(db_session, order, shipment_data, admin_user):
    item = _item(order, ProductType.PHYSICAL_GOODS)
    shipment_service.create_shipment(db_session, item.id, shipment_data, admin_user)

    with pytest.raises(ValidationError):
        shipment_service.create_shipment(db_session, item.id, shipment_data, admin_user)


def test_owner_reads_shipment(db_session, order, shipment_data, admin_user, test_user, other_user):
    item = _item(order, ProductType.PHYSICAL_GOODS)
    created = shipment_service.create_shipment(db_session, item.id, shipment_data, admin_user)

    assert shipment_service.get_shipment_for_item(db_session, order.id, item.id, user=test_user).id == created.id
    with pytest.raises(AuthorizationError):
        shipment_service.get_shipment_for_item(db_session, order.id, item.id, user=other_user)


def test_missing_item_and_shipment(db_session, order, shipment_data, test_user):
    with pytest.raises(NotFoundError):
        shipment_service.create_shipment(db_session, 999, shipment_data)
    with pytest.raises(NotFoundError):
        shipment_service.update_shipment(db_session, 999, ShipmentUpdate(carrier="x"))
    with pytest.raises(NotFoundError):
        shipment_service.get_shipment_for_item(
            db_session, order.id, _item(order, ProductType.PHYSICAL_GOODS).id, user=test_user
        )
