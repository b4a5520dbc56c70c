# tests/api/admin/test_admin_orders.py

import json
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from lucent_shop.schemas.order import OrderItemRequest, ShippingInfo
from lucent_shop.services import order as order_service

pytestmark = pytest.mark.asyncio


@pytest.fixture
def placed_order(db_session, test_user, voice_pack, physical_product, shipping_info):
    return order_service.create_order(
        db_session, test_user,
        [OrderItemRequest(product_id=voice_pack.id, quantity=1),
         OrderItemRequest(product_id=physical_product.id, quantity=1)],
        shipping=ShippingInfo(**shipping_info),
    )


async def test_admin_routes_require_admin(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/v1/admin/orders", headers=auth_headers)

    assert response.status_code == 403
    assert response.json()["error_code"] == "UNAUTHORIZED"


async def test_list_and_search(client: AsyncClient, admin_auth_headers: dict, placed_order):
    response = await client.get("/api/v1/admin/orders", headers=admin_auth_headers)
    assert response.json()["total_items"] == 1
    assert response.json()["items"][0]["user_id"] == placed_order.user_id

    by_number = await client.get(
        "/api/v1/admin/orders", params={"search": placed_order.order_number[-6:]}, headers=admin_auth_headers
    )
    assert by_number.json()["total_items"] == 1

    by_status = await client.get("/api/v1/admin/orders", params={"status": "PAID"}, headers=admin_auth_headers)
    assert by_status.json()["total_items"] == 0


async def test_status_walkthrough(client: AsyncClient, admin_auth_headers: dict, placed_order):
    url = f"/api/v1/admin/orders/{placed_order.id}/status"

    paid = await client.patch(url, json={"status": "PAID"}, headers=admin_auth_headers)
    assert paid.status_code == 200
    items = {i["product_type"]: i["item_status"] for i in paid.json()["items"]}
    assert items == {"VOICE_PACK": "DONE", "PHYSICAL_GOODS": "PAID"}

    skip = await client.patch(url, json={"status": "SHIPPING"}, headers=admin_auth_headers)
    assert skip.status_code == 409
    assert skip.json()["error_code"] == "INVALID_STATUS_TRANSITION"

    unknown = await client.patch(url, json={"status": "LOST"}, headers=admin_auth_headers)
    assert unknown.status_code == 422


async def test_bulk_status(client: AsyncClient, admin_auth_headers: dict, placed_order):
    response = await client.patch(
        "/api/v1/admin/orders/bulk-status",
        json={"order_ids": [placed_order.id, 4242], "status": "PAID"},
        headers=admin_auth_headers,
    )

    body = response.json()
    assert response.status_code == 200
    assert body["updated_order_ids"] == [placed_order.id]
    assert list(body["failed"]) == ["4242"]


async def test_item_status_and_shipment(client: AsyncClient, admin_auth_headers: dict, auth_headers: dict, placed_order):
    await client.patch(f"/api/v1/admin/orders/{placed_order.id}/status", json={"status": "PAID"}, headers=admin_auth_headers)
    physical = next(i for i in placed_order.items if i.product_type.value == "PHYSICAL_GOODS")

    item = await client.patch(
        f"/api/v1/admin/orders/{placed_order.id}/items/{physical.id}/status",
        json={"status": "READY_TO_SHIP"}, headers=admin_auth_headers,
    )
    assert item.json()["item_status"] == "READY_TO_SHIP"

    created = await client.post(
        f"/api/v1/admin/orders/items/{physical.id}/shipment",
        json={"recipient_name": "김루센", "recipient_phone": "010", "recipient_address": "서울"},
        headers=admin_auth_headers,
    )
    assert created.status_code == 201
    shipment_id = created.json()["id"]

    updated = await client.patch(
        f"/api/v1/admin/shipments/{shipment_id}",
        json={"shipping_status": "SHIPPED", "tracking_number": "555", "admin_memo": "오전 출고"},
        headers=admin_auth_headers,
    )
    assert updated.json()["shipped_at"] is not None

    customer_view = await client.get(
        f"/api/v1/orders/{placed_order.id}/items/{physical.id}/shipment", headers=auth_headers
    )
    assert customer_view.json()["tracking_number"] == "555"
    assert "admin_memo" not in customer_view.json()


async def test_memo_and_detail(client: AsyncClient, admin_auth_headers: dict, placed_order):
    response = await client.patch(
        f"/api/v1/admin/orders/{placed_order.id}/memo", json={"admin_memo": "입금자명 다름"}, headers=admin_auth_headers
    )
    assert response.json()["admin_memo"] == "입금자명 다름"

    detail = await client.get(f"/api/v1/admin/orders/{placed_order.id}", headers=admin_auth_headers)
    assert detail.json()["admin_memo"] == "입금자명 다름"


async def test_stats_are_cached(client: AsyncClient, admin_auth_headers: dict, placed_order, mock_redis: AsyncMock):
    response = await client.get("/api/v1/admin/orders/stats", headers=admin_auth_headers)

    assert response.json() == {"total_orders": 1, "pending_orders": 1}
    key, value = mock_redis.set.call_args.args
    assert key == "orders:stats"
    assert json.loads(value) == {"total_orders": 1, "pending_orders": 1}

    mock_redis.get.return_value = json.dumps({"total_orders": 7, "pending_orders": 2})
    cached = await client.get("/api/v1/admin/orders/stats", headers=admin_auth_headers)
    assert cached.json() == {"total_orders": 7, "pending_orders": 2}


async def test_recent_orders(client: AsyncClient, admin_auth_headers: dict, placed_order):
    response = await client.get("/api/v1/admin/orders/recent", params={"limit": 3}, headers=admin_auth_headers)
    assert [o["order_number"] for o in response.json()] == [placed_order.order_number]
