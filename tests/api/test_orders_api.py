# tests/api/test_orders_api.py

import pytest
from httpx import AsyncClient

from lucent_shop.core.config import settings
from lucent_shop.crud import product as crud_product
from lucent_shop.models.order import OrderStatus
from lucent_shop.services import order_status as order_status_service

pytestmark = pytest.mark.asyncio


async def _buy(client, headers, items, shipping=None):
    payload = {"items": items}
    if shipping:
        payload["shipping"] = shipping
    return await client.post("/api/v1/orders", json=payload, headers=headers)


async def test_buy_now(client: AsyncClient, auth_headers: dict, voice_pack, physical_product, shipping_info, db_session):
    response = await _buy(
        client, auth_headers,
        [{"product_id": voice_pack.id, "quantity": 1}, {"product_id": physical_product.id, "quantity": 2}],
        shipping_info,
    )

    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "PENDING"
    assert order["status_label"] == "입금대기"
    assert order["can_be_cancelled"] is True
    assert order["total_price"] == 35000 + settings.SHIPPING_FEE
    assert len(order["items"]) == 2

    db_session.expire_all()
    assert crud_product.get_product(db_session, physical_product.id).stock == 1


async def test_insufficient_stock(client: AsyncClient, auth_headers: dict, physical_product, shipping_info):
    response = await _buy(client, auth_headers, [{"product_id": physical_product.id, "quantity": 5}], shipping_info)

    assert response.status_code == 409
    assert response.json()["error_code"] == "INSUFFICIENT_STOCK"

    history = await client.get("/api/v1/orders", headers=auth_headers)
    assert history.json()["total_items"] == 0


async def test_missing_shipping(client: AsyncClient, auth_headers: dict, physical_product):
    response = await _buy(client, auth_headers, [{"product_id": physical_product.id, "quantity": 1}])

    assert response.status_code == 400
    assert response.json()["error_code"] == "SHIPPING_REQUIRED"


async def test_zero_quantity_rejected_by_schema(client: AsyncClient, auth_headers: dict, voice_pack):
    response = await _buy(client, auth_headers, [{"product_id": voice_pack.id, "quantity": 0}])
    assert response.status_code == 422


async def test_checkout_from_cart(client: AsyncClient, auth_headers: dict, voice_pack):
    await client.post("/api/v1/cart/items", json={"product_id": voice_pack.id, "quantity": 2}, headers=auth_headers)

    response = await client.post("/api/v1/orders/checkout", json={}, headers=auth_headers)

    assert response.status_code == 201
    assert response.json()["total_price"] == 10000
    assert (await client.get("/api/v1/cart/count", headers=auth_headers)).json()["count"] == 0


async def test_order_history_and_detail(
    client: AsyncClient, auth_headers: dict, other_auth_headers: dict, voice_pack
):
    created = (await _buy(client, auth_headers, [{"product_id": voice_pack.id, "quantity": 1}])).json()

    history = await client.get("/api/v1/orders", headers=auth_headers)
    assert [o["id"] for o in history.json()["items"]] == [created["id"]]

    detail = await client.get(f"/api/v1/orders/{created['id']}", headers=auth_headers)
    assert detail.json()["order_number"] == created["order_number"]

    foreign = await client.get(f"/api/v1/orders/{created['id']}", headers=other_auth_headers)
    assert foreign.status_code == 403

    missing = await client.get("/api/v1/orders/99999", headers=auth_headers)
    assert missing.status_code == 404


async def test_cancel(client: AsyncClient, auth_headers: dict, voice_pack):
    created = (await _buy(client, auth_headers, [{"product_id": voice_pack.id, "quantity": 1}])).json()

    response = await client.post(
        f"/api/v1/orders/{created['id']}/cancel", json={"reason": "주소 변경"}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "CANCELLED"
    assert body["cancel_reason"] == "주소 변경"
    assert body["can_be_cancelled"] is False

    again = await client.post(f"/api/v1/orders/{created['id']}/cancel", headers=auth_headers)
    assert again.status_code == 400
    assert again.json()["error_code"] == "ORDER_CANNOT_CANCEL"


async def test_download_flow(
    client: AsyncClient, auth_headers: dict, other_auth_headers: dict, voice_pack, admin_user, db_session
):
    created = (await _buy(client, auth_headers, [{"product_id": voice_pack.id, "quantity": 1}])).json()
    item_id = created["items"][0]["id"]
    url = f"/api/v1/orders/{created['id']}/items/{item_id}/download"

    not_paid = await client.post(url, headers=auth_headers)
    assert not_paid.status_code == 403
    assert not_paid.json()["error_code"] == "DOWNLOAD_NOT_READY"

    order_status_service.update_status(db_session, created["id"], OrderStatus.PAID, admin_user)

    foreign = await client.post(url, headers=other_auth_headers)
    assert foreign.status_code == 403

    response = await client.post(url, headers=auth_headers)
    assert response.status_code == 200
    link = response.json()
    assert link["filename"] == "Lucent Voice Pack Vol_1.zip"

    token_path = link["download_url"].replace(settings.PUBLIC_BASE_URL, "")
    redirect = await client.get(token_path)
    assert redirect.status_code == 307
    assert redirect.headers["location"] == voice_pack.digital_file_url

    voice_packs = await client.get("/api/v1/orders/voice-packs", headers=auth_headers)
    assert voice_packs.json()[0]["download_count"] == 1


async def test_invalid_download_token(client: AsyncClient, db_session):
    response = await client.get("/api/v1/downloads/bogus")

    assert response.status_code == 403
    assert response.json()["error_code"] == "DOWNLOAD_LINK_INVALID"


async def test_public_catalog(client: AsyncClient, voice_pack, make_product):
    hidden = make_product(is_active=False, slug="hidden")

    listing = await client.get("/api/v1/products")
    assert [p["id"] for p in listing.json()["items"]] == [voice_pack.id]
    assert "digital_file_url" not in listing.json()["items"][0]

    by_slug = await client.get(f"/api/v1/products/slug/{voice_pack.slug}")
    assert by_slug.json()["id"] == voice_pack.id

    assert (await client.get(f"/api/v1/products/{hidden.id}")).status_code == 404
