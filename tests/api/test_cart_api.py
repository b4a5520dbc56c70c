# tests/api/test_cart_api.py

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from jose import jwt

from lucent_shop.core.config import settings
from lucent_shop.core.signing import sign_download_url

pytestmark = pytest.mark.asyncio


async def test_cart_requires_auth(client: AsyncClient):
    response = await client.get("/api/v1/cart")

    assert response.status_code == 401
    assert response.json()["error_code"] == "UNAUTHENTICATED"


async def test_invalid_token(client: AsyncClient):
    response = await client.get("/api/v1/cart", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


async def test_cart_flow(client: AsyncClient, auth_headers: dict, voice_pack, physical_product):
    response = await client.post("/api/v1/cart/items", json={"product_id": voice_pack.id}, headers=auth_headers)
    assert response.status_code == 201

    response = await client.post(
        "/api/v1/cart/items", json={"product_id": physical_product.id, "quantity": 2}, headers=auth_headers
    )
    cart = response.json()
    assert cart["items_price"] == 35000
    assert cart["shipping_fee"] == settings.SHIPPING_FEE
    assert cart["total_price"] == 35000 + settings.SHIPPING_FEE

    count = await client.get("/api/v1/cart/count", headers=auth_headers)
    assert count.json() == {"count": 2}

    physical_line = next(i for i in cart["items"] if i["product"]["id"] == physical_product.id)
    response = await client.patch(
        f"/api/v1/cart/items/{physical_line['id']}", json={"quantity": 1}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["items_price"] == 20000

    response = await client.delete(f"/api/v1/cart/items/{physical_line['id']}", headers=auth_headers)
    assert response.json()["status"] == "ok"

    response = await client.delete("/api/v1/cart", headers=auth_headers)
    assert response.status_code == 200
    assert (await client.get("/api/v1/cart", headers=auth_headers)).json()["items"] == []


async def test_cart_errors_use_error_envelope(client: AsyncClient, auth_headers: dict, physical_product):
    response = await client.post(
        "/api/v1/cart/items", json={"product_id": physical_product.id, "quantity": 4}, headers=auth_headers
    )
    assert response.status_code == 409
    body = response.json()
    assert body["status"] == "error"
    assert body["error_code"] == "OUT_OF_STOCK"
    assert "3" in body["message"]


async def test_zero_quantity_update(client: AsyncClient, auth_headers: dict, physical_product):
    added = await client.post("/api/v1/cart/items", json={"product_id": physical_product.id}, headers=auth_headers)
    item_id = added.json()["items"][0]["id"]

    response = await client.patch(f"/api/v1/cart/items/{item_id}", json={"quantity": 0}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_QUANTITY"


async def test_cannot_touch_other_users_cart(
    client: AsyncClient, auth_headers: dict, other_auth_headers: dict, physical_product
):
    added = await client.post("/api/v1/cart/items", json={"product_id": physical_product.id}, headers=other_auth_headers)
    item_id = added.json()["items"][0]["id"]

    response = await client.delete(f"/api/v1/cart/items/{item_id}", headers=auth_headers)
    assert response.status_code == 404


async def test_download_link_is_not_a_login(client: AsyncClient, admin_user, test_user):
    token = sign_download_url(admin_user.id, test_user.id).url.rsplit("/", 1)[1]

    response = await client.get("/api/v1/admin/orders", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error_code"] == "UNAUTHENTICATED"


async def test_token_without_access_type_rejected(client: AsyncClient, admin_user):
    expire = datetime.now(timezone.utc) + timedelta(minutes=5)
    for claims in ({"sub": str(admin_user.id)}, {"sub": str(admin_user.id), "type": "access", "purpose": "download"}):
        token = jwt.encode({**claims, "exp": expire}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

        response = await client.get("/api/v1/admin/orders", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
