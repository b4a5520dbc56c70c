# lucent_shop/routers/admin/__init__.py

from fastapi import APIRouter, Depends

from lucent_shop.dependencies import get_admin_user

from . import (
    logs,
    orders,
    products,
    shipments,
)

# Every endpoint below requires an admin (ADMIN_EMAILS).
router = APIRouter(
    tags=["Admin"],
    dependencies=[Depends(get_admin_user)]
)

# /admin/orders, /admin/orders/{id}, /admin/orders/items/{item_id}/shipment
router.include_router(orders.router, prefix="/orders")

# /admin/shipments/{id}
router.include_router(shipments.router, prefix="/shipments")

# /admin/products, /admin/products/{id}/sample
router.include_router(products.router, prefix="/products")

# /admin/logs, /admin/logs/stats
router.include_router(logs.router, prefix="/logs")
