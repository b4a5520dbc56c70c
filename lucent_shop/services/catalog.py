# lucent_shop/services/catalog.py

import logging

from fastapi import UploadFile
from sqlalchemy.orm import Session

from lucent_shop.core import locales
from lucent_shop.core.exceptions import ProductNotFound, ValidationError
from lucent_shop.crud import product as crud_product
from lucent_shop.models.product import Product, ProductType
from lucent_shop.schemas.product import (
    AdminProduct, PaginatedAdminProducts, PaginatedProducts, ProductCreate, ProductUpdate
)
from lucent_shop.schemas.product import Product as ProductSchema
from lucent_shop.services import sample_generation
from lucent_shop.services import storage

logger = logging.getLogger(__name__)


# --- Public catalog ---

def get_products(db: Session, page: int, size: int, type: ProductType | None = None, search: str | None = None) -> PaginatedProducts:
    skip = (page - 1) * size
    products = crud_product.get_products(db, skip=skip, limit=size, active_only=True, type=type, search=search)
    total = crud_product.count_products(db, active_only=True, type=type, search=search)
    return PaginatedProducts.build(
        items=[ProductSchema.model_validate(p) for p in products],
        total_items=total, page=page, size=size,
    )


def get_product(db: Session, product_id: int) -> Product:
    """Active product by id; inactive products are not visible to customers."""
    product = crud_product.get_product(db, product_id)
    if not product or not product.is_active:
        raise ProductNotFound()
    return product


def get_product_by_slug(db: Session, slug: str) -> Product:
    product = crud_product.get_product_by_slug(db, slug)
    if not product or not product.is_active:
        raise ProductNotFound()
    return product


# --- Admin ---

def get_admin_products(db: Session, page: int, size: int, type: ProductType | None = None, search: str | None = None) -> PaginatedAdminProducts:
    skip = (page - 1) * size
    products = crud_product.get_products(db, skip=skip, limit=size, active_only=False, type=type, search=search)
    total = crud_product.count_products(db, active_only=False, type=type, search=search)
    return PaginatedAdminProducts.build(
        items=[AdminProduct.model_validate(p) for p in products],
        total_items=total, page=page, size=size,
    )


def get_product_for_admin(db: Session, product_id: int) -> Product:
    product = crud_product.get_product(db, product_id)
    if not product:
        raise ProductNotFound()
    return product


def _ensure_slug_free(db: Session, slug: str, product_id: int | None = None) -> None:
    existing = crud_product.get_product_by_slug(db, slug)
    if existing and existing.id != product_id:
        raise ValidationError(locales.ERROR_SLUG_TAKEN, error_code="SLUG_TAKEN")


def create_product(db: Session, data: ProductCreate) -> Product:
    _ensure_slug_free(db, data.slug)
    product = crud_product.create_product(db, **data.model_dump())
    logger.info(f"Product {product.id} '{product.name}' ({product.type.value}) created.")
    return product


def update_product(db: Session, product_id: int, data: ProductUpdate) -> Product:
    """Partial update; only fields present in the request are written."""
    product = get_product_for_admin(db, product_id)
    changes = data.model_dump(exclude_unset=True)

    if changes.get("slug"):
        _ensure_slug_free(db, changes["slug"], product_id=product.id)
    if product.type == ProductType.VOICE_PACK:
        changes.pop("stock", None)

    product = crud_product.update_product(db, product, **changes)
    logger.info(f"Product {product.id} updated: {sorted(changes)}")
    return product


def deactivate_product(db: Session, product_id: int) -> Product:
    """Products are never deleted; order items keep pointing at them."""
    product = get_product_for_admin(db, product_id)
    product = crud_product.update_product(db, product, is_active=False)
    logger.info(f"Product {product.id} deactivated.")
    return product


async def generate_product_sample(db: Session, product_id: int, file: UploadFile) -> Product:
    product = get_product_for_admin(db, product_id)
    if product.type != ProductType.VOICE_PACK:
        raise ValidationError(locales.ERROR_SAMPLE_NOT_VOICE_PACK, error_code="NOT_VOICE_PACK")

    data = await file.read()
    sample = await sample_generation.generate_sample(data, file.filename or "")
    sample_url = await storage.save_sample(product.id, sample)
    return crud_product.update_product(db, product, sample_audio_url=sample_url)
