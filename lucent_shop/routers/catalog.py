# lucent_shop/routers/catalog.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from lucent_shop.dependencies import get_db
from lucent_shop.models.product import ProductType
from lucent_shop.schemas.product import PaginatedProducts, Product
from lucent_shop.services import catalog as catalog_service

router = APIRouter()


@router.get("/products", response_model=PaginatedProducts)
async def get_products_list(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    type: Optional[ProductType] = Query(None),
    search: Optional[str] = Query(None, min_length=1),
    db: Session = Depends(get_db)
):
    """Active products, newest first."""
    return catalog_service.get_products(db, page, size, type=type, search=search)


@router.get("/products/slug/{slug}", response_model=Product)
async def get_product_by_slug(slug: str, db: Session = Depends(get_db)):
    return catalog_service.get_product_by_slug(db, slug)


@router.get("/products/{product_id}", response_model=Product)
async def get_product_details(product_id: int, db: Session = Depends(get_db)):
    return catalog_service.get_product(db, product_id)
