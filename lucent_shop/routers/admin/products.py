# lucent_shop/routers/admin/products.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from lucent_shop.dependencies import get_db
from lucent_shop.models.product import ProductType
from lucent_shop.schemas.product import AdminProduct, PaginatedAdminProducts, ProductCreate, ProductUpdate
from lucent_shop.services import catalog as catalog_service

router = APIRouter()


@router.get("", response_model=PaginatedAdminProducts)
async def get_all_products(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    type: Optional[ProductType] = Query(None),
    search: Optional[str] = Query(None, min_length=1),
    db: Session = Depends(get_db)
):
    """[ADMIN] Every product, including deactivated ones."""
    return catalog_service.get_admin_products(db, page, size, type=type, search=search)


@router.post("", response_model=AdminProduct, status_code=status.HTTP_201_CREATED)
async def create_product(product_data: ProductCreate, db: Session = Depends(get_db)):
    return catalog_service.create_product(db, product_data)


@router.patch("/{product_id}", response_model=AdminProduct)
async def update_product(product_id: int, product_data: ProductUpdate, db: Session = Depends(get_db)):
    return catalog_service.update_product(db, product_id, product_data)


@router.delete("/{product_id}", response_model=AdminProduct)
async def deactivate_product(product_id: int, db: Session = Depends(get_db)):
    """[ADMIN] Takes the product off sale. Rows are kept for order history."""
    return catalog_service.deactivate_product(db, product_id)


@router.post("/{product_id}/sample", response_model=AdminProduct)
async def generate_sample(
    product_id: int,
    file: UploadFile = File(..., description="Voice pack ZIP or a single audio file"),
    db: Session = Depends(get_db)
):
    """[ADMIN] Cuts a preview from the uploaded voice pack and attaches it to the product."""
    return await catalog_service.generate_product_sample(db, product_id, file)
