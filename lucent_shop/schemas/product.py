# lucent_shop/schemas/product.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from lucent_shop.models.product import ProductType
from lucent_shop.schemas.common import PaginatedResponse


class ProductSummary(BaseModel):
    """Product fields embedded in cart lines."""
    id: int
    name: str
    slug: str
    type: ProductType
    price: int
    stock: Optional[int] = None
    is_active: bool

    class Config:
        from_attributes = True


class Product(ProductSummary):
    description: Optional[str] = None
    sample_audio_url: Optional[str] = None
    created_at: datetime


class AdminProduct(Product):
    """Admin view; includes the protected asset location."""
    digital_file_url: Optional[str] = None
    updated_at: datetime


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, pattern=r"^[a-z0-9-]+$")
    description: Optional[str] = None
    type: ProductType
    price: int = Field(..., ge=0)
    stock: Optional[int] = Field(None, ge=0)
    is_active: bool = True
    digital_file_url: Optional[str] = None
    sample_audio_url: Optional[str] = None

    @model_validator(mode="after")
    def voice_pack_has_no_stock(self):
        # Voice packs are unlimited downloads
        if self.type == ProductType.VOICE_PACK:
            self.stock = None
        return self


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, min_length=1, pattern=r"^[a-z0-9-]+$")
    description: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    digital_file_url: Optional[str] = None
    sample_audio_url: Optional[str] = None


class PaginatedProducts(PaginatedResponse[Product]):
    pass

class PaginatedAdminProducts(PaginatedResponse[AdminProduct]):
    pass
