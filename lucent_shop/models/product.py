# lucent_shop/models/product.py
import enum

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Enum, Integer, String, Text, func

from lucent_shop.db.session import Base


class ProductType(str, enum.Enum):
    VOICE_PACK = "VOICE_PACK"
    PHYSICAL_GOODS = "PHYSICAL_GOODS"
    BUNDLE = "BUNDLE"


# Types that are shipped, carry stock and trigger the shipping fee.
# A BUNDLE always contains physical goods.
SHIPPABLE_TYPES = frozenset({ProductType.PHYSICAL_GOODS, ProductType.BUNDLE})


def is_shippable(product_type) -> bool:
    return ProductType(product_type) in SHIPPABLE_TYPES


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(ProductType, name="product_type"), nullable=False)

    # Integer KRW
    price = Column(Integer, nullable=False)
    # NULL means unlimited
    stock = Column(Integer, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False, server_default='true')

    digital_file_url = Column(String, nullable=True)
    sample_audio_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (CheckConstraint("stock IS NULL OR stock >= 0", name="ck_products_stock_non_negative"),)

    @property
    def tracks_stock(self) -> bool:
        return is_shippable(self.type) and self.stock is not None
