# lucent_shop/models/cart.py
from sqlalchemy import Column, DateTime, Integer, ForeignKey, func
from sqlalchemy.orm import relationship
from sqlalchemy.schema import UniqueConstraint

from lucent_shop.db.session import Base


class CartItem(Base):
    __tablename__ = "cart_items"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User")
    product = relationship("Product", lazy="joined")

    # One row per product per user; repeated adds merge quantities
    __table_args__ = (UniqueConstraint('user_id', 'product_id', name='_user_product_uc'),)
