# lucent_shop/models/order.py
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from lucent_shop.db.session import Base
from lucent_shop.models.product import ProductType


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"              # waiting for the bank transfer
    PAID = "PAID"                    # transfer confirmed by an admin
    MAKING = "MAKING"
    READY_TO_SHIP = "READY_TO_SHIP"
    SHIPPING = "SHIPPING"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class ShippingStatus(str, enum.Enum):
    PREPARING = "PREPARING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    # Quoted by customers as the bank-transfer memo
    order_number = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(Enum(OrderStatus, name="order_status"), nullable=False, default=OrderStatus.PENDING, index=True)
    total_price = Column(Integer, nullable=False)

    buyer_name = Column(String, nullable=True)
    buyer_email = Column(String, nullable=True)
    buyer_phone = Column(String, nullable=True)

    # Filled only when the order contains shippable goods
    shipping_name = Column(String, nullable=True)
    shipping_phone = Column(String, nullable=True)
    shipping_main_address = Column(String, nullable=True)
    shipping_detail_address = Column(String, nullable=True)
    shipping_memo = Column(String, nullable=True)

    admin_memo = Column(Text, nullable=True)
    cancel_reason = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    # Snapshot taken at order time; catalog edits never touch these
    product_name = Column(String, nullable=False)
    product_type = Column(Enum(ProductType, name="product_type"), nullable=False)
    price_snapshot = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    # Units taken from product stock at order time; returned on cancellation
    stock_reserved = Column(Integer, nullable=False, default=0, server_default='0')

    item_status = Column(Enum(OrderStatus, name="order_status"), nullable=False, default=OrderStatus.PENDING)

    download_count = Column(Integer, nullable=False, default=0, server_default='0')
    last_downloaded_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")
    shipment = relationship("Shipment", back_populates="order_item", uselist=False)

    @property
    def subtotal(self) -> int:
        return self.price_snapshot * self.quantity


class Shipment(Base):
    __tablename__ = "shipments"

    id = Column(Integer, primary_key=True, index=True)
    order_item_id = Column(Integer, ForeignKey("order_items.id", ondelete="CASCADE"), unique=True, nullable=False)

    recipient_name = Column(String, nullable=False)
    recipient_phone = Column(String, nullable=False)
    recipient_address = Column(String, nullable=False)
    delivery_memo = Column(String, nullable=True)

    carrier = Column(String, nullable=True)
    tracking_number = Column(String, nullable=True)
    shipping_status = Column(Enum(ShippingStatus, name="shipping_status"), nullable=False, default=ShippingStatus.PREPARING)
    admin_memo = Column(Text, nullable=True)

    shipped_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    order_item = relationship("OrderItem", back_populates="shipment")
