# lucent_shop/models/event_log.py
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, func

from lucent_shop.db.session import Base

class EventLog(Base):
    """Append-only audit trail. Rows are never updated or deleted by the app."""
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)

    # e.g. 'order.created', 'order.status.paid', 'digital_product.download'
    event_type = Column(String, nullable=False, index=True)
    # First segment of event_type unless given explicitly
    event_category = Column(String, nullable=False, index=True)
    severity = Column(String, nullable=False, default="info", server_default="info", index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    admin_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    resource_type = Column(String, nullable=True)
    resource_id = Column(String, nullable=True)

    message = Column(Text, nullable=False)
    # 'metadata' is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)
    changes = Column(JSON, nullable=True)
    ip_address = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
