# lucent_shop/models/user.py

from sqlalchemy import Column, Integer, String, DateTime, func

from lucent_shop.db.session import Base

class User(Base):
    """Shop profile. Sign-in itself is handled by the external auth provider."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    main_address = Column(String, nullable=True)
    detail_address = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
