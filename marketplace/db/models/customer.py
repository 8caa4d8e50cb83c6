# marketplace/db/models/customer.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base
from marketplace.db.types import StringArray

INTERESTS = ("music", "art", "sports", "technology", "other")


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    gender = Column(String, nullable=True)
    address = Column(String, nullable=True)
    exam_preferences = Column(StringArray, nullable=True)
    interest_preferences = Column(StringArray, nullable=True)
    account_status = Column(String, nullable=False, default="active", server_default="active")

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="customer", lazy="selectin")
