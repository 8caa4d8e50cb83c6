# marketplace/db/models/user.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base

ROLES = ("customer", "member", "admin")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    email_verified = Column(Boolean, nullable=False, default=False)
    phone_number = Column(String, unique=True, index=True, nullable=True)
    phone_number_verified = Column(Boolean, nullable=False, default=False)
    image = Column(String, nullable=True)

    # OTP-only accounts never set a password
    password_hash = Column(String, nullable=True)
    role = Column(String, nullable=False, default="customer", server_default="customer")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    expert = relationship(
        "Expert",
        back_populates="user",
        uselist=False,
    )
    customer = relationship(
        "Customer",
        back_populates="user",
        uselist=False,
    )
