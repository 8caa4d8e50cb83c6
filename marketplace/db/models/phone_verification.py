# marketplace/db/models/phone_verification.py
from sqlalchemy import Column, DateTime, Integer, String, func

from marketplace.db.base import Base


class PhoneVerification(Base):
    """
    Pending one-time code for a phone number.
    Only the SHA-256 digest of the code is stored.
    """
    __tablename__ = "phone_verifications"

    id = Column(Integer, primary_key=True, index=True)
    phone_number = Column(String, nullable=False, index=True)
    code_hash = Column(String, nullable=False)
    attempts = Column(Integer, nullable=False, default=0)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
