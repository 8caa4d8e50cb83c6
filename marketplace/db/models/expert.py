# marketplace/db/models/expert.py
from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import relationship

from marketplace.db.base import Base
from marketplace.db.types import StringArray

ACCOUNT_STATUSES = ("active", "inactive", "suspended")
VERIFICATION_STATUSES = ("pending", "verified", "rejected")


class Expert(Base):
    __tablename__ = "experts"
    __table_args__ = (
        CheckConstraint("average_rating >= 0 AND average_rating <= 5", name="average_rating_check"),
        CheckConstraint("per_hour_rate >= 0", name="per_hour_rate_check"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    # Profile
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    dob = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    state = Column(String, nullable=True)
    city = Column(String, nullable=True)
    pin_code = Column(String, nullable=True)
    bio = Column(String, nullable=True)
    demo_video_url = Column(String, nullable=True)

    skills = Column(StringArray, nullable=True)
    languages = Column(StringArray, nullable=True)
    social_media_links = Column(JSON, nullable=True)
    experiences = Column(JSON, nullable=True)
    payment_account = Column(JSON, nullable=True)

    # Status
    account_status = Column(String, nullable=False, default="active", server_default="active")
    verification_status = Column(String, nullable=False, default="pending", server_default="pending")

    # Stats
    total_sessions = Column(Integer, nullable=True, default=0)
    per_hour_rate = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    average_rating = Column(Numeric(3, 2, asdecimal=False), nullable=True)
    years_of_experience = Column(Integer, nullable=True)

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="expert", lazy="selectin")
    specializations = relationship(
        "Specialization",
        back_populates="expert",
        order_by="Specialization.is_primary.desc(), Specialization.id",
        lazy="selectin",
        passive_deletes=True,
    )
