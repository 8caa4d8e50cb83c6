# marketplace/db/models/specialization.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import relationship

from marketplace.db.base import Base


class Specialization(Base):
    """Tags an expert with a category they practise in."""

    __tablename__ = "specializations"
    __table_args__ = (
        UniqueConstraint("expert_id", "category_id", name="uq_specializations_expert_category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    expert_id = Column(Integer, ForeignKey("experts.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    is_primary = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    expert = relationship("Expert", back_populates="specializations", lazy="selectin")
    category = relationship("Category", back_populates="specializations", lazy="selectin")
