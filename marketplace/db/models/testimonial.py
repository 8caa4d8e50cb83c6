# marketplace/db/models/testimonial.py
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, func

from marketplace.db.base import Base


class Testimonial(Base):
    __tablename__ = "testimonials"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="testimonial_rating_check"),
    )

    id = Column(Integer, primary_key=True, index=True)
    rating = Column(Integer, nullable=False)   # 1..5
    user_name = Column(String, nullable=False)
    user_image = Column(String, nullable=False)  # image URL or storage path
    message = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
