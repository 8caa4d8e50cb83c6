# marketplace/api/routes/testimonials.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marketplace.core.security import require_admin
from marketplace.db.base import get_db
from marketplace.db.models.testimonial import Testimonial
from marketplace.db.models.user import User
from marketplace.schemas.testimonial import TestimonialCreate, TestimonialResponse

router = APIRouter(prefix="/testimonials", tags=["testimonials"])

LATEST_LIMIT = 5


# Latest testimonials for the landing page (public)
@router.get("", response_model=List[TestimonialResponse])
def list_testimonials(db: Session = Depends(get_db)):
    return (
        db.query(Testimonial)
        .order_by(Testimonial.created_at.desc(), Testimonial.id.desc())
        .limit(LATEST_LIMIT)
        .all()
    )


@router.post("", response_model=TestimonialResponse, status_code=status.HTTP_201_CREATED)
def create_testimonial(
    testimonial_in: TestimonialCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    testimonial = Testimonial(**testimonial_in.model_dump())
    db.add(testimonial)
    db.commit()
    db.refresh(testimonial)
    return testimonial
