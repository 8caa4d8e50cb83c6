# marketplace/schemas/testimonial.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, conint


class TestimonialCreate(BaseModel):
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    user_name: str = Field(..., min_length=1)
    user_image: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class TestimonialResponse(BaseModel):
    id: int
    rating: int
    user_name: str
    user_image: str
    message: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
