# marketplace/schemas/category.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from marketplace.schemas.common import Pagination


class CategoryMiniResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    parent_category_id: Optional[int] = None
    is_active: bool = True
    is_primary: bool = False

    class Config:
        from_attributes = True


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    parent_category_id: Optional[int] = None
    is_primary: bool = False


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    parent_category_id: Optional[int] = None
    is_active: Optional[bool] = None
    is_primary: Optional[bool] = None

    # fields may be omitted, but these columns can't be cleared
    @field_validator("name", "is_active", "is_primary")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class CategoryResponse(CategoryMiniResponse):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryTreeResponse(CategoryResponse):
    parent: Optional[CategoryMiniResponse] = None
    children: List[CategoryMiniResponse] = []


class CategoryListResponse(BaseModel):
    categories: List[CategoryTreeResponse]
    pagination: Pagination


class CategoryWithExpertCount(CategoryMiniResponse):
    expert_count: int = 0


class CategoryDeleteResponse(BaseModel):
    success: bool
    deleted_category: CategoryResponse
