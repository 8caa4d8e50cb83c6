# marketplace/schemas/specialization.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from marketplace.schemas.category import CategoryMiniResponse
from marketplace.schemas.common import Pagination
from marketplace.schemas.user import UserBrief


class SpecializationCreate(BaseModel):
    expert_id: int
    category_id: int
    is_primary: bool = False


class SpecializationUpdate(BaseModel):
    is_primary: Optional[bool] = None


class CategoryWithParent(CategoryMiniResponse):
    parent: Optional[CategoryMiniResponse] = None


class ExpertMini(BaseModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    average_rating: Optional[float] = None
    user: Optional[UserBrief] = None

    class Config:
        from_attributes = True


class SpecializationResponse(BaseModel):
    id: int
    expert_id: int
    category_id: int
    is_primary: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SpecializationWithCategory(SpecializationResponse):
    category: CategoryWithParent


class SpecializationDetail(SpecializationWithCategory):
    expert: ExpertMini


class SpecializationListResponse(BaseModel):
    specializations: List[SpecializationDetail]
    pagination: Pagination


class SpecializationDeleteResponse(BaseModel):
    success: bool
    deleted_specialization: SpecializationResponse
