# marketplace/schemas/expert.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator

from marketplace.schemas.category import CategoryMiniResponse
from marketplace.schemas.common import Pagination
from marketplace.schemas.user import UserSummary

Gender = Literal["male", "female", "other"]
Language = Literal["hindi", "english"]
AccountStatus = Literal["active", "inactive", "suspended"]
VerificationStatus = Literal["pending", "verified", "rejected"]


class SocialMediaLink(BaseModel):
    platform: str
    url: AnyHttpUrl


class Experience(BaseModel):
    company: str
    position: str
    start_date: str
    end_date: Optional[str] = None
    description: str
    skills: List[str] = []
    employment_type: Literal["full-time", "part-time", "contract", "freelance"]
    is_current: bool


class PaymentAccount(BaseModel):
    account_type: Literal["bank", "upi"]
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    bank_name: Optional[str] = None
    branch_name: Optional[str] = None
    upi_id: Optional[str] = None
    account_holder_name: str
    is_verified: bool = False


# Fields an expert may edit on their own profile
class ExpertProfileFields(BaseModel):
    dob: Optional[str] = None
    gender: Optional[Gender] = None
    state: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    pin_code: Optional[str] = Field(None, max_length=10)
    bio: Optional[str] = Field(None, max_length=1000)
    demo_video_url: Optional[AnyHttpUrl] = None
    payment_account: Optional[PaymentAccount] = None
    per_hour_rate: Optional[float] = Field(None, ge=0)
    years_of_experience: Optional[int] = Field(None, ge=0)


class ExpertCreate(ExpertProfileFields):
    user_id: int
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    skills: List[str] = []
    languages: List[Language] = []
    social_media_links: List[SocialMediaLink] = []
    experiences: List[Experience] = []


class ExpertUpdate(ExpertProfileFields):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    skills: Optional[List[str]] = None
    languages: Optional[List[Language]] = None
    social_media_links: Optional[List[SocialMediaLink]] = None
    experiences: Optional[List[Experience]] = None
    # admin only; silently dropped for everyone else
    account_status: Optional[AccountStatus] = None
    verification_status: Optional[VerificationStatus] = None

    @field_validator("account_status", "verification_status")
    @classmethod
    def status_not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ExpertStatusUpdate(BaseModel):
    account_status: Optional[AccountStatus] = None
    verification_status: Optional[VerificationStatus] = None


class ExpertRatingUpdate(BaseModel):
    average_rating: float = Field(..., ge=0, le=5)
    total_sessions: int = Field(..., ge=0)


class ExpertSpecializationItem(BaseModel):
    id: int
    is_primary: bool
    category: CategoryMiniResponse

    class Config:
        from_attributes = True


class ExpertResponse(BaseModel):
    id: int
    user_id: int

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[str] = None
    gender: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    pin_code: Optional[str] = None
    bio: Optional[str] = None
    demo_video_url: Optional[str] = None

    skills: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    social_media_links: Optional[List[dict]] = None
    experiences: Optional[List[dict]] = None
    payment_account: Optional[dict] = None

    account_status: str
    verification_status: str
    total_sessions: Optional[int] = 0
    per_hour_rate: Optional[float] = None
    average_rating: Optional[float] = None
    years_of_experience: Optional[int] = None

    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    specializations: List[ExpertSpecializationItem] = []

    class Config:
        from_attributes = True


class ExpertWithUserResponse(ExpertResponse):
    user: Optional[UserSummary] = None


class ExpertListResponse(BaseModel):
    experts: List[ExpertWithUserResponse]
    pagination: Pagination


class ExpertStatistics(BaseModel):
    total_experts: int
    verified_experts: int
    pending_experts: int
    active_experts: int
    rejected_experts: int
    inactive_experts: int


class ExpertDeleteResponse(BaseModel):
    success: bool
    deleted_expert: ExpertResponse
