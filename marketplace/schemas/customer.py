# marketplace/schemas/customer.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from marketplace.schemas.user import UserSummary

Interest = Literal["music", "art", "sports", "technology", "other"]


class CustomerBase(BaseModel):
    gender: Optional[Literal["male", "female", "other"]] = None
    address: Optional[str] = None
    exam_preferences: Optional[List[str]] = None
    interest_preferences: Optional[List[Interest]] = None


class CustomerCreate(CustomerBase):
    # admins may create a profile on behalf of another user
    user_id: Optional[int] = None


class CustomerUpdate(CustomerBase):
    pass


class CustomerResponse(CustomerBase):
    id: int
    user_id: int
    account_status: str
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True
