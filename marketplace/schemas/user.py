# marketplace/schemas/user.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

Role = Literal["customer", "member", "admin"]


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    phone_number: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# email is plain str on output: OTP sign-ups carry a placeholder address
class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str
    phone_number: Optional[str] = None
    phone_number_verified: bool = False
    image: Optional[str] = None

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    phone_number: Optional[str] = None
    image: Optional[str] = None

    class Config:
        from_attributes = True


class UserBrief(BaseModel):
    id: int
    name: str
    image: Optional[str] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class PhoneOtpRequest(BaseModel):
    phone_number: str


class PhoneOtpVerify(BaseModel):
    phone_number: str
    code: str = Field(..., pattern=r"^\d+$")


class OtpSendResponse(BaseModel):
    success: bool
    message: Optional[str] = None


class UserListItem(BaseModel):
    id: int
    email: str
    name: str
    role: str
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserRoleUpdate(BaseModel):
    role: Role
