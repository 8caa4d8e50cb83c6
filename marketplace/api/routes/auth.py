# marketplace/api/routes/auth.py
import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from marketplace.core import otp
from marketplace.core.config import get_settings
from marketplace.core.security import create_access_token, get_current_user, hash_password, verify_password
from marketplace.db.base import get_db
from marketplace.db.models.phone_verification import PhoneVerification
from marketplace.db.models.user import User
from marketplace.schemas.user import (
    LoginRequest,
    OtpSendResponse,
    PhoneOtpRequest,
    PhoneOtpVerify,
    TokenResponse,
    UserCreate,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _normalize_phone_or_400(raw: str) -> str:
    try:
        return otp.normalize_phone_number(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _as_aware(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(access_token=create_access_token(user), user=UserResponse.model_validate(user))


@router.post("/register", response_model=UserResponse, status_code=201)
def register(user: UserCreate, db: Session = Depends(get_db)):
    email = user.email.strip().lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")

    phone_number = None
    if user.phone_number:
        phone_number = _normalize_phone_or_400(user.phone_number)
        if db.query(User).filter(User.phone_number == phone_number).first():
            raise HTTPException(status_code=400, detail="Phone number already registered")

    new_user = User(
        email=email,
        name=user.name.strip(),
        password_hash=hash_password(user.password),
        phone_number=phone_number,
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info("Registered user %s", new_user.id)
    return new_user


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email.strip().lower()).first()

    if not user or not verify_password(credentials.password, user.password_hash):
        logger.info("Failed login for %s", credentials.email)
        raise HTTPException(status_code=400, detail="Invalid credentials")

    return _token_response(user)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user


# --------------------------------------------------
# Phone number + one-time code sign in
# --------------------------------------------------
@router.post("/phone/send-otp", response_model=OtpSendResponse)
def send_phone_otp(payload: PhoneOtpRequest, db: Session = Depends(get_db)):
    settings = get_settings()
    phone_number = _normalize_phone_or_400(payload.phone_number)

    # a new code always replaces whatever was pending for the number
    db.query(PhoneVerification).filter(PhoneVerification.phone_number == phone_number).delete()

    code = otp.generate_otp(settings.otp_length)
    db.add(
        PhoneVerification(
            phone_number=phone_number,
            code_hash=otp.hash_otp(code),
            attempts=0,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=settings.otp_expires_seconds),
        )
    )
    db.commit()

    otp.send_otp_sms(phone_number, code)
    return OtpSendResponse(success=True, message="OTP sent successfully to your phone number")


@router.post("/phone/verify", response_model=TokenResponse)
def verify_phone_otp(payload: PhoneOtpVerify, db: Session = Depends(get_db)):
    settings = get_settings()
    phone_number = _normalize_phone_or_400(payload.phone_number)

    verification = (
        db.query(PhoneVerification)
        .filter(PhoneVerification.phone_number == phone_number)
        .order_by(PhoneVerification.id.desc())
        .first()
    )
    if not verification:
        raise HTTPException(status_code=400, detail="OTP not found")

    if _as_aware(verification.expires_at) < datetime.now(timezone.utc):
        db.delete(verification)
        db.commit()
        raise HTTPException(status_code=400, detail="OTP expired")

    if verification.attempts >= settings.otp_allowed_attempts:
        db.delete(verification)
        db.commit()
        raise HTTPException(status_code=403, detail="Too many attempts")

    if not otp.otp_matches(payload.code, verification.code_hash):
        verification.attempts += 1
        db.commit()
        raise HTTPException(status_code=400, detail="Invalid OTP")

    db.delete(verification)

    user = db.query(User).filter(User.phone_number == phone_number).first()
    if not user:
        digits = phone_number.lstrip("+")
        user = User(
            name=phone_number,
            email=f"{digits}@{settings.otp_temp_email_domain}",
            phone_number=phone_number,
            phone_number_verified=True,
        )
        db.add(user)
        logger.info("Creating account for verified phone number %s", phone_number)
    else:
        user.phone_number_verified = True

    db.commit()
    db.refresh(user)

    return _token_response(user)
