"""Password hashing, bearer tokens and the role guards used by the routers."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pwdlib import PasswordHash
from sqlalchemy.orm import Session

from marketplace.core.config import get_settings
from marketplace.db.base import get_db
from marketplace.db.models.user import ROLES, User

logger = logging.getLogger(__name__)

_password_hash = PasswordHash.recommended()
_bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return _password_hash.hash(password)


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    try:
        return _password_hash.verify(password, hashed)
    except Exception:
        logger.warning("Stored password hash could not be verified")
        return False


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expires = now + (expires_delta or timedelta(minutes=settings.auth_token_exp_minutes))
    payload = {
        "sub": str(user.id),
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, settings.auth_token_secret, algorithm=settings.auth_token_algorithm)


def decode_access_token(token: str) -> dict:
    settings = get_settings()
    return jwt.decode(token, settings.auth_token_secret, algorithms=[settings.auth_token_algorithm])


def _unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized()

    try:
        payload = decode_access_token(credentials.credentials)
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        raise _unauthorized("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise _unauthorized("User no longer exists")
    return user


def require_role(role: str):
    """
    Dependency factory for role-gated routes.
    The user passes when their role matches exactly or they are an admin.
    """
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role}")

    def _guard(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role == role or current_user.role == "admin":
            return current_user
        detail = "Admin only" if role == "admin" else f"{role} or admin role required"
        raise HTTPException(status_code=403, detail=detail)

    return _guard


require_admin = require_role("admin")
require_member = require_role("member")
require_customer = require_role("customer")


def is_admin(user: User) -> bool:
    return user.role == "admin"
