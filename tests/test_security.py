"""Unit tests for tokens, password hashing, role guards and OTP helpers."""

from datetime import timedelta

import jwt
import pytest
from fastapi import HTTPException

from marketplace.core import otp
from marketplace.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    require_admin,
    require_customer,
    require_member,
    require_role,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret-pass", None)


def test_access_token_carries_subject_and_role(member_user):
    payload = decode_access_token(create_access_token(member_user))
    assert payload["sub"] == str(member_user.id)
    assert payload["role"] == "member"

    expired = create_access_token(member_user, expires_delta=timedelta(seconds=-10))
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(expired)


def test_role_guards(admin_user, member_user, customer_user):
    assert require_member(current_user=member_user) is member_user
    assert require_member(current_user=admin_user) is admin_user
    assert require_customer(current_user=customer_user) is customer_user

    with pytest.raises(HTTPException) as exc:
        require_member(current_user=customer_user)
    assert exc.value.status_code == 403
    assert exc.value.detail == "member or admin role required"

    with pytest.raises(HTTPException) as exc:
        require_admin(current_user=member_user)
    assert exc.value.detail == "Admin only"

    with pytest.raises(ValueError):
        require_role("owner")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("9876543210", "+919876543210"),
        ("919876543210", "+919876543210"),
        ("+91 98765-43210", "+919876543210"),
        ("(91) 6123456789", "+916123456789"),
    ],
)
def test_normalize_phone_number(raw, expected):
    assert otp.normalize_phone_number(raw) == expected


@pytest.mark.parametrize(
    "raw, message",
    [
        ("98765", "Phone number must be at least 10 digits"),
        ("5876543210", "Please enter a valid phone number"),
        ("+1 415 555 0100", "Please enter a valid phone number"),
    ],
)
def test_normalize_phone_number_rejects(raw, message):
    with pytest.raises(ValueError, match=message):
        otp.normalize_phone_number(raw)


def test_generated_otp_matches_its_hash():
    code = otp.generate_otp(6)
    assert len(code) == 6 and code.isdigit()
    assert otp.otp_matches(code, otp.hash_otp(code))
    assert not otp.otp_matches("000000" if code != "000000" else "111111", otp.hash_otp(code))
