"""Email/password and phone OTP authentication tests."""

import pytest

from marketplace.core import otp
from marketplace.core.config import get_settings
from marketplace.db.models.phone_verification import PhoneVerification
from marketplace.db.models.user import User

FIXED_CODE = "123456"


@pytest.fixture()
def fixed_otp(monkeypatch):
    monkeypatch.setattr(otp, "generate_otp", lambda length: FIXED_CODE)
    return FIXED_CODE


def _register(client, **overrides):
    payload = {"name": "Asha Rao", "email": "asha@example.com", "password": "s3cret-pass"}
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


def test_register_and_login(client):
    r = _register(client, email="Asha@Example.com")
    assert r.status_code == 201
    assert r.json()["role"] == "customer"
    assert r.json()["email"] == "asha@example.com"

    r = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "s3cret-pass"})
    assert r.status_code == 200
    token = r.json()["access_token"]
    assert r.json()["token_type"] == "bearer"

    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["name"] == "Asha Rao"


def test_register_rejects_duplicates_and_weak_input(client):
    assert _register(client).status_code == 201

    r = _register(client)
    assert r.status_code == 400
    assert r.json()["detail"] == "Email already registered"

    assert _register(client, email="other@example.com", password="short").status_code == 422
    assert _register(client, email="not-an-email").status_code == 422


def test_register_validates_phone_number(client):
    r = _register(client, phone_number="+91 98765 43210")
    assert r.status_code == 201
    assert r.json()["phone_number"] == "+919876543210"

    r = _register(client, email="b@example.com", phone_number="12345")
    assert r.status_code == 400
    assert r.json()["detail"] == "Phone number must be at least 10 digits"

    r = _register(client, email="c@example.com", phone_number="+919876543210")
    assert r.json()["detail"] == "Phone number already registered"


def test_login_with_bad_credentials(client):
    _register(client)
    r = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "wrong-pass"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid credentials"

    r = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "whatever1"})
    assert r.status_code == 400


def test_protected_routes_reject_bad_tokens(client):
    assert client.get("/api/auth/me").status_code == 401
    r = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid or expired token"


def test_phone_otp_sign_up_flow(client, db, fixed_otp):
    r = client.post("/api/auth/phone/send-otp", json={"phone_number": "9876543210"})
    assert r.status_code == 200
    assert r.json()["success"] is True

    stored = db.query(PhoneVerification).one()
    assert stored.code_hash != fixed_otp

    r = client.post("/api/auth/phone/verify", json={"phone_number": "9876543210", "code": fixed_otp})
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["phone_number"] == "+919876543210"
    assert user["phone_number_verified"] is True
    assert user["role"] == "customer"
    assert user["email"] == "919876543210@phone.local"

    db.expire_all()
    assert db.query(PhoneVerification).count() == 0

    r = client.get("/private", headers={"Authorization": f"Bearer {r.json()['access_token']}"})
    assert r.status_code == 200
    assert r.json()["message"] == "This is private"


def test_phone_otp_signs_in_existing_user(client, db, fixed_otp, customer_user):
    customer_user.phone_number = "+919812345678"
    db.commit()

    client.post("/api/auth/phone/send-otp", json={"phone_number": "+91 98123-45678"})
    r = client.post("/api/auth/phone/verify", json={"phone_number": "+919812345678", "code": fixed_otp})
    assert r.status_code == 200
    assert r.json()["user"]["id"] == customer_user.id
    assert db.query(User).count() == 1


def test_phone_otp_prefix_variants_sign_in_the_same_user(client, db, fixed_otp):
    user_ids = set()
    for number in ("+919876543210", "919876543210", "9876543210", "98765 43210"):
        assert client.post("/api/auth/phone/send-otp", json={"phone_number": number}).status_code == 200
        r = client.post("/api/auth/phone/verify", json={"phone_number": number, "code": fixed_otp})
        assert r.status_code == 200, r.text
        assert r.json()["user"]["phone_number"] == "+919876543210"
        user_ids.add(r.json()["user"]["id"])

    assert len(user_ids) == 1
    assert db.query(User).count() == 1


def test_register_and_phone_sign_in_share_one_account(client, fixed_otp):
    registered = _register(client, phone_number="9876543210").json()
    assert registered["phone_number"] == "+919876543210"

    client.post("/api/auth/phone/send-otp", json={"phone_number": "+91 98765 43210"})
    r = client.post("/api/auth/phone/verify", json={"phone_number": "919876543210", "code": fixed_otp})
    assert r.json()["user"]["id"] == registered["id"]

    r = _register(client, email="dup@example.com", phone_number="919876543210")
    assert r.json()["detail"] == "Phone number already registered"


def test_phone_otp_rejects_invalid_numbers(client):
    r = client.post("/api/auth/phone/send-otp", json={"phone_number": "5876543210"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Please enter a valid phone number"


def test_phone_otp_wrong_code_and_attempt_limit(client, db, fixed_otp):
    client.post("/api/auth/phone/send-otp", json={"phone_number": "9876543210"})

    for _ in range(get_settings().otp_allowed_attempts):
        r = client.post("/api/auth/phone/verify", json={"phone_number": "9876543210", "code": "000000"})
        assert r.status_code == 400
        assert r.json()["detail"] == "Invalid OTP"

    r = client.post("/api/auth/phone/verify", json={"phone_number": "9876543210", "code": fixed_otp})
    assert r.status_code == 403
    assert r.json()["detail"] == "Too many attempts"

    r = client.post("/api/auth/phone/verify", json={"phone_number": "9876543210", "code": fixed_otp})
    assert r.json()["detail"] == "OTP not found"


def test_phone_otp_resend_replaces_previous_code(client, db, monkeypatch):
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(otp, "generate_otp", lambda length: next(codes))

    client.post("/api/auth/phone/send-otp", json={"phone_number": "9876543210"})
    client.post("/api/auth/phone/send-otp", json={"phone_number": "9876543210"})
    assert db.query(PhoneVerification).count() == 1

    r = client.post("/api/auth/phone/verify", json={"phone_number": "9876543210", "code": "111111"})
    assert r.status_code == 400
    r = client.post("/api/auth/phone/verify", json={"phone_number": "9876543210", "code": "222222"})
    assert r.status_code == 200


def test_phone_otp_expired(client, fixed_otp, monkeypatch):
    monkeypatch.setattr(get_settings(), "otp_expires_seconds", -1)
    client.post("/api/auth/phone/send-otp", json={"phone_number": "9876543210"})

    r = client.post("/api/auth/phone/verify", json={"phone_number": "9876543210", "code": fixed_otp})
    assert r.status_code == 400
    assert r.json()["detail"] == "OTP expired"


def test_phone_otp_verify_without_request(client):
    r = client.post("/api/auth/phone/verify", json={"phone_number": "9876543210", "code": "123456"})
    assert r.status_code == 400
    assert r.json()["detail"] == "OTP not found"
