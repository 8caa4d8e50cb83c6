# marketplace/core/otp.py
import hashlib
import hmac
import logging
import re
import secrets

logger = logging.getLogger(__name__)

# Indian mobile numbers, optionally prefixed with 91 or +91
PHONE_PATTERN = re.compile(r"^((\+)?91)?[6789]\d{9}$")


def normalize_phone_number(raw: str) -> str:
    """Return the canonical ``+91XXXXXXXXXX`` form of an Indian mobile number.

    Spaces, dashes and brackets are stripped first, so ``98765 43210``,
    ``919876543210`` and ``+91 98765-43210`` all map to ``+919876543210``.
    Raises ValueError when the result is not a valid number.
    """
    candidate = re.sub(r"[\s\-()]", "", raw or "")
    if len(candidate) < 10:
        raise ValueError("Phone number must be at least 10 digits")
    if not PHONE_PATTERN.match(candidate):
        raise ValueError("Please enter a valid phone number")
    return "+91" + candidate[-10:]


def generate_otp(length: int) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def hash_otp(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def otp_matches(code: str, code_hash: str) -> bool:
    return hmac.compare_digest(hash_otp(code), code_hash)


def send_otp_sms(phone_number: str, code: str) -> None:
    """Deliver ``code`` to ``phone_number``.

    No SMS gateway is wired in yet, so delivery is a log line. The code itself
    only shows up at DEBUG level.
    """
    logger.info("Sending OTP to %s", phone_number)
    logger.debug("OTP for %s is %s", phone_number, code)
