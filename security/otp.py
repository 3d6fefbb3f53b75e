import hashlib
import hmac
import secrets
from datetime import datetime, timedelta

from flask import current_app

from models import db
from models.verification_otp import VerificationOTP

CHANNEL_EMAIL = "EMAIL"
CHANNEL_SMS = "SMS"


def generate_code(length: int) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def hash_code(code: str) -> str:
    key = current_app.config["SECRET_KEY"].encode("utf-8")
    return hmac.new(key, code.strip().encode("utf-8"), hashlib.sha256).hexdigest()


def issue_otp(user_id: int, channel: str) -> str:
    """
    Creates a fresh code for (user, channel) and returns it in clear text
    for delivery. Older unused codes for the same channel stop working.
    """
    now = datetime.utcnow()
    (
        VerificationOTP.query
        .filter_by(user_id=user_id, channel=channel, consumed_at=None)
        .update({"consumed_at": now}, synchronize_session=False)
    )

    code = generate_code(current_app.config.get("OTP_LENGTH", 4))
    ttl = current_app.config.get("OTP_TTL_SECONDS", 900)
    db.session.add(VerificationOTP(
        user_id=user_id,
        channel=channel,
        code_hash=hash_code(code),
        expires_at=now + timedelta(seconds=ttl),
    ))
    return code


def check_otp(user_id: int, channel: str, code: str):
    """
    Returns (row, None) when `code` matches the active code, else (None, reason).
    A wrong code counts as an attempt; the row is not consumed here.
    """
    row = (
        VerificationOTP.query
        .filter_by(user_id=user_id, channel=channel, consumed_at=None)
        .order_by(VerificationOTP.created_at.desc(), VerificationOTP.id.desc())
        .first()
    )
    if not row or row.expires_at <= datetime.utcnow():
        return None, "OTP expired or not found"

    if row.attempts >= current_app.config.get("OTP_MAX_ATTEMPTS", 5):
        return None, "Too many attempts"

    if not code or not hmac.compare_digest(row.code_hash, hash_code(code)):
        row.attempts += 1
        db.session.commit()
        return None, "Invalid OTP"

    return row, None
