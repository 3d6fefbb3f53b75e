import bcrypt
from flask import current_app


def password_problem(plain_password: str):
    """Reason the password is refused at signup, or None."""
    min_length = current_app.config.get("PASSWORD_MIN_LENGTH", 8)
    if len(plain_password) < min_length:
        return f"Password must be at least {min_length} characters"
    # bcrypt ignores everything past 72 bytes
    if len(plain_password.encode("utf-8")) > 72:
        return "Password must be at most 72 bytes"
    return None


def hash_password(plain_password: str) -> str:
    if not isinstance(plain_password, str) or not plain_password:
        raise ValueError("Password must be a non-empty string")

    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
