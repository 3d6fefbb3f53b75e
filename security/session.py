import hashlib
import secrets
from datetime import datetime, timedelta

from flask import request, current_app

from models import db
from models.session import Session


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def cookie_name() -> str:
    return current_app.config.get("AUTH_COOKIE_NAME", "podhive_session")


def start_session(user_id: int):
    """
    Revokes every open session of the user and opens a new one.
    Returns (raw_token, revoked_count); only the token hash is stored.
    """
    revoked = (
        Session.query
        .filter_by(user_id=user_id, revoked=False)
        .update({"revoked": True}, synchronize_session=False)
    )

    raw_token = secrets.token_urlsafe(32)
    lifetime = current_app.config.get("SESSION_LIFETIME_SECONDS", 8 * 60 * 60)
    db.session.add(Session(
        user_id=user_id,
        token_hash=hash_token(raw_token),
        expires_at=datetime.utcnow() + timedelta(seconds=lifetime),
    ))
    db.session.commit()
    return raw_token, revoked


def set_session_cookie(resp, raw_token: str):
    resp.set_cookie(
        cookie_name(),
        raw_token,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        max_age=current_app.config.get("SESSION_LIFETIME_SECONDS", 8 * 60 * 60),
        path="/",
    )
    return resp


def get_session_from_request():
    raw_token = request.cookies.get(cookie_name())
    if not raw_token:
        return None

    sess = Session.query.filter_by(token_hash=hash_token(raw_token)).first()
    now = datetime.utcnow()
    if not sess or not sess.is_live(now, current_app.config.get("IDLE_TIMEOUT_SECONDS", 7200)):
        return None

    sess.last_seen_at = now
    db.session.commit()
    return sess


def end_session(resp):
    """Revokes the request's session (if any) and clears its cookie."""
    raw_token = request.cookies.get(cookie_name())
    if raw_token:
        sess = Session.query.filter_by(token_hash=hash_token(raw_token)).first()
        if sess:
            sess.revoked = True
            db.session.commit()
    resp.delete_cookie(cookie_name(), path="/")
    return resp
