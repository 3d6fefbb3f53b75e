from datetime import datetime

from flask import Blueprint, jsonify, g

from models import db
from models.user import User, Role
from schemas import parse_body
from schemas.auth import SignupRequest, VerifyOtpRequest, LoginRequest
from security.csrf import issue_csrf_token, clear_csrf_token
from security.otp import CHANNEL_EMAIL, CHANNEL_SMS, check_otp, issue_otp
from security.password import hash_password, password_problem, verify_password
from security.rbac import USER_TYPE_ROLES
from security.session import end_session, set_session_cookie, start_session
from services import get_notifier
from utils.audit import log_event
from utils.auth_context import login_required
from utils.serializers import user_json

auth_bp = Blueprint("auth", __name__, url_prefix="/api/user")


@auth_bp.post("/signup")
def signup():
    data, error = parse_body(SignupRequest)
    if error:
        return error

    problem = password_problem(data.password)
    if problem:
        return jsonify(error=problem), 400

    user = User.query.filter_by(email=data.email).first()
    if user and user.is_verified:
        log_event("SIGNUP_FAIL_EMAIL_EXISTS", metadata={"email": data.email})
        return jsonify(error="User already exists and verified"), 400

    if user is None:
        user = User(email=data.email)
        db.session.add(user)

    # an unverified account can be re-registered with fresh details
    user.full_name = data.name.strip()
    user.password_hash = hash_password(data.password)
    user.phone_number = (data.phone or "").strip() or None
    role = Role.query.filter_by(name=USER_TYPE_ROLES[data.user_type]).first()
    user.roles = [role] if role else []
    db.session.flush()

    email_code = issue_otp(user.id, CHANNEL_EMAIL)
    sms_code = issue_otp(user.id, CHANNEL_SMS) if user.phone_number else None
    db.session.commit()

    email_ok, email_error = get_notifier().send_email(
        user.email, "Your Email OTP", f"Your email OTP is: {email_code}"
    )
    sms_ok, sms_error = None, None
    if sms_code:
        sms_ok, sms_error = get_notifier().send_sms(user.phone_number, f"Your phone OTP is: {sms_code}")

    log_event(
        "SIGNUP_OTP_SENT",
        user_id=user.id,
        metadata={"email_sent": email_ok, "email_error": email_error, "sms_sent": sms_ok, "sms_error": sms_error},
    )
    return jsonify(message="OTP sent. Please verify OTP sent to your email and phone."), 201


@auth_bp.post("/verify-otp")
def verify_otp():
    data, error = parse_body(VerifyOtpRequest)
    if error:
        return error

    user = User.query.filter_by(email=data.email).first()
    if not user:
        return jsonify(error="User not found"), 404
    if user.is_verified:
        return jsonify(message="Account already verified"), 200

    email_row, reason = check_otp(user.id, CHANNEL_EMAIL, data.email_otp)
    if not email_row:
        log_event("OTP_VERIFY_FAIL", user_id=user.id, metadata={"channel": CHANNEL_EMAIL, "reason": reason})
        return jsonify(error=f"Email {reason}"), 400

    consumed = [email_row]
    if user.phone_number:
        sms_row, reason = check_otp(user.id, CHANNEL_SMS, data.phone_otp or "")
        if not sms_row:
            log_event("OTP_VERIFY_FAIL", user_id=user.id, metadata={"channel": CHANNEL_SMS, "reason": reason})
            return jsonify(error=f"Phone {reason}"), 400
        consumed.append(sms_row)

    now = datetime.utcnow()
    for row in consumed:
        row.consumed_at = now
    user.is_verified = True
    db.session.commit()

    log_event("SIGNUP_VERIFIED", user_id=user.id)
    return jsonify(message="Account verified"), 200


@auth_bp.post("/login")
def login():
    data, error = parse_body(LoginRequest)
    if error:
        return error

    user = User.query.filter_by(email=data.email).first()
    if not user or not verify_password(data.password, user.password_hash):
        log_event("LOGIN_FAIL", user_id=user.id if user else None, metadata={"email": data.email})
        return jsonify(error="Invalid credentials"), 401

    if not user.is_verified:
        return jsonify(error="Please verify your account first"), 403

    # one live session per user: older ones are revoked
    raw_token, revoked_count = start_session(user.id)

    resp = jsonify(message="Login OK", user=user_json(user))
    resp = issue_csrf_token(set_session_cookie(resp, raw_token))

    log_event("LOGIN_SUCCESS", user_id=user.id, metadata={"revoked_sessions": revoked_count})
    return resp, 200


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(user_json(g.user)), 200


@auth_bp.post("/logout")
@login_required
def logout():
    log_event("LOGOUT", user_id=g.user.id)
    resp = end_session(jsonify(message="Logged out"))
    return clear_csrf_token(resp), 200
