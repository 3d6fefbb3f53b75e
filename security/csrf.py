import secrets

from flask import request, jsonify, current_app, g

CSRF_COOKIE = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"

# reachable without a session, so there is no cookie to pair with yet
CSRF_EXEMPT_PATHS = {
    "/api/user/signup",
    "/api/user/verify-otp",
    "/api/user/login",
    "/api/contact",
    "/api/studio-inquiry",
    "/health",
}


def issue_csrf_token(resp):
    resp.set_cookie(
        CSRF_COOKIE,
        secrets.token_urlsafe(32),
        httponly=False,  # the SPA reads it and echoes it back in the header
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        path="/",
    )
    return resp


def clear_csrf_token(resp):
    resp.delete_cookie(CSRF_COOKIE, path="/")
    return resp


def csrf_protect():
    """
    before_request hook: state-changing calls from a logged-in browser must
    echo the csrf cookie in the header. Anonymous calls have no session to ride.
    """
    if request.method not in ("POST", "PUT", "PATCH", "DELETE"):
        return None
    if request.path in CSRF_EXEMPT_PATHS or getattr(g, "user", None) is None:
        return None

    cookie_token = request.cookies.get(CSRF_COOKIE)
    header_token = request.headers.get(CSRF_HEADER)
    if not cookie_token or not header_token or not secrets.compare_digest(cookie_token, header_token):
        return jsonify(error="CSRF validation failed"), 403
    return None
