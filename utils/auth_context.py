from functools import wraps

from flask import g, jsonify

from models import db
from models.studio import Studio
from models.user import User
from security.session import get_session_from_request


def load_current_user():
    sess = get_session_from_request()
    g.session = sess
    g.user = db.session.get(User, sess.user_id) if sess else None


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user", None) is None:
            return jsonify(error="Authentication required"), 401
        return fn(*args, **kwargs)
    return wrapper


def owner_studio_required(fn):
    """
    For /<int:studio_id> routes that only the studio's owner may change.
    Pending studios are locked until an admin approves them. The view gets
    the loaded Studio in place of the id.
    """
    @wraps(fn)
    @login_required
    def wrapper(studio_id, *args, **kwargs):
        studio = db.session.get(Studio, studio_id)
        if studio is None:
            return jsonify(error="Studio not found"), 404
        if studio.owner_id != g.user.id:
            return jsonify(error="Not authorized"), 403
        if not studio.approved:
            return jsonify(error="Studio not approved"), 403
        return fn(studio, *args, **kwargs)
    return wrapper
