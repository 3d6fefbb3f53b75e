from functools import wraps

from flask import g, jsonify

from models import db
from models.user import Role

ROLE_CUSTOMER = "CUSTOMER"
ROLE_OWNER = "OWNER"
ROLE_ADMIN = "ADMIN"

DEFAULT_ROLES = (ROLE_CUSTOMER, ROLE_OWNER, ROLE_ADMIN)

# signup `userType` -> role; admins are only made from the CLI
USER_TYPE_ROLES = {"customer": ROLE_CUSTOMER, "owner": ROLE_OWNER}


def seed_roles():
    """Idempotent; runs at every startup."""
    existing = {r.name for r in Role.query.all()}
    for name in DEFAULT_ROLES:
        if name not in existing:
            db.session.add(Role(name=name))
    db.session.commit()


def grant_role(user, role_name: str) -> bool:
    """Adds the role to the user. False when the user already had it. Does not commit."""
    if user.has_role(role_name):
        return False
    role = Role.query.filter_by(name=role_name).first()
    if role is None:
        role = Role(name=role_name)
        db.session.add(role)
    user.roles.append(role)
    return True


def require_roles(*role_names: str):
    """
    Usage: @require_roles(ROLE_OWNER)
    401 without a session, 403 when the user holds none of the roles.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = getattr(g, "user", None)
            if user is None:
                return jsonify(error="Authentication required"), 401

            if not any(user.has_role(name) for name in role_names):
                return jsonify(error="Forbidden"), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
