from flask import Blueprint, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health():
    return jsonify(status="ok"), 200


from .auth import auth_bp
from .studio import studio_bp
from .booking import booking_bp
from .availability import availability_bp
from .admin import admin_bp
from .review import review_bp
from .contact import contact_bp
