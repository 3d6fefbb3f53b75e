from flask import Blueprint, jsonify

from services.availability import get_available_slots
from utils.auth_context import login_required

availability_bp = Blueprint("availability", __name__, url_prefix="/api/availability")


@availability_bp.get("/<int:studio_id>")
@login_required
def available_slots(studio_id: int):
    days = get_available_slots(studio_id)
    return jsonify([
        {"date": d["date"].isoformat(), "hours": d["hours"]}
        for d in days
    ]), 200
