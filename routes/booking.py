from flask import Blueprint, jsonify, g

from models.booking import Booking
from models.studio import Studio
from schemas import parse_body
from schemas.booking import BookingCreate
from services import get_booking_engine
from services.booking_engine import ErrorKind
from utils.audit import log_event
from utils.auth_context import login_required
from utils.serializers import booking_json

booking_bp = Blueprint("booking", __name__, url_prefix="/api/booking")

# conflicts are answered with 400 like every other rejected booking request
STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.CONFLICT: 400,
}


# ---------- CUSTOMERS: book hours (DOUBLE-BOOKING SAFE) ----------
@booking_bp.post("")
@login_required
def create_booking():
    req, error = parse_body(BookingCreate)
    if error:
        return error

    result = get_booking_engine().create_booking(req, g.user)
    if not result.ok:
        if result.error.kind == ErrorKind.CONFLICT:
            log_event(
                "BOOKING_CONFLICT",
                user_id=g.user.id,
                entity="studio",
                entity_id=req.studio,
                metadata={"date": req.date.isoformat(), "hours": req.hours},
            )
        return jsonify(error=result.error.message), STATUS_BY_KIND[result.error.kind]

    booking = result.value
    log_event(
        "BOOKING_CREATE",
        user_id=g.user.id,
        entity="booking",
        entity_id=booking.id,
        metadata={
            "studio_id": booking.studio_id,
            "hours": booking.hours,
            "total_price": booking.total_price,
            "notifications": [{"to": to, "sent": ok, "error": err} for to, ok, err in result.notifications],
        },
    )
    return jsonify(message="Booking successful", booking=booking_json(booking)), 201


# ---------- CUSTOMERS: my bookings ----------
@booking_bp.get("/customer")
@login_required
def customer_bookings():
    rows = (
        Booking.query
        .filter_by(customer_id=g.user.id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )
    return jsonify([booking_json(b) for b in rows]), 200


# ---------- OWNERS: bookings across my studios ----------
@booking_bp.get("/owner")
@login_required
def owner_bookings():
    rows = (
        Booking.query
        .join(Studio, Booking.studio_id == Studio.id)
        .filter(Studio.owner_id == g.user.id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )
    return jsonify([booking_json(b, with_customer=True) for b in rows]), 200
