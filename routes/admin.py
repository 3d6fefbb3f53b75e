from flask import Blueprint, request, jsonify, g

from models import db
from models.audit_log import AuditLog
from models.booking import Booking
from models.studio import Studio
from routes.booking import STATUS_BY_KIND
from routes.studio import remove_studio
from security.rbac import require_roles, ROLE_ADMIN
from services import get_booking_engine, get_notifier
from utils.audit import log_event
from utils.serializers import booking_json, studio_json

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.get("/studios/pending")
@require_roles(ROLE_ADMIN)
def pending_studios():
    rows = (
        Studio.query
        .filter(Studio.approved.is_(False))
        .order_by(Studio.created_at.asc())
        .all()
    )
    return jsonify([studio_json(s) for s in rows]), 200


@admin_bp.put("/studios/<int:studio_id>/approve")
@require_roles(ROLE_ADMIN)
def approve_studio(studio_id: int):
    studio = db.session.get(Studio, studio_id)
    if not studio:
        return jsonify(error="Studio not found"), 404

    studio.approved = True
    db.session.commit()

    owner = studio.owner
    ok, error = get_notifier().send_email(
        owner.email,
        "Your studio has been approved",
        f"Hi {owner.full_name or owner.email},\n\n"
        f"Your studio '{studio.name}' is now live on PodHive and open for bookings.\n\n"
        "Thank you,\nPodHive",
    )
    log_event(
        "ADMIN_STUDIO_APPROVE",
        user_id=g.user.id,
        entity="studio",
        entity_id=studio.id,
        metadata={"email_sent": ok, "error": error},
    )
    return jsonify(message="Studio approved", studio=studio_json(studio)), 200


@admin_bp.delete("/studios/<int:studio_id>/deny")
@require_roles(ROLE_ADMIN)
def deny_studio(studio_id: int):
    studio = db.session.get(Studio, studio_id)
    if not studio:
        return jsonify(error="Studio not found"), 404
    if studio.approved:
        return jsonify(error="Only pending studios can be denied"), 400

    remove_studio(studio)
    db.session.commit()

    log_event("ADMIN_STUDIO_DENY", user_id=g.user.id, entity="studio", entity_id=studio_id)
    return jsonify(message="Studio request denied and removed"), 200


@admin_bp.get("/bookings")
@require_roles(ROLE_ADMIN)
def all_bookings():
    rows = Booking.query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    return jsonify([booking_json(b, with_customer=True) for b in rows]), 200


@admin_bp.delete("/bookings/<int:booking_id>")
@require_roles(ROLE_ADMIN)
def delete_booking(booking_id: int):
    result = get_booking_engine().delete_booking(booking_id)
    if not result.ok:
        return jsonify(error=result.error.message), STATUS_BY_KIND[result.error.kind]

    released = result.value
    log_event(
        "ADMIN_BOOKING_DELETE",
        user_id=g.user.id,
        entity="booking",
        entity_id=booking_id,
        metadata={
            "studio_id": released["studio_id"],
            "date": released["date"].isoformat(),
            "hours": released["hours"],
        },
    )
    return jsonify(message="Booking deleted and slots restored"), 200


@admin_bp.get("/audit-logs")
@require_roles(ROLE_ADMIN)
def list_audit_logs():
    limit = request.args.get("limit", type=int) or 200
    limit = max(1, min(limit, 500))

    action = request.args.get("action")
    user_id = request.args.get("user_id", type=int)

    q = AuditLog.query
    if action:
        q = q.filter(AuditLog.action == action)
    if user_id is not None:
        q = q.filter(AuditLog.user_id == user_id)

    rows = q.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()
    return jsonify([r.to_dict() for r in rows]), 200
