from flask import Blueprint, request, jsonify, g

from models import db
from models.booking import Booking
from models.review import Review
from models.studio import Studio, StudioPackage, StudioAddon
from schemas import parse_body
from schemas.studio import StudioCreate, StudioUpdate
from security.rbac import require_roles, ROLE_OWNER
from services.availability import (
    AvailabilityError,
    availability_records,
    check_operational_window,
    delete_studio_availability,
    replace_studio_availability,
)
from services.ratings import rating_summaries
from utils.audit import log_event
from utils.auth_context import owner_studio_required
from utils.serializers import studio_json

studio_bp = Blueprint("studio", __name__, url_prefix="/api/studio")


def _set_location(studio, location):
    studio.full_address = location.full_address
    studio.city = location.city
    studio.state = location.state
    studio.pin_code = location.pin_code


def _set_catalog(studio, packages=None, addons=None):
    # unique (studio_id, key): old rows must be gone before the new ones insert
    if packages is not None:
        studio.packages.clear()
    if addons is not None:
        studio.addons.clear()
    db.session.flush()

    if packages is not None:
        studio.packages.extend(
            StudioPackage(key=p.key, price=p.price, description=p.description, position=i)
            for i, p in enumerate(packages)
        )
    if addons is not None:
        studio.addons.extend(
            StudioAddon(key=a.key, price=a.price, description=a.description, max_quantity=a.max_quantity)
            for a in addons
        )


def _listing(studios):
    ids = [s.id for s in studios]
    calendars = availability_records(ids)
    ratings = rating_summaries(ids)
    return [studio_json(s, availability=calendars.get(s.id, []), rating=ratings[s.id]) for s in studios]


def remove_studio(studio):
    """Delete a studio with its calendar, catalog and reviews. Does not commit."""
    delete_studio_availability(studio.id)
    Review.query.filter_by(studio_id=studio.id).delete(synchronize_session=False)
    db.session.delete(studio)


# ---------- OWNERS: list a new studio (pending approval) ----------
@studio_bp.post("")
@require_roles(ROLE_OWNER)
def create_studio():
    data, error = parse_body(StudioCreate)
    if error:
        return error

    studio = Studio(
        owner_id=g.user.id,
        name=data.name.strip(),
        description=data.description,
        equipments=data.equipments,
        images=data.images,
        price_per_hour=data.price_per_hour,
        open_hour=data.operational_hours.start,
        close_hour=data.operational_hours.end,
        approved=False,
    )
    _set_location(studio, data.location)
    db.session.add(studio)
    _set_catalog(studio, data.packages, data.addons)

    try:
        replace_studio_availability(studio, data.availability)
    except AvailabilityError as exc:
        db.session.rollback()
        return jsonify(error=str(exc)), 400

    db.session.commit()
    log_event("STUDIO_CREATE", user_id=g.user.id, entity="studio", entity_id=studio.id)
    return jsonify(studio_json(studio)), 201


# ---------- PUBLIC: approved studios only ----------
@studio_bp.get("")
def list_studios():
    name_query = (request.args.get("name") or "").strip()
    city_query = (request.args.get("city") or "").strip()

    q = Studio.query.filter(Studio.approved.is_(True))
    if name_query:
        q = q.filter(Studio.name.ilike(f"%{name_query}%"))
    if city_query:
        q = q.filter(Studio.city.ilike(f"%{city_query}%"))

    rows = q.order_by(Studio.created_at.desc(), Studio.id.desc()).all()
    return jsonify(_listing(rows)), 200


@studio_bp.get("/mine")
@require_roles(ROLE_OWNER)
def my_studios():
    rows = (
        Studio.query
        .filter_by(owner_id=g.user.id)
        .order_by(Studio.created_at.desc(), Studio.id.desc())
        .all()
    )
    return jsonify(_listing(rows)), 200


@studio_bp.get("/<int:studio_id>")
def get_studio(studio_id: int):
    studio = db.session.get(Studio, studio_id)
    user = getattr(g, "user", None)
    # pending studios are visible to their owner only
    if not studio or (not studio.approved and (user is None or user.id != studio.owner_id)):
        return jsonify(error="Studio not found"), 404
    return jsonify(_listing([studio])[0]), 200


# ---------- OWNERS: edit ----------
@studio_bp.put("/<int:studio_id>")
@owner_studio_required
def update_studio(studio):
    data, error = parse_body(StudioUpdate)
    if error:
        return error

    if data.name is not None:
        studio.name = data.name.strip()
    if data.description is not None:
        studio.description = data.description
    if data.equipments is not None:
        studio.equipments = data.equipments
    if data.images is not None:
        studio.images = data.images
    if data.location is not None:
        _set_location(studio, data.location)
    if data.price_per_hour is not None:
        studio.price_per_hour = data.price_per_hour
    if data.operational_hours is not None:
        studio.open_hour = data.operational_hours.start
        studio.close_hour = data.operational_hours.end
    _set_catalog(studio, data.packages, data.addons)

    try:
        if data.availability is not None:
            replace_studio_availability(studio, data.availability)
        elif data.operational_hours is not None:
            check_operational_window(studio)
    except AvailabilityError as exc:
        db.session.rollback()
        return jsonify(error=str(exc)), 400

    db.session.commit()
    log_event(
        "STUDIO_UPDATE",
        user_id=g.user.id,
        entity="studio",
        entity_id=studio.id,
        metadata={"availability_replaced": data.availability is not None},
    )
    return jsonify(studio_json(studio)), 200


# ---------- OWNERS: remove ----------
@studio_bp.delete("/<int:studio_id>")
@owner_studio_required
def delete_studio(studio):
    if Booking.query.filter_by(studio_id=studio.id).first():
        return jsonify(error="Studio has bookings and cannot be removed"), 409

    studio_id = studio.id
    remove_studio(studio)
    db.session.commit()

    log_event("STUDIO_DELETE", user_id=g.user.id, entity="studio", entity_id=studio_id)
    return jsonify(message="Studio removed successfully"), 200
