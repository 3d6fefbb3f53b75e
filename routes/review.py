from flask import Blueprint, jsonify, g
from sqlalchemy.exc import IntegrityError

from models import db
from models.review import Review
from models.studio import Studio
from schemas import parse_body
from schemas.review import ReviewCreate, ReviewUpdate
from services.ratings import rating_summary
from utils.audit import log_event
from utils.auth_context import login_required

review_bp = Blueprint("review", __name__, url_prefix="/api/review")


def _review_json(r):
    return {
        "id": r.id,
        "studio": r.studio_id,
        "reviewer": {"id": r.reviewer_id, "name": r.reviewer.full_name if r.reviewer else None},
        "rating": r.rating,
        "description": r.description,
        "createdAt": r.created_at.isoformat(),
    }


@review_bp.post("")
@login_required
def create_review():
    data, error = parse_body(ReviewCreate)
    if error:
        return error

    studio = db.session.get(Studio, data.studio)
    if not studio or not studio.approved:
        return jsonify(error="Studio not found"), 404

    if Review.query.filter_by(studio_id=studio.id, reviewer_id=g.user.id).first():
        return jsonify(error="You have already reviewed this studio"), 400

    review = Review(
        studio_id=studio.id,
        reviewer_id=g.user.id,
        rating=data.rating,
        description=data.description.strip(),
    )
    db.session.add(review)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        # uq_review_studio_reviewer: a parallel request won
        return jsonify(error="You have already reviewed this studio"), 400

    log_event("REVIEW_CREATE", user_id=g.user.id, entity="review", entity_id=review.id)
    return jsonify(_review_json(review)), 201


@review_bp.get("/studio/<int:studio_id>")
def studio_reviews(studio_id: int):
    rows = (
        Review.query
        .filter_by(studio_id=studio_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
    return jsonify(
        reviews=[_review_json(r) for r in rows],
        ratingSummary=rating_summary(studio_id),
    ), 200


@review_bp.put("/<int:review_id>")
@login_required
def update_review(review_id: int):
    review = db.session.get(Review, review_id)
    if not review:
        return jsonify(error="Review not found"), 404
    if review.reviewer_id != g.user.id:
        return jsonify(error="Not authorized to update this review"), 403

    data, error = parse_body(ReviewUpdate)
    if error:
        return error

    if data.rating is not None:
        review.rating = data.rating
    if data.description is not None:
        review.description = data.description.strip()
    db.session.commit()

    log_event("REVIEW_UPDATE", user_id=g.user.id, entity="review", entity_id=review.id)
    return jsonify(_review_json(review)), 200


@review_bp.delete("/<int:review_id>")
@login_required
def delete_review(review_id: int):
    review = db.session.get(Review, review_id)
    if not review:
        return jsonify(error="Review not found"), 404
    if review.reviewer_id != g.user.id:
        return jsonify(error="Not authorized to delete this review"), 403

    db.session.delete(review)
    db.session.commit()

    log_event("REVIEW_DELETE", user_id=g.user.id, entity="review", entity_id=review_id)
    return jsonify(message="Review deleted successfully"), 200
