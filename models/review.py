from datetime import datetime
from models.db import db

class Review(db.Model):
    __tablename__ = "reviews"

    id = db.Column(db.Integer, primary_key=True)
    studio_id = db.Column(db.Integer, db.ForeignKey("studios.id"), nullable=False, index=True)
    reviewer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    rating = db.Column(db.Integer, nullable=False)  # 1..5
    description = db.Column(db.Text, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    reviewer = db.relationship("User")

    __table_args__ = (
        # one review per customer per studio
        db.UniqueConstraint("studio_id", "reviewer_id", name="uq_review_studio_reviewer"),
        db.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating"),
    )
