from datetime import datetime
from models.db import db

class Availability(db.Model):
    """One row per (studio, calendar date); the hours live in AvailabilitySlot."""
    __tablename__ = "availabilities"

    id = db.Column(db.Integer, primary_key=True)
    studio_id = db.Column(db.Integer, db.ForeignKey("studios.id"), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    slots = db.relationship(
        "AvailabilitySlot",
        order_by="AvailabilitySlot.hour",
        cascade="all, delete-orphan",
        back_populates="availability",
    )

    __table_args__ = (
        db.UniqueConstraint("studio_id", "date", name="uq_availability_studio_date"),
    )


class AvailabilitySlot(db.Model):
    __tablename__ = "availability_slots"

    id = db.Column(db.Integer, primary_key=True)
    availability_id = db.Column(db.Integer, db.ForeignKey("availabilities.id"), nullable=False, index=True)
    hour = db.Column(db.Integer, nullable=False)
    is_available = db.Column(db.Boolean, default=True, nullable=False)

    availability = db.relationship("Availability", back_populates="slots")

    __table_args__ = (
        # Prevent duplicate hours inside one day's record
        db.UniqueConstraint("availability_id", "hour", name="uq_availability_slot_hour"),
        db.CheckConstraint("hour >= 0 AND hour <= 23", name="ck_availability_slot_hour"),
    )
