from datetime import datetime
from models.db import db

PAYMENT_STATUSES = ("paid", "payAtStudio")

class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    studio_id = db.Column(db.Integer, db.ForeignKey("studios.id"), nullable=False, index=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    date = db.Column(db.Date, nullable=False)
    hours = db.Column(db.JSON, nullable=False)  # sorted list of distinct ints 0..23

    package_key = db.Column(db.String(80), nullable=False)
    package_price = db.Column(db.Integer, nullable=False)

    # snapshot at creation time, never recalculated
    total_price = db.Column(db.Integer, nullable=False)
    payment_status = db.Column(db.String(20), nullable=False, default="payAtStudio")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    studio = db.relationship("Studio")
    customer = db.relationship("User")
    addons = db.relationship(
        "BookingAddon",
        order_by="BookingAddon.id",
        cascade="all, delete-orphan",
        back_populates="booking",
    )

    # No unique index on (studio, date, hour): the availability store prevents double booking
    __table_args__ = (
        db.Index("ix_bookings_studio_date", "studio_id", "date"),
    )


class BookingAddon(db.Model):
    __tablename__ = "booking_addons"

    id = db.Column(db.Integer, primary_key=True)
    booking_id = db.Column(db.Integer, db.ForeignKey("bookings.id"), nullable=False, index=True)

    key = db.Column(db.String(80), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price = db.Column(db.Integer, nullable=False)

    booking = db.relationship("Booking", back_populates="addons")

    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_booking_addon_quantity"),
    )
