from datetime import datetime
from models.db import db

class Studio(db.Model):
    __tablename__ = "studios"

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    equipments = db.Column(db.JSON, nullable=False, default=list)
    images = db.Column(db.JSON, nullable=False, default=list)  # image URLs

    full_address = db.Column(db.String(255), nullable=True)
    city = db.Column(db.String(80), nullable=True)
    state = db.Column(db.String(80), nullable=True)
    pin_code = db.Column(db.String(12), nullable=True)

    # listing price shown to customers; bookings are priced from packages
    price_per_hour = db.Column(db.Integer, nullable=False, default=0)

    # bookable window: open_hour <= hour < close_hour
    open_hour = db.Column(db.Integer, nullable=False)
    close_hour = db.Column(db.Integer, nullable=False)

    approved = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    owner = db.relationship("User")
    packages = db.relationship(
        "StudioPackage",
        order_by="StudioPackage.position",
        cascade="all, delete-orphan",
        back_populates="studio",
    )
    addons = db.relationship(
        "StudioAddon",
        order_by="StudioAddon.id",
        cascade="all, delete-orphan",
        back_populates="studio",
    )

    __table_args__ = (
        db.CheckConstraint("open_hour >= 0 AND open_hour <= 23", name="ck_studio_open_hour"),
        db.CheckConstraint("close_hour >= 1 AND close_hour <= 24", name="ck_studio_close_hour"),
        db.CheckConstraint("open_hour < close_hour", name="ck_studio_hours_order"),
    )

    def find_package(self, key: str):
        return next((p for p in self.packages if p.key == key), None)

    def find_addon(self, key: str):
        return next((a for a in self.addons if a.key == key), None)

    def within_operational_hours(self, hour: int) -> bool:
        return self.open_hour <= hour < self.close_hour


class StudioPackage(db.Model):
    __tablename__ = "studio_packages"

    id = db.Column(db.Integer, primary_key=True)
    studio_id = db.Column(db.Integer, db.ForeignKey("studios.id"), nullable=False, index=True)

    key = db.Column(db.String(80), nullable=False)   # e.g. "1 Camera Setup"
    price = db.Column(db.Integer, nullable=False)    # per hour
    description = db.Column(db.String(255), nullable=False, default="")
    position = db.Column(db.Integer, nullable=False, default=0)

    studio = db.relationship("Studio", back_populates="packages")

    __table_args__ = (
        db.UniqueConstraint("studio_id", "key", name="uq_studio_package_key"),
    )


class StudioAddon(db.Model):
    __tablename__ = "studio_addons"

    id = db.Column(db.Integer, primary_key=True)
    studio_id = db.Column(db.Integer, db.ForeignKey("studios.id"), nullable=False, index=True)

    key = db.Column(db.String(80), nullable=False)   # e.g. "Podcast Edit Full"
    price = db.Column(db.Integer, nullable=False)    # flat, per unit
    description = db.Column(db.String(255), nullable=False, default="")
    max_quantity = db.Column(db.Integer, nullable=False, default=1)

    studio = db.relationship("Studio", back_populates="addons")

    __table_args__ = (
        db.UniqueConstraint("studio_id", "key", name="uq_studio_addon_key"),
        db.CheckConstraint("max_quantity >= 1", name="ck_addon_max_quantity"),
    )
