from datetime import datetime
from models.db import db


class VerificationOTP(db.Model):
    __tablename__ = "verification_otps"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    channel = db.Column(db.String(10), nullable=False)  # EMAIL, SMS

    # only the hash of the code is stored
    code_hash = db.Column(db.String(128), nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    consumed_at = db.Column(db.DateTime, nullable=True)

    attempts = db.Column(db.Integer, default=0, nullable=False)
