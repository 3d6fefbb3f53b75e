import json
from datetime import datetime
from models.db import db

class AuditLog(db.Model):
    """Append-only trail of security and booking events."""
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=True)  # null for anonymous events
    action = db.Column(db.String(80), nullable=False, index=True)  # e.g. BOOKING_CREATE, BOOKING_CONFLICT
    entity = db.Column(db.String(80), nullable=True)   # booking, studio, review
    entity_id = db.Column(db.String(80), nullable=True)

    ip = db.Column(db.String(64), nullable=True)
    metadata_json = db.Column(db.Text, nullable=True)

    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "createdAt": self.timestamp.isoformat() if self.timestamp else None,
            "userId": self.user_id,
            "action": self.action,
            "entity": self.entity,
            "entityId": self.entity_id,
            "ip": self.ip,
            "metadata": json.loads(self.metadata_json) if self.metadata_json else None,
        }
