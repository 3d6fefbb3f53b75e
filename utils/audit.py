import json
import logging

from flask import request, has_request_context

from models import db
from models.audit_log import AuditLog

logger = logging.getLogger("podhive.audit")


def log_event(action: str, user_id=None, entity=None, entity_id=None, metadata=None):
    """
    Append one row to audit_logs and commit it. The same event goes to the
    `podhive.audit` logger so it also shows up in the process log.
    """
    ip = None
    if has_request_context():
        ip = request.headers.get("X-Forwarded-For", request.remote_addr)

    entity_id = str(entity_id) if entity_id is not None else None
    row = AuditLog(
        user_id=user_id,
        action=action,
        entity=entity,
        entity_id=entity_id,
        ip=ip,
        metadata_json=json.dumps(metadata, default=str) if metadata else None,
    )
    db.session.add(row)
    db.session.commit()

    logger.info("%s user=%s %s=%s", action, user_id, entity or "-", entity_id or "-")
    return row
