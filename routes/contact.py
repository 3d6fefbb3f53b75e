from flask import Blueprint, jsonify, current_app

from schemas import parse_body
from schemas.contact import ContactForm, StudioInquiry
from services import get_notifier
from utils.audit import log_event

contact_bp = Blueprint("contact", __name__, url_prefix="/api")


def _forward(subject: str, body: str, action: str):
    inbox = current_app.config.get("CONTACT_INBOX_EMAIL")
    if not inbox:
        return jsonify(error="Contact inbox not configured"), 503

    ok, error = get_notifier().send_email(inbox, subject, body)
    log_event(action, metadata={"sent": ok, "error": error})
    if not ok:
        current_app.logger.warning("%s not delivered: %s", action, error)
        return jsonify(error="Failed to send email"), 502
    return jsonify(message="Message sent"), 200


@contact_bp.post("/contact")
def contact():
    form, error = parse_body(ContactForm)
    if error:
        return error

    body = (
        f"From: {form.name} <{form.email}>\n\n"
        f"{form.message}"
    )
    return _forward(form.subject or f"Contact form: {form.name}", body, "CONTACT_FORM")


@contact_bp.post("/studio-inquiry")
def studio_inquiry():
    form, error = parse_body(StudioInquiry)
    if error:
        return error

    body = (
        "A new user is interested in listing their space on PodHive.\n\n"
        f"Name: {form.name}\n"
        f"WhatsApp: {form.whatsapp}\n"
        f"Location: {form.location}\n"
        f"Already has a room?: {'yes' if form.has_room else 'no'}\n"
        f"Needs help with setup?: {'yes' if form.needs_help else 'no'}\n\n"
        "Contact them via WhatsApp to proceed with the starter plan."
    )
    return _forward("New Studio Listing Inquiry", body, "STUDIO_INQUIRY")
