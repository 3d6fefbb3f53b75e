import logging

import click
from flask import Flask, request, jsonify
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from models.user import User
from routes import (
    health_bp,
    auth_bp,
    studio_bp,
    booking_bp,
    availability_bp,
    admin_bp,
    review_bp,
    contact_bp,
)
from security.csrf import csrf_protect
from security.rbac import ROLE_ADMIN, grant_role, seed_roles
from services.booking_engine import BookingEngine
from utils.auth_context import load_current_user
from utils.notifier import NotificationSender


def create_app(config_object=Config, notifier=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(studio_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(availability_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(review_bp)
    app.register_blueprint(contact_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # One notifier per process, injected into the booking engine
    notifier = notifier or NotificationSender(app.config)
    app.extensions["notifier"] = notifier
    app.extensions["booking_engine"] = BookingEngine(notifier)

    with app.app_context():
        if app.config.get("AUTO_CREATE_TABLES"):
            db.create_all()
        # Seed default roles at startup (safe & idempotent)
        seed_roles()

    @app.before_request
    def _load_user():
        load_current_user()

    app.before_request(csrf_protect)

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    @app.errorhandler(Exception)
    def _unexpected_error(exc):
        if isinstance(exc, HTTPException):
            return jsonify(error=exc.description), exc.code
        db.session.rollback()
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify(error="Server error"), 500

    register_cli(app)

    return app

#-------------------------

def register_cli(app):
    @app.cli.command("make-admin")
    @click.argument("email")
    def make_admin(email):
        """Promote a user to ADMIN by email (bootstrap)."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        if grant_role(user, ROLE_ADMIN):
            db.session.commit()

        click.echo(f"{user.email} promoted to ADMIN")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5000)
