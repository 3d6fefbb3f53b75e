from datetime import date

import pytest

from app import create_app
from config import Config
from models import (
    db,
    User,
    Role,
    Studio,
    StudioPackage,
    StudioAddon,
    Availability,
    AvailabilitySlot,
)
from schemas.booking import BookingCreate
from security.password import hash_password

DAY = date(2025, 2, 1)
PASSWORD = "password123"


class MemoryConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    AUTO_CREATE_TABLES = True
    BCRYPT_ROUNDS = 4
    SMTP_HOST = None
    TWILIO_ACCOUNT_SID = None
    CONTACT_INBOX_EMAIL = "inbox@podhive.test"
    LOG_LEVEL = "DEBUG"


class FakeNotifier:
    """Records outgoing messages; `fail` = None | "error" | "raise"."""

    def __init__(self):
        self.emails = []
        self.sms = []
        self.fail = None

    def send_email(self, to_email, subject, body):
        if self.fail == "raise":
            raise RuntimeError("smtp down")
        if self.fail == "error":
            return False, "smtp down"
        self.emails.append({"to": to_email, "subject": subject, "body": body})
        return True, None

    def send_sms(self, to_number, body):
        if self.fail == "raise":
            raise RuntimeError("sms down")
        if self.fail == "error":
            return False, "sms down"
        self.sms.append({"to": to_number, "body": body})
        return True, None


class Factory:
    def __init__(self):
        self._seq = 0

    def user(self, role="CUSTOMER", name=None, email=None, verified=True, phone=None):
        self._seq += 1
        user = User(
            email=email or f"user{self._seq}@podhive.test",
            full_name=name or f"User {self._seq}",
            password_hash=hash_password(PASSWORD),
            phone_number=phone,
            is_verified=verified,
        )
        user.roles = [Role.query.filter_by(name=role).one()]
        db.session.add(user)
        db.session.commit()
        return user

    def studio(
        self,
        owner=None,
        approved=True,
        name="Echo Room",
        packages=(("1cam", 1000), ("2cam", 1500)),
        addons=(("edit", 500, 2),),
        open_hour=8,
        close_hour=22,
        city="Pune",
    ):
        owner = owner or self.user(role="OWNER")
        studio = Studio(
            owner_id=owner.id,
            name=name,
            description="Treated room",
            equipments=["SM7B"],
            images=[],
            city=city,
            price_per_hour=900,
            open_hour=open_hour,
            close_hour=close_hour,
            approved=approved,
        )
        studio.packages = [
            StudioPackage(key=key, price=price, description="", position=i)
            for i, (key, price) in enumerate(packages)
        ]
        studio.addons = [
            StudioAddon(key=key, price=price, description="", max_quantity=max_qty)
            for key, price, max_qty in addons
        ]
        db.session.add(studio)
        db.session.commit()
        return studio

    def availability(self, studio, day=DAY, hours=(9, 10, 11), unavailable=()):
        record = Availability(studio_id=studio.id, date=day)
        record.slots = [
            AvailabilitySlot(hour=h, is_available=h not in unavailable)
            for h in sorted(set(hours) | set(unavailable))
        ]
        db.session.add(record)
        db.session.commit()
        return record


def booking_request(studio, hours=(9, 10), package="1cam", addons=(), day=DAY, **extra):
    payload = {
        "studio": studio.id,
        "date": day.isoformat(),
        "hours": list(hours),
        "packageKey": package,
        "addons": [{"key": k, "quantity": q} for k, q in addons],
    }
    payload.update(extra)
    return payload


def slot_states(studio, day=DAY):
    db.session.expire_all()
    record = Availability.query.filter_by(studio_id=studio.id, date=day).one()
    return {s.hour: s.is_available for s in record.slots}


class ApiClient:
    """Test client that logs in and echoes the CSRF cookie on writes."""

    def __init__(self, client):
        self.client = client
        self.csrf = None

    def login(self, user, password=PASSWORD):
        resp = self.client.post("/api/user/login", json={"email": user.email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        self.csrf = self.client.get_cookie("csrf_token").value
        return resp

    def _headers(self):
        return {"X-CSRF-Token": self.csrf} if self.csrf else {}

    def get(self, url, **kw):
        return self.client.get(url, **kw)

    def post(self, url, json=None):
        return self.client.post(url, json=json, headers=self._headers())

    def put(self, url, json=None):
        return self.client.put(url, json=json, headers=self._headers())

    def delete(self, url):
        return self.client.delete(url, headers=self._headers())


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def app(notifier):
    app = create_app(MemoryConfig, notifier=notifier)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def factory(app):
    return Factory()


@pytest.fixture
def engine(app):
    return app.extensions["booking_engine"]


@pytest.fixture
def api(app):
    def _make(user=None):
        c = ApiClient(app.test_client())
        if user is not None:
            c.login(user)
        return c
    return _make


@pytest.fixture
def make_request():
    def _make(studio, **kw):
        return BookingCreate.model_validate(booking_request(studio, **kw))
    return _make
