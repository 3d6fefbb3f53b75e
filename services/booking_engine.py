"""
Booking engine: validates a booking request against the studio catalog and
the availability store, prices it, reserves the hours and stores the booking
in one transaction, then notifies the customer and the studio owner.

Business failures are returned as EngineResult errors, never raised, so the
HTTP layer only has to map ErrorKind to a status code.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.booking import Booking, BookingAddon
from models.studio import Studio
from services.availability import find_record, release_hours, reserve_hours

logger = logging.getLogger(__name__)

HOURS_UNAVAILABLE = "One or more of the selected hours are not available."


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INVALID_INPUT = "INVALID_INPUT"
    CONFLICT = "CONFLICT"


@dataclass
class EngineError:
    kind: ErrorKind
    message: str


@dataclass
class EngineResult:
    value: object = None
    error: EngineError = None
    # (recipient, ok, error) for each notification attempted
    notifications: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def _fail(kind: ErrorKind, message: str) -> EngineResult:
    return EngineResult(error=EngineError(kind, message))


def compute_total(package_price: int, hour_count: int, addon_lines) -> int:
    """Package is charged per hour, add-ons are flat per unit."""
    return package_price * hour_count + sum(price * quantity for price, quantity in addon_lines)


def find_unavailable_hours(record, hours):
    free = {s.hour for s in record.slots if s.is_available}
    return sorted(set(hours) - free)


def format_summary(booking, studio) -> str:
    lines = [
        f"Studio: {studio.name}",
        f"Date: {booking.date.isoformat()}",
        "Hours: " + ", ".join(f"{h}:00" for h in booking.hours),
        f"Package: {booking.package_key}",
    ]
    if booking.addons:
        lines.append("Add-ons: " + ", ".join(f"{a.key} x{a.quantity}" for a in booking.addons))
    lines.append(f"Total Price: ₹{booking.total_price}")
    return "\n".join(lines)


class BookingEngine:
    def __init__(self, notifier):
        self.notifier = notifier

    def create_booking(self, request, customer) -> EngineResult:
        """
        `request` carries studio, date, hours, package_key, addons
        [(key, quantity)] and payment_status (see schemas.booking.BookingCreate).
        Checks run in a fixed order and the first failure wins; nothing is
        written unless every check passes and the hours can be reserved.
        """
        studio = db.session.get(Studio, request.studio)
        if studio is None or not studio.approved:
            return _fail(ErrorKind.NOT_FOUND, "Studio not found or not approved")

        package = studio.find_package(request.package_key)
        if package is None:
            return _fail(ErrorKind.INVALID_INPUT, "Invalid package selection")

        selected_addons = []
        for selection in request.addons:
            addon = studio.find_addon(selection.key)
            if addon is None:
                return _fail(ErrorKind.INVALID_INPUT, f"Invalid add-on: {selection.key}")
            if not 1 <= selection.quantity <= addon.max_quantity:
                return _fail(
                    ErrorKind.INVALID_INPUT,
                    f"Quantity for {selection.key} must be 1-{addon.max_quantity}",
                )
            selected_addons.append((addon, selection.quantity))

        hours = sorted(set(request.hours))
        if not hours:
            return _fail(ErrorKind.INVALID_INPUT, "Select at least one hour")

        record = find_record(studio.id, request.date)
        if record is None:
            return _fail(ErrorKind.INVALID_INPUT, "No availability for this date.")

        if find_unavailable_hours(record, hours):
            return _fail(ErrorKind.CONFLICT, HOURS_UNAVAILABLE)

        total = compute_total(
            package.price,
            len(hours),
            [(addon.price, quantity) for addon, quantity in selected_addons],
        )

        booking = Booking(
            studio_id=studio.id,
            customer_id=customer.id,
            date=request.date,
            hours=hours,
            package_key=package.key,
            package_price=package.price,
            total_price=total,
            payment_status=request.payment_status,
        )
        booking.addons = [
            BookingAddon(key=addon.key, quantity=quantity, unit_price=addon.price)
            for addon, quantity in selected_addons
        ]

        try:
            # the check above can go stale; the conditional update is authoritative
            if not reserve_hours(record.id, hours):
                db.session.rollback()
                logger.info(
                    "Booking conflict on studio %s %s hours %s",
                    request.studio, request.date.isoformat(), hours,
                )
                return _fail(ErrorKind.CONFLICT, HOURS_UNAVAILABLE)

            db.session.add(booking)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        result = EngineResult(value=booking)
        result.notifications = self._notify_booking(booking, customer)
        return result

    def _notify_booking(self, booking, customer):
        studio = booking.studio
        owner = studio.owner
        summary = format_summary(booking, studio)

        messages = [
            (
                customer.email,
                "Your Booking Confirmation",
                f"Hello {customer.full_name or 'Customer'},\n\n"
                f"Your booking has been confirmed:\n\n{summary}\n\n"
                "Pay at the studio on the day of your session.\n\n"
                "Thank you,\nPodHive",
            ),
            (
                owner.email,
                "New Booking Received",
                f"Hello {owner.full_name or 'Owner'},\n\n"
                f"A new booking has been received:\n\n{summary}\n\n"
                "Thank you,\nPodHive",
            ),
        ]

        outcomes = []
        for to_email, subject, body in messages:
            try:
                ok, error = self.notifier.send_email(to_email, subject, body)
            except Exception as exc:  # the booking is already committed
                ok, error = False, str(exc)
            if not ok:
                logger.warning("Booking %s notification to %s not sent: %s", booking.id, to_email, error)
            outcomes.append((to_email, ok, error))
        return outcomes

    def delete_booking(self, booking_id: int) -> EngineResult:
        """Remove a booking and put its hours back on the same day's record."""
        booking = db.session.get(Booking, booking_id)
        if booking is None:
            return _fail(ErrorKind.NOT_FOUND, "Booking not found")

        released = {
            "id": booking.id,
            "studio_id": booking.studio_id,
            "date": booking.date,
            "hours": list(booking.hours),
        }
        try:
            release_hours(booking.studio_id, booking.date, booking.hours)
            db.session.delete(booking)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        return EngineResult(value=released)
