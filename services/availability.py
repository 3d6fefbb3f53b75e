"""
Availability store.

One Availability row per (studio, date) holding that day's hour slots. The
booking engine flips slots through reserve_hours/release_hours only; owners
replace a studio's whole calendar through replace_studio_availability.
"""
import logging
from collections import defaultdict

from sqlalchemy import update

from models import db
from models.availability import Availability, AvailabilitySlot
from models.booking import Booking
from models.studio import Studio

logger = logging.getLogger(__name__)


class AvailabilityError(ValueError):
    """Owner supplied a calendar that breaks a slot invariant."""


def _booked_hours(studio_id: int):
    booked = defaultdict(set)
    rows = Booking.query.with_entities(Booking.date, Booking.hours).filter_by(studio_id=studio_id).all()
    for day, hours in rows:
        booked[day].update(hours or [])
    return booked


def validate_days(studio, days):
    seen_dates = set()
    for day in days:
        if day.date in seen_dates:
            raise AvailabilityError(f"Date {day.date.isoformat()} is listed more than once")
        seen_dates.add(day.date)

        hours = [s.hour for s in day.slots]
        if len(set(hours)) != len(hours):
            raise AvailabilityError(f"Duplicate hours on {day.date.isoformat()}")

        outside = sorted(h for h in hours if not studio.within_operational_hours(h))
        if outside:
            raise AvailabilityError(
                f"Hours {outside} on {day.date.isoformat()} are outside operational hours "
                f"{studio.open_hour}-{studio.close_hour}"
            )


def check_operational_window(studio):
    """Existing slots must still fit after the owner changes operational hours."""
    outside = (
        db.session.query(Availability.date, AvailabilitySlot.hour)
        .join(AvailabilitySlot, AvailabilitySlot.availability_id == Availability.id)
        .filter(Availability.studio_id == studio.id)
        .filter((AvailabilitySlot.hour < studio.open_hour) | (AvailabilitySlot.hour >= studio.close_hour))
        .first()
    )
    if outside:
        day, hour = outside
        raise AvailabilityError(
            f"Hour {hour} on {day.isoformat()} is outside operational hours "
            f"{studio.open_hour}-{studio.close_hour}"
        )


def delete_studio_availability(studio_id: int) -> int:
    records = Availability.query.filter_by(studio_id=studio_id).all()
    for record in records:
        db.session.delete(record)
    # flushed here so re-inserting the same (studio, date) cannot hit the unique key
    db.session.flush()
    return len(records)


def replace_studio_availability(studio, days):
    """
    Drop every availability record of the studio and write `days` instead.
    Hours that an existing booking already holds are stored unavailable,
    whatever the owner sent. Does not commit.
    """
    validate_days(studio, days)
    booked = _booked_hours(studio.id)

    delete_studio_availability(studio.id)
    for day in days:
        taken = booked.get(day.date, set())
        record = Availability(studio_id=studio.id, date=day.date)
        record.slots = [
            AvailabilitySlot(hour=s.hour, is_available=bool(s.is_available) and s.hour not in taken)
            for s in sorted(day.slots, key=lambda s: s.hour)
        ]
        db.session.add(record)
    db.session.flush()


def find_record(studio_id: int, day):
    return Availability.query.filter_by(studio_id=studio_id, date=day).first()


def reserve_hours(availability_id: int, hours) -> bool:
    """
    Conditional update: mark `hours` unavailable only where they are still
    available. True when every requested hour was flipped by this statement.
    A False result means another booking got there first; the caller must
    roll back.
    """
    hours = sorted(set(hours))
    result = db.session.execute(
        update(AvailabilitySlot)
        .where(
            AvailabilitySlot.availability_id == availability_id,
            AvailabilitySlot.hour.in_(hours),
            AvailabilitySlot.is_available.is_(True),
        )
        .values(is_available=False)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == len(hours)


def release_hours(studio_id: int, day, hours):
    """
    Mark `hours` available again on the existing (studio, date) record.
    The record (or a missing hour row) is only created when the owner has
    rewritten the calendar since the booking was made. Hours outside the
    studio's current operational window stay off the calendar. Does not commit.
    """
    studio = db.session.get(Studio, studio_id)
    hours = sorted(set(hours))
    outside = [h for h in hours if not studio.within_operational_hours(h)]
    if outside:
        logger.info(
            "Not restoring hours %s for studio %s on %s: outside operational hours %s-%s",
            outside, studio_id, day, studio.open_hour, studio.close_hour,
        )
        hours = [h for h in hours if h not in outside]

    record = find_record(studio_id, day)
    if not hours:
        return record
    if record is None:
        record = Availability(studio_id=studio_id, date=day)
        db.session.add(record)
        logger.info("Recreating availability for studio %s on %s", studio_id, day)

    by_hour = {s.hour: s for s in record.slots}
    for hour in hours:
        slot = by_hour.get(hour)
        if slot is None:
            record.slots.append(AvailabilitySlot(hour=hour, is_available=True))
        else:
            slot.is_available = True
    db.session.flush()
    return record


def get_available_slots(studio_id: int):
    """
    [{date, hours}] sorted by date, only available hours (ascending),
    days without any free hour left out.
    """
    rows = (
        db.session.query(Availability.date, AvailabilitySlot.hour)
        .join(AvailabilitySlot, AvailabilitySlot.availability_id == Availability.id)
        .filter(Availability.studio_id == studio_id, AvailabilitySlot.is_available.is_(True))
        .order_by(Availability.date.asc(), AvailabilitySlot.hour.asc())
        .all()
    )

    out = []
    for day, hour in rows:
        if not out or out[-1]["date"] != day:
            out.append({"date": day, "hours": []})
        out[-1]["hours"].append(hour)
    return out


def availability_records(studio_ids):
    """Full calendars (booked hours included) keyed by studio id."""
    if not studio_ids:
        return {}
    records = (
        Availability.query
        .filter(Availability.studio_id.in_(studio_ids))
        .order_by(Availability.date.asc())
        .all()
    )
    out = defaultdict(list)
    for rec in records:
        out[rec.studio_id].append({
            "date": rec.date.isoformat(),
            "slots": [{"hour": s.hour, "isAvailable": s.is_available} for s in rec.slots],
        })
    return out
