"""
Availability ledger: the photographers' offered time slots.

Slots are matched on (photographer, date, start, end) with exact string
comparison on the times. The ledger never checks ownership; callers go
through the authorization policy first.
"""
import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import Conflict
from ..models.slot import AvailabilitySlot

logger = logging.getLogger(__name__)


def _match(q, photographer_id: int, day: date, start_time: str, end_time: str):
    return q.filter(
        AvailabilitySlot.photographer_id == photographer_id,
        AvailabilitySlot.date == day,
        AvailabilitySlot.start_time == start_time,
        AvailabilitySlot.end_time == end_time,
    )


def list_slots(db: Session, photographer_id: int) -> list[AvailabilitySlot]:
    return (
        db.query(AvailabilitySlot)
        .filter(AvailabilitySlot.photographer_id == photographer_id)
        .order_by(AvailabilitySlot.date.asc(), AvailabilitySlot.start_time.asc())
        .all()
    )


def add_slot(db: Session, photographer_id: int, day: date, start_time: str, end_time: str) -> AvailabilitySlot:
    """Create a free slot. Overlaps are allowed, an identical slot is a ``Conflict``."""
    slot = AvailabilitySlot(
        photographer_id=photographer_id,
        date=day,
        start_time=start_time,
        end_time=end_time,
        is_booked=False,
    )
    db.add(slot)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("This slot already exists")
    db.refresh(slot)
    logger.info("Slot %s added for photographer %s (%s %s-%s)", slot.id, photographer_id, day, start_time, end_time)
    return slot


def is_slot_free(db: Session, photographer_id: int, day: date, start_time: str, end_time: str) -> bool:
    q = _match(db.query(AvailabilitySlot.id), photographer_id, day, start_time, end_time)
    return q.filter(AvailabilitySlot.is_booked == False).first() is not None  # noqa: E712


def mark_booked(db: Session, photographer_id: int, day: date, start_time: str, end_time: str) -> int:
    """
    Flip the matching free slot to booked. Conditional on ``is_booked`` being
    false, so of two concurrent callers only one flips a row. Returns the
    number of rows flipped. Does not commit.
    """
    q = _match(db.query(AvailabilitySlot), photographer_id, day, start_time, end_time)
    return q.filter(AvailabilitySlot.is_booked == False).update(  # noqa: E712
        {AvailabilitySlot.is_booked: True}, synchronize_session="evaluate"
    )


def release_slot(db: Session, photographer_id: int, day: date, start_time: str, end_time: str) -> int:
    """Give a booked slot back to the calendar. Does not commit."""
    q = _match(db.query(AvailabilitySlot), photographer_id, day, start_time, end_time)
    return q.filter(AvailabilitySlot.is_booked == True).update(  # noqa: E712
        {AvailabilitySlot.is_booked: False}, synchronize_session="evaluate"
    )
