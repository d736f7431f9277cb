"""Per-booking message thread and deliverables. Both are append-only."""
import logging

from sqlalchemy.orm import Session

from ..core import policy
from ..core.errors import Forbidden, NotFound
from ..core.policy import Action, Resource
from ..models.booking import Booking
from ..models.messaging import Deliverable, Message
from ..models.user import User

logger = logging.getLogger(__name__)


def _receiver_id(booking: Booking, sender: User) -> int:
    if booking.customer_id == sender.id:
        return booking.photographer.user_id
    return booking.customer_id


def post_message(db: Session, booking_id: int, sender: User, content: str) -> Message:
    booking = policy.authorize(
        db, sender, Resource.MESSAGE, booking_id, Action.WRITE,
        message="Not authorized to send messages for this booking",
    )
    msg = Message(
        booking_id=booking.id,
        sender_id=sender.id,
        receiver_id=_receiver_id(booking, sender),
        content=content,
        is_read=False,
    )
    db.add(msg)
    db.commit()
    db.refresh(msg)
    logger.info("Message %s on booking %s: %s -> %s", msg.id, booking.id, msg.sender_id, msg.receiver_id)
    return msg


def list_messages(db: Session, booking_id: int, principal: User) -> list[Message]:
    policy.authorize(
        db, principal, Resource.MESSAGE, booking_id, Action.READ,
        message="Not authorized to view these messages",
    )
    return (
        db.query(Message)
        .filter(Message.booking_id == booking_id)
        .order_by(Message.id.asc())
        .all()
    )


def mark_read(db: Session, message_id: int, principal: User) -> Message:
    msg = db.get(Message, message_id)
    if msg is None:
        raise NotFound("Message not found")
    if msg.receiver_id != principal.id:
        raise Forbidden("Only the receiver can mark a message as read")
    if not msg.is_read:
        msg.is_read = True
        db.commit()
        db.refresh(msg)
    return msg


def add_deliverable(
    db: Session,
    booking_id: int,
    principal: User,
    title: str,
    file_url: str,
    description: str | None = None,
) -> Deliverable:
    booking = policy.authorize(
        db, principal, Resource.DELIVERABLE, booking_id, Action.WRITE,
        message="Not authorized to add deliverables to this booking",
    )
    d = Deliverable(booking_id=booking.id, title=title, file_url=file_url, description=description)
    db.add(d)
    db.commit()
    db.refresh(d)
    logger.info("Deliverable %s added to booking %s", d.id, booking.id)
    return d


def list_deliverables(db: Session, booking_id: int, principal: User) -> list[Deliverable]:
    policy.authorize(
        db, principal, Resource.DELIVERABLE, booking_id, Action.READ,
        message="Not authorized to view these deliverables",
    )
    return (
        db.query(Deliverable)
        .filter(Deliverable.booking_id == booking_id)
        .order_by(Deliverable.id.asc())
        .all()
    )
