"""
Booking workflow: from a customer request to a persisted, payment-authorized
booking, and the status lifecycle afterwards.

    pending ──► confirmed ──► completed
       │            │
       └────────────┴──► cancelled

Creation order: slot check, charge authorization, then the slot claim and the
booking insert in one transaction. If the claim loses a race the transaction
rolls back and the authorization is voided.
"""
import logging
from datetime import date

from sqlalchemy.orm import Session

from ..config import settings
from ..core import policy
from ..core.errors import Forbidden, InvalidStatus, InvalidStatusTransition, NotFound, PaymentAuthorizationFailed, SlotUnavailable
from ..core.policy import Action, Resource
from ..models.booking import Booking, BookingStatus
from ..models.photographer import Category, Photographer
from ..models.user import User, Role
from . import availability, notifications
from .payments import ChargeAuthorization, ChargeGateway

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}


def _void(gateway: ChargeGateway, auth: ChargeAuthorization) -> None:
    try:
        gateway.cancel(auth.id)
    except PaymentAuthorizationFailed:
        logger.exception("Could not void authorization %s", auth.id)


def create_booking(
    db: Session,
    customer: User,
    *,
    photographer_id: int,
    day: date,
    start_time: str,
    end_time: str,
    total_amount: int,
    location: str | None = None,
    notes: str | None = None,
    category_id: int | None = None,
    gateway: ChargeGateway | None = None,
) -> tuple[Booking, str | None]:
    """Returns the booking and, when a gateway is configured, the client secret."""
    photographer = db.get(Photographer, photographer_id)
    if not photographer or not photographer.is_active:
        raise NotFound("Photographer not found")
    if category_id is not None and db.get(Category, category_id) is None:
        raise NotFound("Category not found")
    if customer.role != Role.CUSTOMER:
        raise Forbidden("Only customers can book a session")

    if not availability.is_slot_free(db, photographer_id, day, start_time, end_time):
        raise SlotUnavailable()

    auth = None
    if gateway is not None:
        auth = gateway.authorize(
            total_amount,
            metadata={"customer_id": str(customer.id), "photographer_id": str(photographer_id)},
        )

    try:
        if not availability.mark_booked(db, photographer_id, day, start_time, end_time):
            raise SlotUnavailable()
        booking = Booking(
            customer_id=customer.id,
            photographer_id=photographer_id,
            category_id=category_id,
            date=day,
            start_time=start_time,
            end_time=end_time,
            location=location,
            notes=notes or "",
            total_amount=total_amount,
            currency=settings.STRIPE_CURRENCY,
            status=BookingStatus.PENDING,
            payment_intent_id=auth.id if auth else None,
        )
        db.add(booking)
        db.commit()
    except Exception:
        db.rollback()
        if auth is not None:
            _void(gateway, auth)
        raise

    db.refresh(booking)
    logger.info("Booking %s created: customer=%s photographer=%s %s %s-%s",
                booking.id, customer.id, photographer_id, day, start_time, end_time)

    notifications.booking_requested(booking)
    return booking, (auth.client_secret if auth else None)


def list_bookings(db: Session, principal: User) -> list[Booking]:
    q = db.query(Booking)
    if principal.role == Role.CUSTOMER:
        q = q.filter(Booking.customer_id == principal.id)
    elif principal.role == Role.PHOTOGRAPHER:
        if principal.photographer is None:
            raise NotFound("Photographer profile not found")
        q = q.filter(Booking.photographer_id == principal.photographer.id)
    elif principal.role != Role.ADMIN:
        raise Forbidden()
    return q.order_by(Booking.date.desc(), Booking.start_time.desc()).all()


def get_booking(db: Session, booking_id: int, principal: User) -> Booking:
    return policy.authorize(db, principal, Resource.BOOKING, booking_id, Action.READ)


def set_status(db: Session, booking_id: int, new_status: str, principal: User) -> Booking:
    try:
        status = BookingStatus(new_status)
    except ValueError:
        raise InvalidStatus()

    booking = policy.authorize(db, principal, Resource.BOOKING, booking_id, Action.WRITE)

    acting_as_customer = not policy.is_admin(principal) and not policy.is_booking_photographer(principal, booking)
    if acting_as_customer and status != BookingStatus.CANCELLED:
        raise Forbidden("Customers can only cancel a booking")

    if status not in ALLOWED_TRANSITIONS[booking.status]:
        raise InvalidStatusTransition(f"Cannot move a {booking.status.value} booking to {status.value}")

    booking.status = status
    if status == BookingStatus.CANCELLED:
        availability.release_slot(db, booking.photographer_id, booking.date, booking.start_time, booking.end_time)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s -> %s by user %s", booking.id, status.value, principal.id)

    notifications.booking_status_changed(booking, principal)
    return booking


def payment_client_secret(db: Session, booking_id: int, principal: User, gateway: ChargeGateway | None) -> str | None:
    """
    Client secret for paying a booking: reuses the stored authorization or
    creates one and stores its reference.
    """
    if gateway is None:
        raise PaymentAuthorizationFailed("Payment gateway is not configured", status_code=503)

    booking = db.get(Booking, booking_id)
    if booking is None:
        raise NotFound("Booking not found")
    if not policy.is_booking_customer(principal, booking):
        raise Forbidden("Not authorized to pay for this booking")

    if booking.payment_intent_id:
        return gateway.retrieve(booking.payment_intent_id).client_secret

    auth = gateway.authorize(
        booking.total_amount,
        metadata={
            "customer_id": str(principal.id),
            "photographer_id": str(booking.photographer_id),
            "booking_id": str(booking.id),
        },
    )
    booking.payment_intent_id = auth.id
    db.commit()
    return auth.client_secret
