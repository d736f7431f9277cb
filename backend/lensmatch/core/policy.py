"""
Authorization policy.

``can_access`` is the single decision function: given the principal (``None``
for anonymous requests), the kind of resource, the loaded resource and the
action, it answers yes or no. ``authorize`` is what routes and services call:
it loads the resource by id, raises ``NotFound`` if it is missing and only then
raises ``Forbidden`` if the decision is negative. Existence is always checked
before authorization.

Resources that belong to a photographer (profile, availability, portfolio) are
decided on the ``Photographer`` row. Resources that belong to a booking
(the booking itself, its review, deliverables and messages) are decided on the
``Booking`` row.
"""
import enum

from sqlalchemy.orm import Session

from .errors import Forbidden, NotFound
from ..models.booking import Booking, BookingStatus
from ..models.photographer import Photographer
from ..models.user import User, Role


class Resource(str, enum.Enum):
    PHOTOGRAPHER = "photographer"
    AVAILABILITY = "availability"
    PORTFOLIO = "portfolio"
    BOOKING = "booking"
    REVIEW = "review"
    DELIVERABLE = "deliverable"
    MESSAGE = "message"
    ADMIN = "admin"


class Action(str, enum.Enum):
    READ = "read"
    WRITE = "write"


_PHOTOGRAPHER_OWNED = {Resource.PHOTOGRAPHER, Resource.AVAILABILITY, Resource.PORTFOLIO}
_BOOKING_OWNED = {Resource.BOOKING, Resource.REVIEW, Resource.DELIVERABLE, Resource.MESSAGE}


def is_admin(principal: User | None) -> bool:
    return principal is not None and principal.role == Role.ADMIN


def owns_profile(principal: User | None, photographer: Photographer) -> bool:
    return (
        principal is not None
        and principal.role == Role.PHOTOGRAPHER
        and photographer.user_id == principal.id
    )


def is_booking_customer(principal: User | None, booking: Booking) -> bool:
    return principal is not None and booking.customer_id == principal.id


def is_booking_photographer(principal: User | None, booking: Booking) -> bool:
    return booking.photographer is not None and owns_profile(principal, booking.photographer)


def is_participant(principal: User | None, booking: Booking) -> bool:
    return is_booking_customer(principal, booking) or is_booking_photographer(principal, booking)


def can_access(principal: User | None, kind: Resource, resource, action: Action) -> bool:
    if kind == Resource.ADMIN:
        return is_admin(principal)

    if kind in _PHOTOGRAPHER_OWNED:
        if action == Action.READ:
            return True
        if kind == Resource.AVAILABILITY:
            # only the photographer manages their own calendar
            return owns_profile(principal, resource)
        return owns_profile(principal, resource) or is_admin(principal)

    if kind == Resource.REVIEW:
        if action == Action.READ:
            return True
        return is_booking_customer(principal, resource) and resource.status == BookingStatus.COMPLETED

    if kind == Resource.DELIVERABLE and action == Action.WRITE:
        return is_booking_photographer(principal, resource) or is_admin(principal)

    if kind == Resource.MESSAGE and action == Action.WRITE:
        return is_participant(principal, resource)

    # booking read/write, deliverable read, message read
    return is_participant(principal, resource) or is_admin(principal)


def _load(db: Session, kind: Resource, resource_id: int):
    if kind in _PHOTOGRAPHER_OWNED:
        obj = db.get(Photographer, resource_id)
        if obj is None:
            raise NotFound("Photographer not found")
        return obj
    if kind in _BOOKING_OWNED:
        obj = db.get(Booking, resource_id)
        if obj is None:
            raise NotFound("Booking not found")
        return obj
    return None


def authorize(
    db: Session,
    principal: User | None,
    kind: Resource,
    resource_id: int | None,
    action: Action,
    message: str | None = None,
):
    """Load the resource (404 first), then apply ``can_access`` (403). Returns the resource."""
    resource = _load(db, kind, resource_id) if resource_id is not None else None
    if not can_access(principal, kind, resource, action):
        raise Forbidden(message or f"Not authorized to {action.value} this {kind.value}")
    return resource
