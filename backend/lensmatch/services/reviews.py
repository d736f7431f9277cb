import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..core import policy
from ..core.errors import Conflict
from ..core.policy import Action, Resource
from ..models.booking import Booking
from ..models.review import Review
from ..models.user import User

logger = logging.getLogger(__name__)


def list_photographer_reviews(db: Session, photographer_id: int) -> list[Review]:
    return (
        db.query(Review)
        .options(joinedload(Review.customer))
        .filter(Review.photographer_id == photographer_id)
        .order_by(Review.id.desc())
        .all()
    )


def create_review(db: Session, principal: User, booking_id: int, rating: int, comment: str | None) -> Review:
    booking: Booking = policy.authorize(
        db, principal, Resource.REVIEW, booking_id, Action.WRITE,
        message="You can only review photographers after a completed booking",
    )

    if db.query(Review.id).filter(Review.booking_id == booking.id).first():
        raise Conflict("You have already reviewed this booking")

    review = Review(
        booking_id=booking.id,
        customer_id=principal.id,
        photographer_id=booking.photographer_id,
        rating=rating,
        comment=comment,
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent submission
        db.rollback()
        raise Conflict("You have already reviewed this booking")
    db.refresh(review)
    logger.info("Review %s for booking %s (rating %s)", review.id, booking.id, rating)
    return review
