import logging
from datetime import date

from sqlalchemy import and_, func
from sqlalchemy.orm import Session, selectinload

from ..core import policy
from ..core.errors import Conflict, Forbidden, ValidationError
from ..core.policy import Action, Resource
from ..models.photographer import Category, Photographer, PortfolioItem
from ..models.review import Review
from ..models.slot import AvailabilitySlot
from ..models.user import User, Role

logger = logging.getLogger(__name__)

PORTFOLIO_PREVIEW_SIZE = 6

_CLEARABLE = {"bio", "city", "state"}


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def ratings(db: Session, photographer_ids: list[int]) -> dict[int, tuple[float, int]]:
    """photographer id -> (average rating, review count), for photographers with reviews."""
    if not photographer_ids:
        return {}
    rows = (
        db.query(Review.photographer_id, func.avg(Review.rating), func.count(Review.id))
        .filter(Review.photographer_id.in_(photographer_ids))
        .group_by(Review.photographer_id)
        .all()
    )
    return {pid: (round(float(avg or 0), 2), int(cnt)) for pid, avg, cnt in rows}


def search(
    db: Session,
    *,
    category: str | None = None,
    city: str | None = None,
    day: date | None = None,
    min_price: int | None = None,
    max_price: int | None = None,
) -> list[Photographer]:
    q = (
        db.query(Photographer)
        .join(User, Photographer.user_id == User.id)
        .options(selectinload(Photographer.categories), selectinload(Photographer.user))
        .filter(Photographer.is_active == True, User.is_active == True)  # noqa: E712
    )
    if category:
        q = q.filter(Photographer.categories.any(func.lower(Category.name) == category.strip().lower()))
    if city:
        q = q.filter(Photographer.city.ilike(f"%{city.strip()}%"))
    if day:
        q = q.filter(
            Photographer.slots.any(and_(AvailabilitySlot.date == day, AvailabilitySlot.is_booked == False))  # noqa: E712
        )
    if min_price is not None:
        q = q.filter(Photographer.base_rate >= min_price)
    if max_price is not None:
        q = q.filter(Photographer.base_rate <= max_price)
    return q.order_by(Photographer.is_verified.desc(), Photographer.id.asc()).all()


def get_profile(db: Session, photographer_id: int) -> Photographer:
    return policy.authorize(db, None, Resource.PHOTOGRAPHER, photographer_id, Action.READ)


def _categories(db: Session, category_ids: list[int]) -> list[Category]:
    wanted = set(category_ids)
    if not wanted:
        return []
    found = db.query(Category).filter(Category.id.in_(wanted)).all()
    if len(found) != len(wanted):
        missing = sorted(wanted - {c.id for c in found})
        raise ValidationError(f"Unknown categories: {missing}")
    return found


def register(
    db: Session,
    principal: User,
    *,
    bio: str,
    city: str | None,
    state: str | None,
    base_rate: int,
    category_ids: list[int],
) -> Photographer:
    if principal.photographer is not None:
        raise Conflict("Photographer profile already exists")
    if principal.role != Role.CUSTOMER:
        raise Forbidden("Only customers can register as photographers")

    categories = _categories(db, category_ids)
    p = Photographer(
        user=principal,
        bio=bio,
        city=city,
        state=state,
        base_rate=base_rate,
        is_verified=False,
        is_active=True,
    )
    p.categories = categories
    principal.role = Role.PHOTOGRAPHER
    db.add(p)
    db.commit()
    db.refresh(p)
    logger.info("User %s registered as photographer %s", principal.id, p.id)
    return p


def update(db: Session, principal: User, photographer_id: int, changes: dict) -> Photographer:
    p = policy.authorize(
        db, principal, Resource.PHOTOGRAPHER, photographer_id, Action.WRITE,
        message="Not authorized to update this photographer",
    )
    # an explicit null clears bio/city/state; required fields ignore it
    changes = {k: v for k, v in changes.items() if v is not None or k in _CLEARABLE}
    category_ids = changes.pop("category_ids", None)
    categories = _categories(db, category_ids) if category_ids is not None else None
    for field, value in changes.items():
        setattr(p, field, value)
    if categories is not None:
        p.categories = categories
    db.commit()
    db.refresh(p)
    return p


def list_portfolio(db: Session, photographer_id: int) -> list[PortfolioItem]:
    policy.authorize(db, None, Resource.PORTFOLIO, photographer_id, Action.READ)
    return (
        db.query(PortfolioItem)
        .filter(PortfolioItem.photographer_id == photographer_id)
        .order_by(PortfolioItem.id.asc())
        .all()
    )


def add_portfolio_item(db: Session, principal: User, photographer_id: int, image_url: str, caption: str | None) -> PortfolioItem:
    p = policy.authorize(
        db, principal, Resource.PORTFOLIO, photographer_id, Action.WRITE,
        message="Not authorized to add portfolio items",
    )
    item = PortfolioItem(photographer=p, image_url=image_url, caption=caption)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item
