import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..config import settings, parse_email_list
from ..core.errors import NotFound
from ..models.photographer import Photographer
from ..models.user import User, Role
from . import notifications

logger = logging.getLogger(__name__)


def admin_emails() -> set[str]:
    return {e.lower() for e in parse_email_list(settings.ADMIN_EMAILS)}


def bootstrap_admins(db: Session, emails: set[str] | None = None) -> int:
    """
    Promote every existing user whose e-mail is in the allow-list.
    Users backing a photographer profile keep the photographer role.
    Run once at startup; returns how many users were promoted.
    """
    emails = admin_emails() if emails is None else {e.lower() for e in emails}
    if not emails:
        return 0
    listed = (
        db.query(User)
        .filter(func.lower(User.email).in_(emails), User.role != Role.ADMIN)
        .all()
    )
    promoted = 0
    for u in listed:
        if u.photographer is not None:
            logger.warning("User %s (%s) owns photographer profile %s, not promoted to admin",
                           u.id, u.email, u.photographer.id)
            continue
        u.role = Role.ADMIN
        promoted += 1
        logger.info("User %s (%s) promoted to admin", u.id, u.email)
    if promoted:
        db.commit()
    return promoted


def initial_role(email: str) -> Role:
    """Role given to a user created from signup or from a first token."""
    return Role.ADMIN if email.lower() in admin_emails() else Role.CUSTOMER


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.id.asc()).all()


def set_verification(db: Session, photographer_id: int, is_verified: bool) -> Photographer:
    p = db.get(Photographer, photographer_id)
    if p is None:
        raise NotFound("Photographer not found")
    p.is_verified = is_verified
    db.commit()
    db.refresh(p)
    logger.info("Photographer %s verified=%s", p.id, is_verified)

    # the toggle stands even if the mail does not go out
    try:
        notifications.verification_changed(p)
    except Exception:
        logger.exception("Verification notification for photographer %s failed", p.id)
    return p
