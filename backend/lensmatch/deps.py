import logging

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import func
from sqlalchemy.orm import Session

from .config import settings
from .core import policy
from .core.errors import Forbidden, Unauthenticated
from .core.policy import Action, Resource
from .core.security import decode_token
from .database import get_db
from .models.user import User
from .services.admin import initial_role
from .services.payments import ChargeGateway, StripeGateway

logger = logging.getLogger(__name__)

oauth2 = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_current_user(token: str = Depends(oauth2), db: Session = Depends(get_db)) -> User:
    data = decode_token(token)
    if not data or not data.get("sub"):
        raise Unauthenticated("Invalid token")
    email = data["sub"].lower()
    user = db.query(User).filter(func.lower(User.email) == email).first()
    if user is None:
        # first request from a token we signed for an unknown identity
        user = User(
            email=email,
            first_name=data.get("given_name"),
            last_name=data.get("family_name"),
            profile_image_url=data.get("picture"),
            role=initial_role(email),
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("User %s created from token for %s", user.id, email)
    if not user.is_active:
        raise Unauthenticated("User inactive")
    return user


def auth_admin(user: User = Depends(get_current_user)) -> User:
    if not policy.can_access(user, Resource.ADMIN, None, Action.READ):
        raise Forbidden("Unauthorized - Admin access required")
    return user


_gateway: StripeGateway | None = None


def get_payment_gateway() -> ChargeGateway | None:
    """Stripe when STRIPE_SECRET_KEY is set, otherwise no gateway at all."""
    global _gateway
    if not settings.STRIPE_SECRET_KEY:
        return None
    if _gateway is None:
        _gateway = StripeGateway(
            api_key=settings.STRIPE_SECRET_KEY,
            currency=settings.STRIPE_CURRENCY,
            timeout=settings.PAYMENT_TIMEOUT_SEC,
        )
    return _gateway
