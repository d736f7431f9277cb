"""Password hashing and the signed bearer tokens used by every authenticated route."""
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError
from passlib.context import CryptContext

from ..config import settings

ALGO = "HS256"
pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(p: str) -> str:
    return pwd.hash(p)


def verify_password(p: str, hashed: str | None) -> bool:
    # users created from a token have no local password
    if not hashed:
        return False
    return pwd.verify(p, hashed)


def create_access_token(sub: str, expires_min: int | None = None, **claims) -> str:
    """``sub`` is the user's e-mail; extra claims (names, picture) seed a user created on first use."""
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_min or settings.JWT_EXPIRES_MIN)
    return jwt.encode({**claims, "sub": sub, "iat": now, "exp": exp}, settings.SECRET_KEY, algorithm=ALGO)


def decode_token(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGO])
    except JWTError:
        return None
