import re

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_ENV: str = "dev"
    SECRET_KEY: str
    JWT_EXPIRES_MIN: int = 1440
    LOG_LEVEL: str = "INFO"

    # DB
    DB_URL: str

    # Admin bootstrap: CSV/; or newline separated e-mails promoted to admin
    ADMIN_EMAILS: str | None = None

    # Stripe (None -> bookings are created without a payment authorization)
    STRIPE_SECRET_KEY: str | None = None
    STRIPE_CURRENCY: str = "usd"
    PAYMENT_TIMEOUT_SEC: int = 20

    # Gmail (may be None in dev: notifications are only logged)
    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    GOOGLE_REFRESH_TOKEN: str | None = None
    EMAIL_FROM: str | None = None

    # Used to build links in notification e-mails
    PUBLIC_BASE_URL: str = "http://127.0.0.1:8000"


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_email_list(raw: str | None) -> list[str]:
    """
    Splits a CSV / ; / newline separated list of e-mails,
    drops malformed entries and de-duplicates case-insensitively.
    """
    raw = (raw or "").strip()
    if not raw:
        return []

    emails: list[str] = []
    seen = set()
    for part in re.split(r"[,\n;]+", raw):
        e = part.strip()
        if not e or not _EMAIL_RE.match(e):
            continue
        key = e.lower()
        if key in seen:
            continue
        seen.add(key)
        emails.append(e)
    return emails


settings = Settings()
