import base64
import logging
from email.mime.text import MIMEText

from googleapiclient.discovery import build
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from ..config import settings

logger = logging.getLogger(__name__)

GMAIL_SCOPES = ["https://www.googleapis.com/auth/gmail.send"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


def gmail_configured() -> bool:
    return bool(
        settings.GOOGLE_CLIENT_ID
        and settings.GOOGLE_CLIENT_SECRET
        and settings.GOOGLE_REFRESH_TOKEN
        and settings.EMAIL_FROM
    )


def _gmail_service():
    """Gmail client from an installed-app refresh token."""
    creds = Credentials(
        token=None,
        refresh_token=settings.GOOGLE_REFRESH_TOKEN,
        token_uri=TOKEN_URI,
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        scopes=GMAIL_SCOPES,
    )
    creds.refresh(Request())

    # cache_discovery=False avoids file-cache warnings on servers
    return build("gmail", "v1", credentials=creds, cache_discovery=False)


def send_email_html(to: str, subject: str, html: str) -> None:
    """
    Send an HTML mail through the Gmail API.
    Without Google credentials (dev) the mail is only logged.
    """
    if not gmail_configured():
        logger.info("Gmail not configured, skipping mail to %s: %s", to, subject)
        return

    msg = MIMEText(html, "html", "utf-8")
    msg["to"] = to
    msg["from"] = settings.EMAIL_FROM
    msg["subject"] = subject

    # Gmail wants URL-safe base64
    raw = base64.urlsafe_b64encode(msg.as_bytes()).decode("utf-8")

    svc = _gmail_service()
    svc.users().messages().send(userId="me", body={"raw": raw}).execute()
