"""
Best-effort e-mail notifications.

Nothing here may fail the request that triggered it: delivery errors are
logged and dropped.
"""
import logging

from ..config import settings
from ..models.booking import Booking
from ..models.photographer import Photographer
from ..models.user import User
from .email_gmail import send_email_html

logger = logging.getLogger(__name__)


def _fmt_booking(b: Booking) -> str:
    return f"{b.date.isoformat()} • {b.start_time[:5]}-{b.end_time[:5]}"


def _fmt_amount(amount: int, currency: str) -> str:
    return f"{amount / 100:.2f} {currency.upper()}"


def _wrap(body: str) -> str:
    return f"""
    <div style="font-family:Inter,Arial,sans-serif;color:#111;font-size:15px">
      {body}
      <hr><small>LensMatch · <a href="{settings.PUBLIC_BASE_URL}">{settings.PUBLIC_BASE_URL}</a></small>
    </div>
    """


def send_to_many(addresses: list[str], subject: str, html: str) -> None:
    """Case-insensitive de-dup, then send one by one; failures are only logged."""
    seen = set()
    deduped: list[str] = []
    for a in addresses or []:
        key = (a or "").strip().lower()
        if key and key not in seen:
            seen.add(key)
            deduped.append(a)

    logger.info("Mail -> %s | %s", deduped, subject)
    for a in deduped:
        try:
            send_email_html(a, subject, html)
        except Exception:
            logger.exception("Mail delivery to %s failed", a)


def booking_requested(booking: Booking) -> None:
    photographer_user = booking.photographer.user if booking.photographer else None
    if not photographer_user or not photographer_user.email:
        return
    customer = booking.customer
    html = _wrap(f"""
      <p>Hi {photographer_user.display_name},</p>
      <p>you have a new booking request from <b>{customer.display_name if customer else "a customer"}</b>.</p>
      <p><b>Session:</b> {_fmt_booking(booking)}<br/>
         <b>Amount:</b> {_fmt_amount(booking.total_amount, booking.currency)}</p>
      <p>Open your dashboard to confirm or decline it.</p>
    """)
    send_to_many([photographer_user.email], "New booking request", html)


def booking_status_changed(booking: Booking, changed_by: User) -> None:
    customer = booking.customer
    photographer_user = booking.photographer.user if booking.photographer else None
    # tell whoever did not make the change
    recipients = [u.email for u in (customer, photographer_user) if u and u.id != changed_by.id and u.email]
    if not recipients:
        return
    status = booking.status.value
    html = _wrap(f"""
      <p>Hi,</p>
      <p>booking #{booking.id} is now <b>{status}</b>.</p>
      <p><b>Session:</b> {_fmt_booking(booking)}</p>
    """)
    send_to_many(recipients, f"Booking {status}", html)


def verification_changed(photographer: Photographer) -> None:
    user = photographer.user
    if not user or not user.email:
        return
    if photographer.is_verified:
        subject = "Your profile is verified"
        text = "your photographer profile has been <b>verified</b>. Customers will now see the verified badge."
    else:
        subject = "Profile verification removed"
        text = "the verification badge has been removed from your photographer profile."
    send_to_many([user.email], subject, _wrap(f"<p>Hi {user.display_name},</p><p>{text}</p>"))
