import logging
import datetime
from decimal import Decimal

import requests

from ..config import settings
from ..templating import templates

logger = logging.getLogger(__name__)

MAILGUN_API_BASE = "https://api.mailgun.net/v3"


def _mailgun_configured() -> bool:
    return bool(settings.MAILGUN_API_KEY and settings.MAILGUN_DOMAIN)


def send_email(to: str, subject: str, html: str) -> bool:
    """Send one HTML email through the Mailgun API. Returns True when Mailgun accepted it."""
    if not _mailgun_configured():
        logger.warning("Mailgun API key or domain not configured. Skipping email to %s.", to)
        return False

    mailgun_url = f"{MAILGUN_API_BASE}/{settings.MAILGUN_DOMAIN}/messages"
    auth = ("api", settings.MAILGUN_API_KEY)
    data = {
        "from": f"{settings.APP_NAME} <{settings.MAIL_FROM}>",
        "to": [to],
        "subject": subject,
        "html": html,
    }

    try:
        response = requests.post(mailgun_url, auth=auth, data=data, timeout=10)
        response.raise_for_status()
        logger.info("Email '%s' sent to %s via Mailgun.", subject, to)
        return True
    except requests.exceptions.RequestException as e:
        logger.error("Failed to send email '%s' to %s via Mailgun: %s", subject, to, e)
        return False


def send_booking_confirmation_email(
    email: str,
    reference: str,
    guest_name: str,
    check_in: datetime.date,
    check_out: datetime.date,
    hotel_name: str,
    total_amount: Decimal,
) -> bool:
    """Sends the booking confirmation to the guest contact captured on the booking."""
    body = templates.get_template("emails/booking_confirmation.html").render({
        "app_name": settings.APP_NAME,
        "reference": reference,
        "guest_name": guest_name,
        "check_in": check_in,
        "check_out": check_out,
        "hotel_name": hotel_name,
        "total_amount": total_amount,
        "current_year": datetime.datetime.now().year,
    })
    return send_email(email, f"Booking Confirmed - {reference}", body)
