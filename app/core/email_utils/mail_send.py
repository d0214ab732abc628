import logging
from email.message import EmailMessage
from typing import Optional

import aiosmtplib

from app.core.config import (
    DEFAULT_FROM_EMAIL, EMAIL_ENABLED, EMAIL_HOST, EMAIL_HOST_PASSWORD,
    EMAIL_HOST_USER, EMAIL_PORT, EMAIL_TIMEOUT_SECONDS, EMAIL_USE_SSL
)

logger = logging.getLogger(__name__)


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
    text_content: Optional[str] = None,
) -> None:
    """Send one HTML email over SMTP. Errors propagate to the caller."""
    if not EMAIL_ENABLED:
        logger.info(f"Email disabled, skipping '{subject}' to {to_email}")
        return

    if not EMAIL_HOST_USER or not EMAIL_HOST_PASSWORD:
        raise RuntimeError("SMTP credentials are not configured.")

    msg = EmailMessage()
    msg["From"]    = DEFAULT_FROM_EMAIL or EMAIL_HOST_USER
    msg["To"]      = to_email
    msg["Subject"] = subject

    if text_content:
        msg.set_content(text_content)

    msg.add_alternative(html_content, subtype="html")

    # port 465 uses implicit TLS, 587 upgrades with STARTTLS
    await aiosmtplib.send(
        msg,
        hostname=EMAIL_HOST,
        port=EMAIL_PORT,
        username=EMAIL_HOST_USER,
        password=EMAIL_HOST_PASSWORD,
        use_tls=EMAIL_USE_SSL,
        start_tls=not EMAIL_USE_SSL,
        timeout=EMAIL_TIMEOUT_SECONDS,
    )
    logger.info(f"Email sent: '{subject}' -> {to_email}")
