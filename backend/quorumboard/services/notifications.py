"""Outgoing email via the Mailgun messages API."""
import logging

import httpx

from quorumboard.config import settings

logger = logging.getLogger(__name__)


def send_email(to_email: str, subject: str, text_content: str) -> bool:
    """Send a plain-text email. Returns False when Mailgun is not configured or rejects the message."""
    if not settings.MAILGUN_API_KEY or not settings.MAILGUN_DOMAIN:
        logger.warning("Email to %s not sent (%s): MAILGUN_API_KEY / MAILGUN_DOMAIN not set", to_email, subject)
        return False

    base = settings.MAILGUN_BASE_URL.strip().rstrip("/")
    url = f"{base}/v3/{settings.MAILGUN_DOMAIN.strip()}/messages"
    data = {
        "from": settings.MAIL_FROM,
        "to": to_email,
        "subject": subject,
        "text": text_content,
    }
    try:
        with httpx.Client(timeout=10.0) as client:
            resp = client.post(url, auth=("api", settings.MAILGUN_API_KEY), data=data)
    except httpx.HTTPError as e:
        logger.error("Mailgun request failed for %s: %s", to_email, e)
        return False

    if 200 <= resp.status_code < 300:
        logger.info("Sent email '%s' to %s", subject, to_email)
        return True
    logger.error("Mailgun rejected email to %s: status=%s body=%s", to_email, resp.status_code, resp.text)
    return False
