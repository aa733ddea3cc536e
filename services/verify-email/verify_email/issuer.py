import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from verify_email.errors import MissingField

logger = logging.getLogger(__name__)


@dataclass
class IssuedVerification:
    token: str
    sent_at: datetime
    link: str


def build_link(origin: str, token: str) -> str:
    return f"{origin.rstrip('/')}/verify-email?token={token}"


async def issue_verification(store, user_id, email, origin: str) -> IssuedVerification:
    """
    Persist a fresh verification token on the profile and build its link.

    Each call overwrites any earlier token for the profile. No email is
    sent: the link is handed back to the caller.
    """
    if not user_id or not email:
        raise MissingField("User ID and email are required")

    token = str(uuid.uuid4())
    sent_at = datetime.now(timezone.utc)
    await store.mark_verification_sent(user_id, email, token, sent_at)

    link = build_link(origin, token)
    logger.info("Verification link generated: %s", link)
    return IssuedVerification(token=token, sent_at=sent_at, link=link)
