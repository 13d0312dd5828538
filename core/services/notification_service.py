"""
Submitter notifications.

No mail transport is configured; notifications are written to the log so an
operator (or a log shipper) can pick them up.
"""

from core.logging import get_logger
from core.models import RemedyContribution

logger = get_logger("service.notifications")

MODERATION_SUBJECTS = {
    "approve": "Your remedy contribution was approved",
    "reject": "Your remedy contribution was not accepted",
}


def notify_contribution_moderated(
    contribution: RemedyContribution, action: str, note: str | None = None
) -> dict:
    """Record the notification for the contribution's submitter and return it."""
    notification = {
        "userId": contribution.user_id,
        "contributionId": contribution.id,
        "subject": MODERATION_SUBJECTS[action],
        "remedyName": contribution.name,
        "note": note,
    }
    logger.info("notification_logged", **notification)
    return notification


__all__ = ["notify_contribution_moderated"]
