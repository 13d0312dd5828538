"""
Background job functions for the internal scheduler.

Includes:
- Trial expiry (downgrade lapsed trials to the free plan)
- Security maintenance (token blacklist cleanup)
"""

from __future__ import annotations

import logging

from core.db import db
from core.repositories import TokenBlacklistRepository
from core.services import process_expired_trials

logger = logging.getLogger("backend.scheduler.jobs")


def run_trial_expiry_job() -> int:
    """Move every lapsed trial back to free/active. Returns the number downgraded."""
    try:
        with db.session() as session:
            expired = process_expired_trials(session)
    except Exception as e:
        logger.error("Trial expiry job failed", extra={"error": str(e)})
        return 0

    if expired:
        logger.info("Trial expiry completed", extra={"expired_count": expired})
    else:
        logger.debug("Trial expiry: no lapsed trials")
    return expired


def run_token_blacklist_cleanup() -> int:
    """
    Delete blacklist rows whose token has expired anyway.

    Keeps the token_blacklist table from growing without bound.
    """
    try:
        with db.session() as session:
            deleted_count = TokenBlacklistRepository(session).cleanup_expired()
    except Exception as e:
        logger.error("Token blacklist cleanup failed", extra={"error": str(e)})
        return 0

    if deleted_count > 0:
        logger.info("Token blacklist cleanup completed", extra={"deleted_count": deleted_count})
    else:
        logger.debug("Token blacklist cleanup: no expired tokens found")
    return deleted_count
