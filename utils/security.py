"""
Shared-secret check for the adjustment trigger.
"""

import secrets

from config.config import PriceMonitorConfig
from utils.logger import get_logger

logger = get_logger(__name__)


def secrets_match(provided: str, expected: str) -> bool:
    """Constant-time comparison; runtime does not depend on where the inputs differ."""
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def verify_cron_secret(provided: str | None, config: PriceMonitorConfig) -> bool:
    """
    Validate the value of the cron secret header.

    With no secret configured, development deployments are let through with a
    warning and every other environment is refused.
    """
    if not config.cron_secret:
        if config.is_development:
            logger.warning("CRON_SECRET not set, skipping adjustment auth in development")
            return True
        logger.error("CRON_SECRET is not configured; refusing adjustment trigger")
        return False

    if provided is None:
        return False
    return secrets_match(provided, config.cron_secret)
