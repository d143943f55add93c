"""
Sentry error monitoring
"""
import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from .config import Settings

logger = logging.getLogger(__name__)


def init_sentry(settings: Settings) -> bool:
    """
    Initialize the Sentry SDK when SENTRY_DSN is configured.

    Transactions are named after the route template (/api/orders/{id}) so
    requests to the same endpoint group together.

    Returns:
        True when Sentry was initialized
    """
    if not settings.SENTRY_DSN:
        logger.info("SENTRY_DSN not set, error monitoring disabled")
        return False

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        release=f"shop-api@{settings.API_VERSION}",
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        send_default_pii=False,
        integrations=[
            StarletteIntegration(transaction_style="url"),
            FastApiIntegration(transaction_style="url"),
        ],
    )
    logger.info(f"Sentry initialized for environment {settings.ENVIRONMENT}")
    return True
