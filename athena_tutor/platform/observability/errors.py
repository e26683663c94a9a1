"""Bugsnag error reporting integration.

Unhandled relay failures are logged at ERROR level; the handler installed here
forwards those records to Bugsnag so in-band stream errors are still visible
to operators.
"""

import logging

import bugsnag
from bugsnag.handlers import BugsnagHandler

from athena_tutor.platform.settings import BugsnagSettings


async def initialize_bugsnag(settings: BugsnagSettings) -> bool:
    """Initialize Bugsnag error reporting.

    Args:
        settings: Bugsnag API key and release stage

    Returns:
        True if a handler was attached, False when reporting is disabled

    Note:
        No-op when the release stage is "local" or no API key is configured.
    """
    if settings.release_stage == "local" or not settings.api_key:
        return False
    bugsnag.configure(
        api_key=settings.api_key,
        release_stage=settings.release_stage,
        auto_notify=True,
    )
    handler = BugsnagHandler()
    handler.setLevel(logging.ERROR)
    logging.getLogger().addHandler(handler)
    return True
