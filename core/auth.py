# =============================================================================
# core/auth.py - API Token Resolution
# =============================================================================
#
# AppSignal authenticates API calls with a personal token passed in the
# query string.  A missing token is a misconfiguration, not a transient
# failure, so there is nothing to retry: we log once and refuse the call
# before any request goes out.
# =============================================================================

import logging

from core.config import Config
from core.errors import ConfigurationError

logger = logging.getLogger(__name__)


def get_auth_token(config: Config) -> str:
    """Return the AppSignal API token from config.

    Raises:
        ConfigurationError: If the token is empty or missing.
    """
    if not config.api_token:
        logger.error("AppSignal credentials not configured")
        raise ConfigurationError(
            "AppSignal API token not configured. "
            "Please set APPSIGNAL_API_TOKEN environment variable."
        )
    return config.api_token
