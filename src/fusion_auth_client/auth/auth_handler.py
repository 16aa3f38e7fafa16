"""
Fixed authorization header handlers.
"""
import base64
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..config import ResolvedConfig
from ..types import RequestContext

logger = logging.getLogger(__name__)
LOG_PREFIX = "[AUTH]"


def _mask_value(val: Optional[str]) -> str:
    """Mask sensitive value for logging, showing first 10 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 10:
        return "*" * len(val)
    return val[:10] + "*" * (len(val) - 10)


class AuthHandler(ABC):
    """Auth handler interface."""

    @abstractmethod
    def get_header(self, context: RequestContext) -> Optional[Dict[str, str]]:
        """Get auth header for request."""
        ...


class BasicAuthHandler(AuthHandler):
    """HTTP Basic header built from the application's client credentials."""

    def __init__(self, client_id: str, client_secret: str):
        token = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode()
        self._value = f"Basic {token}"

    def get_header(self, context: RequestContext) -> Optional[Dict[str, str]]:
        logger.debug(
            f"{LOG_PREFIX} BasicAuthHandler.get_header: {context['method']} {context['url']} "
            f"Authorization={_mask_value(self._value)}"
        )
        return {"Authorization": self._value}


class StaticAuthHandler(AuthHandler):
    """Pre-provisioned header value, sent as-is."""

    def __init__(self, value: str, header_name: str = "Authorization"):
        self._header_name = header_name
        self._value = value

    def get_header(self, context: RequestContext) -> Optional[Dict[str, str]]:
        if not self._value:
            return None
        logger.debug(
            f"{LOG_PREFIX} StaticAuthHandler.get_header: header_name={self._header_name}, "
            f"value={_mask_value(self._value)}"
        )
        return {self._header_name: self._value}


def create_auth_handler(config: ResolvedConfig) -> Optional[AuthHandler]:
    """Create auth handler from config."""
    logger.debug(
        f"{LOG_PREFIX} create_auth_handler: client_id={_mask_value(config.client_id)}, "
        f"client_secret={_mask_value(config.client_secret)}, "
        f"authorization={_mask_value(config.authorization)}"
    )

    if config.authorization:
        return StaticAuthHandler(config.authorization)

    if config.client_secret:
        return BasicAuthHandler(config.client_id, config.client_secret)

    logger.warning(
        f"{LOG_PREFIX} create_auth_handler: no authorization or client_secret configured, "
        "requests will be sent without a fixed Authorization header"
    )
    return None
