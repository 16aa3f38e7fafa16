"""
Structured errors raised or delivered by fusion-auth-client.

Every failure path ends in one of these values. ``str(error)`` is a short
summary that is safe to log or show; ``debug_description`` appends the
underlying cause and is meant for diagnostics only.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional

import httpx


class FusionAuthError(Exception, ABC):
    """Base class for structured FusionAuth errors."""

    code: Enum

    def __init__(self, code: Enum, cause: Optional[BaseException] = None):
        self.code = code
        self.cause = cause
        super().__init__(self.message)

    @property
    @abstractmethod
    def message(self) -> str:
        """Short summary, safe to log or show."""

    def __str__(self) -> str:
        return self.message

    @property
    def debug_description(self) -> str:
        """Message plus the cause, for debugging only."""
        return self._append_cause(self.message)

    def _append_cause(self, error_message: str) -> str:
        if self.cause is None:
            return error_message
        separator = "" if error_message.endswith(".") else "."
        return f"{error_message}{separator} CAUSE: {self.cause!r}"

    def matches(self, other: Any) -> bool:
        """Code-only comparison, for branching on the kind of error."""
        if type(other) is not type(self):
            return False
        return self.code == other.code

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.code == other.code and self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.code, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


class AuthenticationErrorCode(str, Enum):
    TRANSPORT_ERROR = "transport_error"
    INVALID_RESPONSE = "invalid_response"
    REQUEST_FAILED = "request_failed"
    # Internal marker: success status without a body
    EMPTY_BODY = "empty_body"


_DEFAULT_MESSAGES = {
    AuthenticationErrorCode.TRANSPORT_ERROR: "The request could not be completed.",
    AuthenticationErrorCode.INVALID_RESPONSE: "The response could not be decoded.",
    AuthenticationErrorCode.REQUEST_FAILED: "The request failed.",
    AuthenticationErrorCode.EMPTY_BODY: "The response body is empty.",
}


class AuthenticationError(FusionAuthError):
    """Error produced by the request/response pipeline."""

    code: AuthenticationErrorCode

    def __init__(
        self,
        code: AuthenticationErrorCode,
        status_code: Optional[int] = None,
        info: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.status_code = status_code
        self.info: Dict[str, Any] = dict(info or {})
        super().__init__(code, cause)

    @property
    def error(self) -> Optional[str]:
        """Error code reported by the server, e.g. ``invalid_grant``."""
        value = self.info.get("error")
        return str(value) if value is not None else None

    @property
    def description(self) -> str:
        for key in ("error_description", "message"):
            value = self.info.get(key)
            if value:
                return str(value)
        return _DEFAULT_MESSAGES[self.code]

    @property
    def message(self) -> str:
        description = self.description
        if self.code == AuthenticationErrorCode.REQUEST_FAILED and self.status_code is not None:
            prefix = f"[{self.status_code}]"
            if self.error and self.error not in description:
                prefix = f"{prefix} {self.error}:"
            return f"{prefix} {description}"
        return description

    @property
    def is_network_error(self) -> bool:
        return self.code == AuthenticationErrorCode.TRANSPORT_ERROR and isinstance(
            self.cause, (httpx.TimeoutException, httpx.NetworkError)
        )

    @property
    def is_invalid_grant(self) -> bool:
        return self.error == "invalid_grant"

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class CredentialsManagerErrorCode(str, Enum):
    NO_CREDENTIALS = "no_credentials"
    NO_REFRESH_TOKEN = "no_refresh_token"
    RENEW_FAILED = "renew_failed"
    STORE_FAILED = "store_failed"
    BIOMETRICS_FAILED = "biometrics_failed"
    REVOKE_FAILED = "revoke_failed"
    LARGE_MIN_TTL = "large_min_ttl"


class CredentialsManagerError(FusionAuthError):
    """
    Error raised by a credentials manager built on top of this client.

    Renewal and revocation failures wrap the ``AuthenticationError`` that
    caused them as ``cause``.
    """

    code: CredentialsManagerErrorCode

    def __init__(
        self,
        code: CredentialsManagerErrorCode,
        cause: Optional[BaseException] = None,
        min_ttl: int = 0,
        lifetime: int = 0,
    ):
        self.min_ttl = min_ttl
        self.lifetime = lifetime
        super().__init__(code, cause)

    @classmethod
    def large_min_ttl(cls, min_ttl: int, lifetime: int) -> "CredentialsManagerError":
        return cls(CredentialsManagerErrorCode.LARGE_MIN_TTL, min_ttl=min_ttl, lifetime=lifetime)

    @property
    def message(self) -> str:
        c = CredentialsManagerErrorCode
        if self.code == c.NO_CREDENTIALS:
            return "No credentials were found in the store."
        if self.code == c.NO_REFRESH_TOKEN:
            return "The stored credentials instance does not contain a refresh token."
        if self.code == c.RENEW_FAILED:
            return "The credentials renewal failed."
        if self.code == c.STORE_FAILED:
            return "Storing the renewed credentials failed."
        if self.code == c.BIOMETRICS_FAILED:
            return "The biometric authentication failed."
        if self.code == c.REVOKE_FAILED:
            return "The revocation of the refresh token failed."
        return (
            f"The minTTL requested ({self.min_ttl}s) is greater than the"
            f" lifetime of the renewed access token ({self.lifetime}s). Request a lower minTTL or increase the"
            " 'Token Expiration' value in the settings page of your FusionAuth API."
        )
