"""
Response envelope and error classification.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..errors import AuthenticationError, AuthenticationErrorCode


def _is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


@dataclass(frozen=True)
class FusionResponse:
    """
    Raw transport outcome handed to the decode strategies.

    Either ``error`` is set (the request never produced a response) or
    ``response`` and ``data`` are. Strategies must cope with any partial
    combination.
    """
    data: Optional[bytes] = None
    response: Optional[httpx.Response] = None
    error: Optional[BaseException] = None

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None

    def result(self) -> Any:
        """
        Decoded JSON body of a successful response.

        Raises:
            AuthenticationError: the classified error for every other outcome,
                including EMPTY_BODY for a successful response without content.
        """
        if self.error is not None or self.response is None:
            raise classify(self)
        if not _is_success(self.response.status_code) or not self.data:
            raise classify(self)
        try:
            return json.loads(self.data)
        except (ValueError, RecursionError):
            raise classify(self)


def _parse_object(data: bytes) -> Dict[str, Any]:
    value = json.loads(data)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def classify(response: FusionResponse) -> AuthenticationError:
    """Map a response envelope to a structured error. Never raises."""
    if response.error is not None:
        return AuthenticationError(AuthenticationErrorCode.TRANSPORT_ERROR, cause=response.error)

    status_code = response.status_code
    if status_code is None:
        return AuthenticationError(
            AuthenticationErrorCode.INVALID_RESPONSE,
            info={"message": "No response was received."},
        )

    if not response.data:
        if _is_success(status_code):
            return AuthenticationError(AuthenticationErrorCode.EMPTY_BODY, status_code=status_code)
        return AuthenticationError(AuthenticationErrorCode.REQUEST_FAILED, status_code=status_code)

    try:
        info = _parse_object(response.data)
    except (ValueError, RecursionError) as e:
        return AuthenticationError(AuthenticationErrorCode.INVALID_RESPONSE, status_code=status_code, cause=e)

    if not _is_success(status_code):
        return AuthenticationError(AuthenticationErrorCode.REQUEST_FAILED, status_code=status_code, info=info)

    # A well-formed object the caller could not use
    return AuthenticationError(
        AuthenticationErrorCode.INVALID_RESPONSE,
        status_code=status_code,
        info={"message": "The response object could not be decoded into the expected type."},
    )
