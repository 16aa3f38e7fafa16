"""
Core type definitions for fusion-auth-client.
"""
from enum import Enum
from typing import Any, Callable, Dict, Literal, Optional, Protocol, TypedDict, runtime_checkable

# HTTP Methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


class ContentType(str, Enum):
    """Request encodings supported by the request builder."""
    JSON = "application/json"
    URL_ENCODED = "application/x-www-form-urlencoded"


class DateDecodingStrategy(str, Enum):
    """How numeric date fields are read by the codable strategy."""
    SINCE_NOW = "since_now"  # seconds from the decode instant
    SINCE_1970 = "since_1970"  # milliseconds since epoch


class RequestContext(TypedDict):
    """Context passed to auth handlers."""
    method: str
    url: str
    headers: Dict[str, str]
    body: Any


@runtime_checkable
class Completable(Protocol):
    """Receiver of exactly one terminal result."""
    def resolve(self, result: Any) -> None: ...


@runtime_checkable
class JSONObjectPayload(Protocol):
    """A type that can be built from a decoded JSON object, or refuse to."""
    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> Optional[Any]: ...


# Callback receiving a Success/Failure
Callback = Callable[[Any], None]
