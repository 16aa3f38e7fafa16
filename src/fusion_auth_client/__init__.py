"""
FusionAuth Client - typed request/response pipeline for FusionAuth
"""

__version__ = "0.1.0"

from .config import ClientConfig, TimeoutConfig
from .types import Completable, ContentType, DateDecodingStrategy, JSONObjectPayload
from .errors import (
    AuthenticationError,
    AuthenticationErrorCode,
    CredentialsManagerError,
    CredentialsManagerErrorCode,
    FusionAuthError,
)
from .result import Failure, Result, Success
from .models import Credentials, UserInfo
from .core import (
    CallbackCompletable,
    FusionRequest,
    FusionResponse,
    FutureCompletable,
    authentication_object,
    classify,
    codable,
    no_body,
    plain_json,
)
from .authentication import Authentication, FusionAuthAuthentication

__all__ = [
    "ClientConfig", "TimeoutConfig",
    "Completable", "ContentType", "DateDecodingStrategy", "JSONObjectPayload",
    "AuthenticationError", "AuthenticationErrorCode",
    "CredentialsManagerError", "CredentialsManagerErrorCode", "FusionAuthError",
    "Failure", "Result", "Success",
    "Credentials", "UserInfo",
    "CallbackCompletable", "FutureCompletable",
    "FusionRequest", "FusionResponse",
    "authentication_object", "classify", "codable", "no_body", "plain_json",
    "Authentication", "FusionAuthAuthentication",
]
