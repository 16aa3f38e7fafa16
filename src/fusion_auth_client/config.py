"""
Configuration models and validation for fusion-auth-client.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, SecretStr, field_validator

# Constants
DEFAULT_TIMEOUT_CONNECT = 5.0
DEFAULT_TIMEOUT_READ = 30.0
DEFAULT_TIMEOUT_WRITE = 10.0
DEFAULT_SCOPE = "offline_access openid"


class TimeoutConfig(BaseModel):
    """Timeout configuration."""
    connect: float = DEFAULT_TIMEOUT_CONNECT
    read: float = DEFAULT_TIMEOUT_READ
    write: float = DEFAULT_TIMEOUT_WRITE
    pool: Optional[float] = None


class ClientConfig(BaseModel):
    """FusionAuth application configuration."""
    model_config = {"arbitrary_types_allowed": True}

    base_url: str
    client_id: str
    client_secret: Optional[SecretStr] = None

    # Pre-provisioned Authorization header value; wins over client_id/client_secret
    authorization: Optional[SecretStr] = None

    default_scope: str = DEFAULT_SCOPE
    timeout: Optional[Union[float, TimeoutConfig]] = None
    headers: Dict[str, str] = Field(default_factory=dict)

    # Optional pre-configured client (httpx), never closed by us
    httpx_client: Any = None

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("client_id")
    @classmethod
    def validate_client_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("client_id must not be empty")
        return v


def normalize_timeout(timeout: Optional[Union[float, TimeoutConfig]]) -> TimeoutConfig:
    """Normalize timeout to TimeoutConfig object."""
    if timeout is None:
        return TimeoutConfig()
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=float(timeout), read=float(timeout), write=float(timeout))
    return timeout


@dataclass
class ResolvedConfig:
    """Fully resolved configuration ready for usage."""
    base_url: str
    client_id: str
    client_secret: Optional[str]
    authorization: Optional[str]
    default_scope: str
    timeout: TimeoutConfig
    headers: Dict[str, str]


def resolve_config(config: ClientConfig) -> ResolvedConfig:
    """Apply defaults and return resolved config."""
    return ResolvedConfig(
        base_url=config.base_url,
        client_id=config.client_id,
        client_secret=config.client_secret.get_secret_value() if config.client_secret else None,
        authorization=config.authorization.get_secret_value() if config.authorization else None,
        default_scope=config.default_scope,
        timeout=normalize_timeout(config.timeout),
        headers=config.headers,
    )
