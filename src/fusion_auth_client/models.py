"""
Decode targets for FusionAuth responses.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Tokens returned by the token endpoint."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access_token: str
    token_type: str = "Bearer"
    id_token: str
    refresh_token: Optional[str] = None
    # Sent as a lifetime in seconds; decoded to an absolute instant
    expires_at: datetime = Field(alias="expires_in")
    scope: Optional[str] = None
    recovery_codes: Optional[List[str]] = None
    user_id: Optional[str] = Field(default=None, alias="userId")

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= datetime.now(timezone.utc)


_USER_INFO_CLAIMS = (
    "sub", "name", "given_name", "family_name", "email", "email_verified",
    "preferred_username", "picture", "locale", "phone_number",
)


@dataclass(frozen=True)
class UserInfo:
    """OpenID Connect userinfo claims."""
    sub: str
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    email: Optional[str] = None
    email_verified: Optional[bool] = None
    preferred_username: Optional[str] = None
    picture: Optional[str] = None
    locale: Optional[str] = None
    phone_number: Optional[str] = None
    extra_info: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> Optional["UserInfo"]:
        sub = obj.get("sub")
        if not isinstance(sub, str) or not sub:
            return None
        claims = {key: obj[key] for key in _USER_INFO_CLAIMS if key in obj}
        extra = {key: value for key, value in obj.items() if key not in _USER_INFO_CLAIMS}
        return cls(extra_info=extra, **claims)
