"""
FusionAuth authentication endpoints.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from .auth.auth_handler import AuthHandler, create_auth_handler
from .config import ClientConfig, ResolvedConfig, resolve_config
from .core.handlers import Handler, authentication_object, codable, no_body, plain_json
from .core.request import FusionRequest
from .models import Credentials, UserInfo
from .types import ContentType, DateDecodingStrategy, HttpMethod

logger = logging.getLogger(__name__)

LOG_PREFIX = "[FusionAuth]"


class Authentication(ABC):
    """Authentication API surface."""

    @abstractmethod
    def login(self, username_or_email: str, password: str, scope: Optional[str] = None) -> FusionRequest[Credentials]:
        ...

    @abstractmethod
    def login_with_code(self, email: str, code: str) -> FusionRequest[Credentials]:
        ...

    @abstractmethod
    def forgot_password(self, email: str) -> FusionRequest[None]:
        ...

    @abstractmethod
    def renew(self, refresh_token: str, scope: Optional[str] = None) -> FusionRequest[Credentials]:
        ...

    @abstractmethod
    def revoke(self, refresh_token: str) -> FusionRequest[None]:
        ...


class FusionAuthAuthentication(Authentication):
    """
    Builds one ``FusionRequest`` per API call.

    The httpx client is created lazily unless one is passed in (or set on the
    config); only a client created here is closed by ``close``.
    """

    def __init__(self, config: ClientConfig, client: Optional[httpx.AsyncClient] = None):
        self._config: ResolvedConfig = resolve_config(config)
        self._client: Optional[httpx.AsyncClient] = client or config.httpx_client
        self._auth_handler: Optional[AuthHandler] = create_auth_handler(self._config)

        # Flag to track if we own the client (created it)
        self._own_client = self._client is None
        self._closed = False

    @property
    def client_id(self) -> str:
        return self._config.client_id

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def default_scope(self) -> str:
        return self._config.default_scope

    @property
    def client(self) -> httpx.AsyncClient:
        if self._closed:
            raise RuntimeError("FusionAuthAuthentication is closed; create a new instance to send requests.")
        if self._client is None:
            timeout = httpx.Timeout(
                connect=self._config.timeout.connect,
                read=self._config.timeout.read,
                write=self._config.timeout.write,
                pool=self._config.timeout.pool,
            )
            self._client = httpx.AsyncClient(
                timeout=timeout,
                headers=self._config.headers,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the client if we own it. No requests can be built afterwards."""
        self._closed = True
        if self._own_client and self._client:
            await self._client.aclose()

    async def __aenter__(self) -> "FusionAuthAuthentication":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _request(
        self,
        path: str,
        method: HttpMethod,
        handle: Handler,
        parameters: Dict[str, Any],
        content_type: ContentType = ContentType.JSON,
        headers: Optional[Dict[str, str]] = None,
    ) -> FusionRequest:
        url = f"{self._config.base_url}/{path.lstrip('/')}"
        logger.debug(f"{LOG_PREFIX} Building {method} {url} ({content_type.value})")
        return FusionRequest(
            client=self.client,
            url=url,
            method=method,
            handle=handle,
            parameters=parameters,
            headers=headers or {},
            content_type=content_type,
            auth_handler=self._auth_handler,
        )

    # =========================================================================
    # Endpoints
    # =========================================================================

    def login(self, username_or_email: str, password: str, scope: Optional[str] = None) -> FusionRequest[Credentials]:
        """Resource owner password grant."""
        payload = {
            "username": username_or_email,
            "password": password,
            "client_id": self._config.client_id,
            "grant_type": "password",
            "scope": scope or self._config.default_scope,
        }
        return self._request(
            "/oauth2/token", "POST",
            codable(Credentials, DateDecodingStrategy.SINCE_NOW),
            payload,
            content_type=ContentType.URL_ENCODED,
        )

    def login_with_code(self, email: str, code: str) -> FusionRequest[Credentials]:
        """Passwordless login with a one-time code sent by email."""
        payload = {
            "username": email,
            "otp": code,
            "client_id": self._config.client_id,
        }
        return self._request(
            "/oauth/token", "POST",
            codable(Credentials, DateDecodingStrategy.SINCE_NOW),
            payload,
        )

    def forgot_password(self, email: str) -> FusionRequest[None]:
        payload = {
            "loginId": email,
            "applicationId": self._config.client_id,
            "sendForgotPasswordEmail": True,
        }
        return self._request("/api/user/forgot-password", "POST", no_body, payload)

    def renew(self, refresh_token: str, scope: Optional[str] = None) -> FusionRequest[Credentials]:
        """Refresh token grant."""
        payload = {
            "client_id": self._config.client_id,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }
        if scope:
            payload["scope"] = scope
        return self._request(
            "/oauth2/token", "POST",
            codable(Credentials, DateDecodingStrategy.SINCE_NOW),
            payload,
            content_type=ContentType.URL_ENCODED,
        )

    def revoke(self, refresh_token: str) -> FusionRequest[None]:
        """Revoke the refresh token on every device."""
        payload = {
            "refresh_token": refresh_token,
            "global": True,
        }
        return self._request("/api/logout", "POST", no_body, payload)

    def user_info(self, access_token: str) -> FusionRequest[UserInfo]:
        return self._request(
            "/oauth2/userinfo", "GET",
            authentication_object(UserInfo),
            {},
            headers={"Authorization": f"Bearer {access_token}"},
        )

    def introspect(self, token: str) -> FusionRequest[Dict[str, Any]]:
        """Token introspection; returns the raw claims object."""
        payload = {
            "token": token,
            "client_id": self._config.client_id,
        }
        return self._request(
            "/oauth2/introspect", "POST", plain_json, payload,
            content_type=ContentType.URL_ENCODED,
        )
