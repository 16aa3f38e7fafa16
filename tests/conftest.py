"""
Shared fixtures for fusion_auth_client tests.
"""
import json
from typing import Any, Optional

import httpx
import pytest
from pydantic import SecretStr

from fusion_auth_client.config import ClientConfig
from fusion_auth_client.core.response import FusionResponse

BASE_URL = "https://auth.example.com"


@pytest.fixture
def client_config():
    return ClientConfig(
        base_url=BASE_URL,
        client_id="CID",
        client_secret=SecretStr("secret"),
    )


@pytest.fixture
def make_envelope():
    """Build a FusionResponse as the executor would from a real response."""

    def _make(status_code: int = 200, json_body: Any = None, content: Optional[bytes] = None) -> FusionResponse:
        if json_body is not None:
            content = json.dumps(json_body).encode()
        content = content or b""
        response = httpx.Response(
            status_code,
            content=content,
            request=httpx.Request("POST", f"{BASE_URL}/oauth2/token"),
        )
        return FusionResponse(data=content, response=response)

    return _make
