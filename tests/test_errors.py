"""
Tests for structured errors.
"""
import httpx
import pytest

from fusion_auth_client.errors import (
    AuthenticationError,
    AuthenticationErrorCode,
    CredentialsManagerError,
    CredentialsManagerErrorCode,
    FusionAuthError,
)
from fusion_auth_client.result import Failure, Success


def test_matches_compares_code_only():
    a = AuthenticationError(AuthenticationErrorCode.REQUEST_FAILED, status_code=401, info={"error": "invalid_grant"})
    b = AuthenticationError(AuthenticationErrorCode.REQUEST_FAILED, status_code=500, info={"message": "boom"})

    assert a.matches(b)
    assert a != b
    assert not a.matches(AuthenticationError(AuthenticationErrorCode.INVALID_RESPONSE))
    assert not a.matches(CredentialsManagerError(CredentialsManagerErrorCode.RENEW_FAILED))


def test_equality_ignores_cause():
    a = AuthenticationError(AuthenticationErrorCode.TRANSPORT_ERROR, cause=httpx.ConnectError("a"))
    b = AuthenticationError(AuthenticationErrorCode.TRANSPORT_ERROR, cause=httpx.ReadTimeout("b"))

    assert a == b
    assert hash(a) == hash(b)


def test_debug_description_appends_cause():
    cause = ValueError("bad json")
    error = AuthenticationError(AuthenticationErrorCode.INVALID_RESPONSE, cause=cause)

    assert str(error) == "The response could not be decoded."
    assert error.debug_description == "The response could not be decoded. CAUSE: ValueError('bad json')"

    no_period = AuthenticationError(AuthenticationErrorCode.REQUEST_FAILED, status_code=400, cause=cause)
    assert no_period.debug_description.startswith("[400] The request failed. CAUSE:")


def test_authentication_error_is_raisable():
    with pytest.raises(AuthenticationError) as exc:
        Failure(AuthenticationError(AuthenticationErrorCode.REQUEST_FAILED, status_code=403)).get()
    assert exc.value.status_code == 403
    assert Success(1).get() == 1


def test_credentials_manager_messages():
    error = CredentialsManagerError(CredentialsManagerErrorCode.NO_REFRESH_TOKEN)
    assert str(error) == "The stored credentials instance does not contain a refresh token."


def test_large_min_ttl_renders_values():
    error = CredentialsManagerError.large_min_ttl(min_ttl=7200, lifetime=3600)

    assert "(7200s)" in str(error)
    assert "(3600s)" in str(error)
    assert error.matches(CredentialsManagerError.large_min_ttl(0, 0))
    assert error != CredentialsManagerError.large_min_ttl(0, 0)


def test_renew_failed_wraps_pipeline_error():
    cause = AuthenticationError(AuthenticationErrorCode.REQUEST_FAILED, status_code=401, info={"error": "invalid_grant"})
    error = CredentialsManagerError(CredentialsManagerErrorCode.RENEW_FAILED, cause=cause)

    assert error == CredentialsManagerError(CredentialsManagerErrorCode.RENEW_FAILED)
    assert error.cause.is_invalid_grant
    assert "invalid_grant" in error.debug_description


def test_base_error_declares_message_abstract():
    assert FusionAuthError.__abstractmethods__ == frozenset({"message"})
    assert not AuthenticationError.__abstractmethods__
    assert not CredentialsManagerError.__abstractmethods__
