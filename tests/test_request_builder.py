"""
Tests for FusionRequest request building.
"""
import json
from unittest.mock import MagicMock
from urllib.parse import parse_qsl

import httpx
import pytest

from fusion_auth_client.auth.auth_handler import StaticAuthHandler
from fusion_auth_client.core.handlers import no_body
from fusion_auth_client.core.request import FusionRequest, _append_query, _format_body
from fusion_auth_client.types import ContentType

URL = "https://auth.example.com/api/thing"


def make_request(**kwargs) -> FusionRequest:
    options = {
        "client": MagicMock(spec=httpx.AsyncClient),
        "url": URL,
        "method": "POST",
        "handle": no_body,
        "auth_handler": StaticAuthHandler("Basic fixed"),
    }
    options.update(kwargs)
    return FusionRequest(**options)


def test_get_parameters_go_to_query_in_order():
    request = make_request(method="get", parameters={"b": "2", "a": "1", "c": 3}).request

    assert request.content == b""
    assert parse_qsl(request.url.query.decode()) == [("b", "2"), ("a", "1"), ("c", "3")]


def test_existing_query_items_are_kept_and_duplicates_survive():
    request = make_request(
        method="GET",
        url=f"{URL}?a=0&keep=yes",
        parameters={"a": "1"},
    ).request

    assert parse_qsl(request.url.query.decode()) == [("a", "0"), ("keep", "yes"), ("a", "1")]


def test_existing_query_is_left_as_written():
    assert _append_query(f"{URL}?flag&path=%2Fhome", {"a": True}) == f"{URL}?flag&path=%2Fhome&a=true"

    request = make_request(method="GET", url=f"{URL}?flag", parameters={"a": "1"}).request
    assert request.url.query == b"flag&a=1"


@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE"])
def test_form_encoded_parameters_never_set_a_body(method):
    request = make_request(
        method=method,
        parameters={"grant_type": "refresh_token", "global": True},
        content_type=ContentType.URL_ENCODED,
    ).request

    assert request.content == b""
    assert dict(parse_qsl(request.url.query.decode())) == {"grant_type": "refresh_token", "global": "true"}
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_json_parameters_become_the_body():
    parameters = {"loginId": "a@b.com", "sendForgotPasswordEmail": True, "nested": {"n": [1, 2]}}
    request = make_request(parameters=parameters).request

    assert json.loads(request.content) == parameters
    assert request.url.query == b""
    assert request.headers["Content-Type"] == "application/json"


def test_unserializable_json_parameters_send_no_body():
    request = make_request(parameters={"bad": object()}).request

    assert request.content == b""
    assert str(request.url) == URL


@pytest.mark.parametrize("method", ["GET", "POST"])
def test_empty_parameters_leave_url_and_body_alone(method):
    request = make_request(method=method, parameters={}).request

    assert str(request.url) == URL
    assert request.content == b""


def test_fixed_headers_and_caller_override():
    request = make_request().request
    assert request.headers["Authorization"] == "Basic fixed"
    assert request.headers["Content-Type"] == "application/json"

    overridden = make_request(headers={"authorization": "Bearer mine", "content-type": "text/plain"}).request
    assert overridden.headers["Authorization"] == "Bearer mine"
    assert overridden.headers["Content-Type"] == "text/plain"
    assert len(overridden.headers.get_list("authorization")) == 1


def test_no_auth_handler_means_no_authorization_header():
    request = make_request(auth_handler=None).request
    assert "authorization" not in request.headers


def test_with_headers_later_value_wins():
    base = make_request()
    request = base.with_headers({"X": "1"}).with_headers({"X": "2"})

    assert request.request.headers["X"] == "2"
    assert base.headers == {}


def test_with_parameters_extra_wins_and_keeps_content_type():
    base = make_request(parameters={"a": "old", "b": "kept"}, content_type=ContentType.URL_ENCODED)
    request = base.with_parameters({"a": "new", "c": "added"})

    assert request.parameters == {"a": "new", "b": "kept", "c": "added"}
    assert request.content_type == ContentType.URL_ENCODED
    assert request.auth_handler is base.auth_handler
    assert base.parameters == {"a": "old", "b": "kept"}


def test_builder_copies_caller_mappings():
    parameters = {"a": "1"}
    request = make_request(parameters=parameters)
    parameters["a"] = "changed"

    assert request.parameters == {"a": "1"}


def test_wire_round_trip():
    request = make_request(
        method="GET",
        parameters={"token": "abc", "scope": "offline_access openid"},
        headers={"X-Trace": "t-1"},
    ).request

    target = request.url.raw_path.decode()
    lines = [f"{request.method} {target} HTTP/1.1"]
    lines += [f"{name}: {value}" for name, value in request.headers.items()]
    wire = "\r\n".join(lines) + "\r\n\r\n"

    head, _ = wire.split("\r\n\r\n", 1)
    request_line, *header_lines = head.split("\r\n")
    method, parsed_target, _ = request_line.split(" ")
    path, _, query = parsed_target.partition("?")
    parsed_headers = {k.lower(): v for k, v in (line.split(": ", 1) for line in header_lines)}

    assert method == "GET"
    assert path == "/api/thing"
    assert parse_qsl(query) == [("token", "abc"), ("scope", "offline_access openid")]
    assert parsed_headers == {k.lower(): v for k, v in request.headers.items()}


def test_format_body_safety():
    assert _format_body(None) == "<empty>"
    assert _format_body(b"") == "<empty>"
    assert _format_body(b'{"a": 1}') == '{\n  "a": 1\n}'
    assert _format_body(b"\xff\xfe\x00") == "<binary data: 3 bytes>"

    formatted = _format_body("a" * 6000)
    assert len(formatted) < 6000
    assert "... (truncated)" in formatted


def test_format_body_tolerates_deep_nesting():
    body = b"[" * 200000 + b"]" * 200000
    assert _format_body(body).endswith("... (truncated)")
