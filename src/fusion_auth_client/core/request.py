"""
Typed request builder and executor.
"""
import asyncio
import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any, AsyncIterator, Dict, Generic, Optional, Set, TypeVar, Union
from urllib.parse import urlencode, urlsplit, urlunsplit

import httpx

from ..auth.auth_handler import AuthHandler
from ..errors import AuthenticationError, AuthenticationErrorCode
from ..result import Failure
from ..types import Callback, Completable, ContentType, RequestContext
from .completion import FutureCompletable, as_completable
from .handlers import Handler
from .response import FusionResponse

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[FusionAuth]"
_QUERY_SAFE = "@:/!$'()*,;?"

T = TypeVar("T")

# Keeps scheduled sends alive until they complete
_pending: Set["asyncio.Task[None]"] = set()


def _format_body(body: Any) -> str:
    """
    Format body for logging safeguards against binary data.
    """
    if body is None or body == b"":
        return "<empty>"
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return f"<binary data: {len(body)} bytes>"
    if isinstance(body, str):
        try:
            # Try to pretty print if it looks like JSON
            if body.strip().startswith(("{", "[")):
                return json.dumps(json.loads(body), indent=2)
        except (ValueError, RecursionError):
            pass
        # Truncate long strings
        if len(body) > 5000:
            return body[:5000] + "... (truncated)"
        return body
    if isinstance(body, dict):
        return json.dumps(body, indent=2)
    return str(body)


def _describe(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def _append_query(url: str, parameters: Dict[str, Any]) -> str:
    """Append parameters after any existing query items, which are left as written."""
    parts = urlsplit(url)
    encoded = urlencode([(key, _describe(value)) for key, value in parameters.items()], safe=_QUERY_SAFE)
    query = f"{parts.query}&{encoded}" if parts.query else encoded
    return urlunsplit(parts._replace(query=query))


def _task_done(task: "asyncio.Task[None]") -> None:
    _pending.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"{LOG_PREFIX} Completion callback raised: {exc!r}", exc_info=exc)


@dataclass(frozen=True)
class FusionRequest(Generic[T]):
    """
    One configured API call: how to build it and how to decode its response.

    Instances are immutable; ``with_parameters`` and ``with_headers`` return
    copies. Each call to ``start``, ``execute`` or iteration of ``publisher``
    sends exactly one HTTP request.
    """
    client: httpx.AsyncClient
    url: str
    method: str
    handle: Handler
    parameters: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    content_type: ContentType = ContentType.JSON
    auth_handler: Optional[AuthHandler] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", dict(self.parameters))
        object.__setattr__(self, "headers", dict(self.headers))

    @property
    def request(self) -> httpx.Request:
        """The wire request described by this builder."""
        url = self.url
        body: Optional[bytes] = None
        if self.parameters:
            if self.method.upper() == "GET" or self.content_type == ContentType.URL_ENCODED:
                url = _append_query(url, self.parameters)
            else:
                try:
                    body = json.dumps(self.parameters).encode("utf-8")
                except (TypeError, ValueError) as e:
                    # Sent without a body
                    logger.debug(f"{LOG_PREFIX} Parameters are not JSON serializable: {e}")

        headers = httpx.Headers({"Content-Type": self.content_type.value})
        if self.auth_handler:
            context: RequestContext = {
                "method": self.method,
                "url": url,
                "headers": dict(headers),
                "body": body,
            }
            auth_headers = self.auth_handler.get_header(context)
            if auth_headers:
                headers.update(auth_headers)
        for name, value in self.headers.items():
            headers[name] = value

        return httpx.Request(self.method, url, headers=headers, content=body)

    def with_parameters(self, extra: Dict[str, Any]) -> "FusionRequest[T]":
        """Copy with ``extra`` merged into the parameters; ``extra`` wins."""
        return replace(self, parameters={**self.parameters, **extra})

    def with_headers(self, extra: Dict[str, str]) -> "FusionRequest[T]":
        """Copy with ``extra`` merged into the headers; ``extra`` wins."""
        return replace(self, headers={**self.headers, **extra})

    # =========================================================================
    # Execution
    # =========================================================================

    def start(self, callback: Union[Callback, Completable]) -> "asyncio.Task[None]":
        """
        Send the request and deliver one ``Success``/``Failure`` to ``callback``.

        Must be called with a running event loop; the callback runs on it.
        """
        completable = as_completable(callback)
        request = self.request
        task = asyncio.get_running_loop().create_task(self._send(request, completable))
        _pending.add(task)
        task.add_done_callback(_task_done)
        return task

    async def _send(self, request: httpx.Request, completable: Completable) -> None:
        logger.debug(f"{LOG_PREFIX} Request: {request.method} {request.url}")
        try:
            response = await self.client.send(request)
        except Exception as e:
            # httpx errors, and anything else the client raises (e.g. once closed)
            logger.warning(f"{LOG_PREFIX} Request failed: {request.method} {request.url}: {e!r}")
            envelope = FusionResponse(error=e)
        else:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    f"{LOG_PREFIX} Response: {response.status_code} {_format_body(response.content)}"
                )
            envelope = FusionResponse(data=response.content, response=response)

        delivered = []

        def deliver(result: Any) -> None:
            delivered.append(result)
            completable.resolve(result)

        try:
            self.handle(envelope, deliver)
        except Exception as e:
            if delivered:
                # Raised by the caller's callback
                raise
            logger.error(f"{LOG_PREFIX} Decode strategy raised: {e!r}", exc_info=e)
            completable.resolve(Failure(AuthenticationError(
                AuthenticationErrorCode.INVALID_RESPONSE,
                status_code=envelope.status_code,
                cause=e,
            )))

    async def execute(self) -> T:
        """
        Send the request and return the decoded value.

        Raises:
            AuthenticationError: the same error ``start`` would deliver.
        """
        future = asyncio.get_running_loop().create_future()
        self.start(FutureCompletable(future))
        result = await future
        return result.get()

    async def publisher(self) -> AsyncIterator[T]:
        """Single-element stream; nothing is sent until it is iterated."""
        yield await self.execute()
