"""
Completion adapters over the single ``Completable.resolve`` entry point.
"""
import asyncio
import logging
from typing import Any, Callable, Union

from ..types import Completable

logger = logging.getLogger(__name__)
LOG_PREFIX = "[FusionAuth]"


class CallbackCompletable:
    """Forwards the result to a plain callable, at most once."""

    def __init__(self, callback: Callable[[Any], None]):
        self._callback = callback
        self._resolved = False

    def resolve(self, result: Any) -> None:
        if self._resolved:
            logger.warning(f"{LOG_PREFIX} Ignoring second completion: {result!r}")
            return
        self._resolved = True
        self._callback(result)


class FutureCompletable:
    """Resolves an asyncio future with the result."""

    def __init__(self, future: "asyncio.Future[Any]"):
        self._future = future

    def resolve(self, result: Any) -> None:
        # A cancelled waiter drops the result; the HTTP call already finished
        if self._future.done():
            logger.debug(f"{LOG_PREFIX} Waiter already done, dropping result: {result!r}")
            return
        self._future.set_result(result)


def as_completable(target: Union[Completable, Callable[[Any], None]]) -> Completable:
    """Wrap ``target`` so it is resolved at most once."""
    if isinstance(target, (CallbackCompletable, FutureCompletable)):
        return target
    if isinstance(target, Completable):
        return CallbackCompletable(target.resolve)
    return CallbackCompletable(target)
