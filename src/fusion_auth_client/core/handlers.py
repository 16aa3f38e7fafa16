"""
Decode strategies.

Each handler turns a ``FusionResponse`` into exactly one ``Success`` or
``Failure`` and hands it to the callback. Handlers hold no state, so one
handler may serve any number of concurrent requests.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Type, TypeVar, get_args

from pydantic import BaseModel

from ..errors import AuthenticationError, AuthenticationErrorCode
from ..result import Failure, Success
from ..types import Callback, DateDecodingStrategy, JSONObjectPayload
from .response import FusionResponse, classify

logger = logging.getLogger(__name__)
LOG_PREFIX = "[FusionAuth]"

Handler = Callable[[FusionResponse, Callback], None]
M = TypeVar("M", bound=BaseModel)


def _surface(error: AuthenticationError) -> AuthenticationError:
    """Only no_body accepts an empty body; everyone else gets INVALID_RESPONSE."""
    if error.code == AuthenticationErrorCode.EMPTY_BODY:
        return AuthenticationError(
            AuthenticationErrorCode.INVALID_RESPONSE,
            status_code=error.status_code,
            info={"message": "The response body is empty."},
        )
    return error


def plain_json(response: FusionResponse, callback: Callback) -> None:
    """Succeed with the raw JSON object."""
    try:
        value = response.result()
    except AuthenticationError as e:
        callback(Failure(_surface(e)))
        return
    if isinstance(value, dict):
        callback(Success(value))
    else:
        callback(Failure(classify(response)))


def _is_date_annotation(annotation: Any) -> bool:
    if annotation is datetime:
        return True
    return datetime in get_args(annotation)


def _date_keys(model: Type[BaseModel]) -> List[str]:
    keys: List[str] = []
    for name, field in model.model_fields.items():
        if _is_date_annotation(field.annotation):
            keys.append(name)
            if field.alias and field.alias != name:
                keys.append(field.alias)
    return keys


def _convert_date(value: Any, strategy: DateDecodingStrategy, now: datetime) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if strategy == DateDecodingStrategy.SINCE_NOW:
        return now + timedelta(seconds=value)
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def decode_model(
    model: Type[M],
    obj: Dict[str, Any],
    date_decoding: DateDecodingStrategy = DateDecodingStrategy.SINCE_NOW,
) -> M:
    """Validate ``obj`` into ``model``, reading numeric date fields per ``date_decoding``."""
    now = datetime.now(timezone.utc)
    data = dict(obj)
    for key in _date_keys(model):
        if key in data:
            data[key] = _convert_date(data[key], date_decoding, now)
    return model.model_validate(data)


def codable(
    model: Type[M],
    date_decoding: DateDecodingStrategy = DateDecodingStrategy.SINCE_NOW,
) -> Handler:
    """Handler decoding the JSON object into the pydantic ``model``."""

    def handle(response: FusionResponse, callback: Callback) -> None:
        try:
            value = response.result()
        except AuthenticationError as e:
            callback(Failure(_surface(e)))
            return
        if not isinstance(value, dict):
            callback(Failure(classify(response)))
            return
        try:
            decoded = decode_model(model, value, date_decoding)
        except (ValueError, TypeError, OverflowError, OSError) as e:
            logger.debug(f"{LOG_PREFIX} Unable to decode {model.__name__}: {e}")
            callback(Failure(AuthenticationError(
                AuthenticationErrorCode.INVALID_RESPONSE,
                status_code=response.status_code,
                cause=e,
            )))
            return
        callback(Success(decoded))

    handle.__name__ = f"codable[{model.__name__}]"
    return handle


def authentication_object(payload: Type[JSONObjectPayload]) -> Handler:
    """Handler delegating construction to ``payload.from_json``."""

    def handle(response: FusionResponse, callback: Callback) -> None:
        try:
            value = response.result()
        except AuthenticationError as e:
            callback(Failure(_surface(e)))
            return
        built = None
        if isinstance(value, dict):
            try:
                built = payload.from_json(value)
            except Exception as e:
                callback(Failure(AuthenticationError(
                    AuthenticationErrorCode.INVALID_RESPONSE,
                    status_code=response.status_code,
                    cause=e,
                )))
                return
        if built is None:
            callback(Failure(classify(response)))
        else:
            callback(Success(built))

    handle.__name__ = f"authentication_object[{payload.__name__}]"
    return handle


def no_body(response: FusionResponse, callback: Callback) -> None:
    """Succeed with ``None`` on an empty body; an unexpected payload is ignored."""
    try:
        value = response.result()
    except AuthenticationError as e:
        if e.code == AuthenticationErrorCode.EMPTY_BODY:
            callback(Success(None))
        else:
            callback(Failure(e))
        return
    if isinstance(value, dict):
        logger.debug(f"{LOG_PREFIX} Ignoring payload on a no-body endpoint: {value}")
    callback(Success(None))
