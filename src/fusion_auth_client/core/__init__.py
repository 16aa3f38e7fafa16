from .completion import CallbackCompletable, FutureCompletable
from .handlers import Handler, authentication_object, codable, decode_model, no_body, plain_json
from .request import FusionRequest
from .response import FusionResponse, classify

__all__ = [
    "CallbackCompletable", "FutureCompletable",
    "Handler", "authentication_object", "codable", "decode_model", "no_body", "plain_json",
    "FusionRequest",
    "FusionResponse", "classify",
]
