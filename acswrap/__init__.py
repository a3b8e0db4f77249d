"""acswrap: WRAP v0.9 token acquisition for the Access Control Service."""

from .config import AcsWrapConfig, WrapIdentity, load_config, resolve_identity
from .contracts import (
    AcquisitionResult,
    AcsTokenResult,
    HttpResponse,
    RequestOptions,
    WebResource,
)
from .decoder import parse_wrap_response
from .errors import AcsWrapError, DecodeError, InvalidArgumentError, TransportError
from .service import WrapService, build_wrap_body
from .transports import get_transport

__version__ = "0.1.0"
__all__ = [
    "AcquisitionResult",
    "AcsTokenResult",
    "AcsWrapConfig",
    "AcsWrapError",
    "DecodeError",
    "HttpResponse",
    "InvalidArgumentError",
    "RequestOptions",
    "TransportError",
    "WebResource",
    "WrapIdentity",
    "WrapService",
    "build_wrap_body",
    "get_transport",
    "load_config",
    "parse_wrap_response",
    "resolve_identity",
]
