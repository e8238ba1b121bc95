"""httpmsg — Immutable HTTP client request values.

All public types are exported from this module for flat imports:

    from httpmsg import Request, Headers, InvalidUrl
"""

__version__ = "0.1.0"

# Body handles
from httpmsg._body import BytesBody, EmptyBody, StreamBody

# Config types: see httpmsg._config for details
from httpmsg._config import (
    ConfigParseError,
    RequestConfig,
    load_request,
    parse_request_config,
)

# Grammar: value types, errors and validators
from httpmsg._grammar import (
    DEFAULT_PORTS,
    MAX_TARGET_LENGTH,
    AbsoluteUri,
    GrammarError,
    InvalidHeader,
    InvalidMethod,
    InvalidProtocolVersion,
    InvalidUri,
    InvalidUrl,
    Method,
    OriginUrl,
    UrlPolicy,
    validate_absolute_uri,
    validate_header_name,
    validate_header_value,
    validate_method,
    validate_origin_form_url,
    validate_protocol_version,
)
from httpmsg._headers import Headers
from httpmsg._log import get_logger
from httpmsg._message import Message
from httpmsg._request import Request, RequestTarget
from httpmsg._types import Body

__all__ = [
    # Protocols
    "Body",
    # Messages
    "Message",
    "Request",
    "RequestTarget",
    "Headers",
    # Body handles
    "EmptyBody",
    "BytesBody",
    "StreamBody",
    # Grammar value types
    "Method",
    "AbsoluteUri",
    "OriginUrl",
    "UrlPolicy",
    # Validators
    "validate_method",
    "validate_absolute_uri",
    "validate_origin_form_url",
    "validate_header_name",
    "validate_header_value",
    "validate_protocol_version",
    # Errors
    "GrammarError",
    "InvalidMethod",
    "InvalidUri",
    "InvalidUrl",
    "InvalidHeader",
    "InvalidProtocolVersion",
    "ConfigParseError",
    # Config
    "RequestConfig",
    "parse_request_config",
    "load_request",
    # Limits
    "MAX_TARGET_LENGTH",
    "DEFAULT_PORTS",
    # Logging
    "get_logger",
]
