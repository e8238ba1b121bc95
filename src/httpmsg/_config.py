"""Config types for declarative request construction.

Config-driven construction path:
  dict → parse_request_config() → RequestConfig → load_request() → Request

Parsing only checks the shape of the dict. Grammar checks (method token,
URI syntax, header fields) run in load_request(), where they raise the
same errors as the Request API itself.

Example (YAML)::

    method: POST
    target: https://api.example.com/v1/items?page=2
    protocol_version: "1.1"
    headers:
      Content-Type: application/json
      Accept: [application/json, text/plain]
    url_policy: reject
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from httpmsg._grammar import UrlPolicy
from httpmsg._request import Request, RequestTarget

if TYPE_CHECKING:
    from httpmsg._types import Body

_KNOWN_FIELDS = frozenset({"method", "target", "protocol_version", "headers", "url_policy"})


class ConfigParseError(Exception):
    """Error parsing a config dict into config types."""


@dataclass(frozen=True, slots=True)
class RequestConfig:
    """Shape-checked description of a request.

    ``headers`` is a tuple of (name, value) pairs in declaration order;
    repeated names become repeated values.
    """

    method: str = "GET"
    target: str = "/"
    protocol_version: str = "1.1"
    headers: tuple[tuple[str, str], ...] = ()
    url_policy: UrlPolicy = UrlPolicy.REJECT


def parse_request_config(data: dict[str, Any]) -> RequestConfig:
    """Parse a dict into a RequestConfig.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    unknown = sorted(set(data) - _KNOWN_FIELDS)
    if unknown:
        msg = f"unknown request config fields: {unknown}"
        raise ConfigParseError(msg)

    return RequestConfig(
        method=_parse_str(data, "method", "GET"),
        target=_parse_str(data, "target", "/"),
        protocol_version=_parse_protocol_version(data.get("protocol_version", "1.1")),
        headers=_parse_headers(data.get("headers", {})),
        url_policy=_parse_url_policy(data.get("url_policy", UrlPolicy.REJECT.value)),
    )


def load_request(config: RequestConfig, body: Body | None = None) -> Request:
    """Build a Request from a parsed config.

    Raises:
        InvalidMethod, InvalidUri, InvalidUrl, InvalidHeader,
        InvalidProtocolVersion: If a field fails its grammar check.
    """
    target = str(RequestTarget.parse(config.target, policy=config.url_policy))
    return Request(
        config.method,
        target,
        protocol_version=config.protocol_version,
        headers=config.headers,
        body=body,
    )


def _parse_str(data: dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        msg = f"'{key}' must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value


def _parse_protocol_version(value: Any) -> str:
    # YAML reads an unquoted 1.1 as a float.
    if isinstance(value, float | int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        msg = f"'protocol_version' must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value


def _parse_headers(data: Any) -> tuple[tuple[str, str], ...]:
    """Parse headers given as a mapping or as a list of [name, value] pairs."""
    pairs: list[tuple[str, str]] = []
    if isinstance(data, dict):
        for name, values in data.items():
            if not isinstance(name, str):
                msg = f"header name must be a string, got {type(name).__name__}"
                raise ConfigParseError(msg)
            if isinstance(values, str):
                values = [values]
            if not isinstance(values, list):
                msg = (
                    f"header {name!r} must be a string or a list of strings, "
                    f"got {type(values).__name__}"
                )
                raise ConfigParseError(msg)
            for value in values:
                pairs.append(_header_pair(name, value))
        return tuple(pairs)

    if isinstance(data, list):
        for item in data:
            if not isinstance(item, list | tuple) or len(item) != 2:
                msg = f"header entry must be a [name, value] pair, got {item!r}"
                raise ConfigParseError(msg)
            name, value = item
            if not isinstance(name, str):
                msg = f"header name must be a string, got {type(name).__name__}"
                raise ConfigParseError(msg)
            pairs.append(_header_pair(name, value))
        return tuple(pairs)

    msg = f"'headers' must be a dict or a list, got {type(data).__name__}"
    raise ConfigParseError(msg)


def _header_pair(name: str, value: Any) -> tuple[str, str]:
    if not isinstance(value, str):
        msg = f"value of header {name!r} must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return name, value


def _parse_url_policy(value: Any) -> UrlPolicy:
    try:
        return UrlPolicy(value)
    except ValueError:
        expected = sorted(p.value for p in UrlPolicy)
        msg = f"'url_policy' must be one of {expected}, got {value!r}"
        raise ConfigParseError(msg) from None
