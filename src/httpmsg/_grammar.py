"""Grammar validation for request methods, targets and header fields.

Pure functions and frozen value types checking input against the HTTP
(RFC 7230) and URI (RFC 3986) grammars. A value type can only be
constructed from input that passes its check, so holding an instance is
proof of validity.

All patterns are compiled with ``google-re2``: matching is linear-time in
the input length, which matters because request targets and header values
frequently come from untrusted sources.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import NoReturn

import re2

from httpmsg._log import get_logger

# ═══════════════════════════════════════════════════════════════════════════════
# Limits
# ═══════════════════════════════════════════════════════════════════════════════

MAX_TARGET_LENGTH = 8192

DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class GrammarError(ValueError):
    """Input rejected by an HTTP or URI grammar rule.

    Carries the rejected raw input and the violated rule so callers can
    report precisely what was wrong.
    """

    what = "value"

    def __init__(self, value: object, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"invalid {self.what} {value!r}: {reason}")


class InvalidMethod(GrammarError):
    """The request method is not an RFC 7230 token."""

    what = "method"


class InvalidUri(GrammarError):
    """The absolute URI is malformed or lacks a scheme or host."""

    what = "absolute URI"


class InvalidUrl(GrammarError):
    """The URL is not in origin-form (path and optional query only)."""

    what = "origin-form URL"


class InvalidHeader(GrammarError):
    """A header name is not a token, or a header value is not a field-value."""

    what = "header"


class InvalidProtocolVersion(GrammarError):
    """The protocol version is empty or contains whitespace."""

    what = "protocol version"


# ═══════════════════════════════════════════════════════════════════════════════
# Patterns (RFC 7230 §3.2.6, RFC 3986 §2-3, Appendix B)
# ═══════════════════════════════════════════════════════════════════════════════

_TCHAR = r"!#$%&'*+\-.^_`|~0-9A-Za-z"
_UNRESERVED = r"A-Za-z0-9\-._~"
_SUB_DELIMS = r"!$&'()*+,;="
_PCT_ENCODED = r"%[0-9A-Fa-f]{2}"

_TOKEN_RE = re2.compile("[" + _TCHAR + "]+")
_FIELD_VALUE_RE = re2.compile(r"[\t\x20-\x7e\x{80}-\x{ff}]*")
_VERSION_RE = re2.compile(r"[^\x00-\x20\x7f]+")
_CONTROL_RE = re2.compile(r"[\x00-\x20\x7f]")
_WELL_FORMED_PCT_RE = re2.compile("(?:[^%]|" + _PCT_ENCODED + ")*")

# Splits any URI reference into scheme, authority, path, query, fragment.
_URI_REFERENCE_RE = re2.compile(
    r"(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?"
)

_SCHEME_RE = re2.compile(r"[A-Za-z][A-Za-z0-9+\-.]*")
_USERINFO_RE = re2.compile(
    "(?:[" + _UNRESERVED + _SUB_DELIMS + ":]|" + _PCT_ENCODED + ")*"
)
_REG_NAME_RE = re2.compile(
    "(?:[" + _UNRESERVED + _SUB_DELIMS + "]|" + _PCT_ENCODED + ")+"
)
_IP_LITERAL_RE = re2.compile(
    r"\[(?:[0-9A-Fa-f:.]+|[vV][0-9A-Fa-f]+\.[" + _UNRESERVED + _SUB_DELIMS + r":]+)\]"
)
_PORT_RE = re2.compile(r"[0-9]*")
_PATH_RE = re2.compile(
    "(?:[" + _UNRESERVED + _SUB_DELIMS + ":@/]|" + _PCT_ENCODED + ")*"
)
# Query and fragment share one grammar.
_QUERY_RE = re2.compile(
    "(?:[" + _UNRESERVED + _SUB_DELIMS + ":@/?]|" + _PCT_ENCODED + ")*"
)


class UrlPolicy(enum.Enum):
    """What to do when an origin-form URL carries scheme, authority or fragment.

    REJECT raises InvalidUrl. STRIP drops those parts and keeps path+query.
    REJECT is the default everywhere; STRIP must be asked for explicitly.
    """

    REJECT = "reject"
    STRIP = "strip"


def _fail(error: type[GrammarError], value: object, reason: str) -> NoReturn:
    get_logger().debug("rejected %s %r: %s", error.what, value, reason)
    raise error(value, reason)


def _check_target_text(error: type[GrammarError], value: object) -> str:
    """Checks shared by absolute URIs and origin-form URLs."""
    if not isinstance(value, str):
        _fail(error, value, f"expected str, got {type(value).__name__}")
    if len(value) > MAX_TARGET_LENGTH:
        _fail(error, value, f"length {len(value)} exceeds maximum {MAX_TARGET_LENGTH}")
    if _CONTROL_RE.search(value) is not None:
        _fail(error, value, "contains whitespace or control characters")
    if _WELL_FORMED_PCT_RE.fullmatch(value) is None:
        _fail(error, value, "malformed percent-encoding")
    return value


def _check_path_and_query(
    error: type[GrammarError], value: str, path: str, query: str | None
) -> None:
    if _PATH_RE.fullmatch(path) is None:
        _fail(error, value, f"invalid character in path {path!r}")
    if query is not None and _QUERY_RE.fullmatch(query) is None:
        _fail(error, value, f"invalid character in query {query!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# Value types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Method:
    """A validated HTTP method token.

    Methods are case-sensitive, so the value is kept exactly as supplied.

    Raises:
        InvalidMethod: If the value is empty or contains a non-tchar character.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            _fail(InvalidMethod, self.value, f"expected str, got {type(self.value).__name__}")
        if not self.value:
            _fail(InvalidMethod, self.value, "method must not be empty")
        if _TOKEN_RE.fullmatch(self.value) is None:
            _fail(InvalidMethod, self.value, "method must consist of token characters only")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class OriginUrl:
    """A validated origin-form request target: path plus optional query.

    An empty path is normalized to "/", so ``OriginUrl("?a=1").value`` is
    ``"/?a=1"``. Input carrying a scheme, an authority or a fragment is
    rejected; use ``validate_origin_form_url(..., policy=UrlPolicy.STRIP)``
    to drop those parts instead.

    Raises:
        InvalidUrl: If the value is not origin-form.
    """

    value: str
    path: str = field(init=False, repr=False, compare=False)
    query: str | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        raw = _check_target_text(InvalidUrl, self.value)
        m = _URI_REFERENCE_RE.fullmatch(raw)
        if m is None:  # pragma: no cover - every string matches the reference grammar
            _fail(InvalidUrl, raw, "unparseable URL")
        scheme, authority, path, query, fragment = m.groups()
        if scheme is not None:
            _fail(InvalidUrl, raw, "contains a scheme; only path and query are allowed")
        if authority is not None:
            _fail(InvalidUrl, raw, "contains an authority; only path and query are allowed")
        if fragment is not None:
            _fail(InvalidUrl, raw, "contains a fragment; only path and query are allowed")
        if path and not path.startswith("/"):
            _fail(InvalidUrl, raw, "path must begin with '/'")
        _check_path_and_query(InvalidUrl, raw, path, query)

        path = path or "/"
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "query", query)
        object.__setattr__(self, "value", _join_origin_form(path, query))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class AbsoluteUri:
    """A validated absolute URI with at least a scheme and a host.

    The original text is kept verbatim in ``value``; the parsed components
    are exposed as attributes. ``port`` is None when the URI names no port.

    Raises:
        InvalidUri: If the scheme or host is missing, or any component is
            malformed. A path starting with "//" (for example
            ``http://example.com//a``) is also rejected even though RFC 3986
            allows it, because its origin-form would read as an authority.
    """

    value: str
    scheme: str = field(init=False, repr=False, compare=False)
    authority: str = field(init=False, repr=False, compare=False)
    userinfo: str | None = field(init=False, repr=False, compare=False)
    host: str = field(init=False, repr=False, compare=False)
    port: int | None = field(init=False, repr=False, compare=False)
    path: str = field(init=False, repr=False, compare=False)
    query: str | None = field(init=False, repr=False, compare=False)
    fragment: str | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        raw = _check_target_text(InvalidUri, self.value)
        if not raw:
            _fail(InvalidUri, raw, "URI must not be empty")
        m = _URI_REFERENCE_RE.fullmatch(raw)
        if m is None:  # pragma: no cover - every string matches the reference grammar
            _fail(InvalidUri, raw, "unparseable URI")
        scheme, authority, path, query, fragment = m.groups()

        if scheme is None:
            _fail(InvalidUri, raw, "missing scheme")
        if _SCHEME_RE.fullmatch(scheme) is None:
            _fail(InvalidUri, raw, f"invalid scheme {scheme!r}")
        if authority is None:
            _fail(InvalidUri, raw, "missing authority; expected '//' followed by a host")

        userinfo, host, port = _parse_authority(raw, authority)
        if path.startswith("//"):
            # In origin-form a leading "//" would parse as an authority.
            _fail(InvalidUri, raw, "path must not begin with '//'")
        _check_path_and_query(InvalidUri, raw, path, query)
        if fragment is not None and _QUERY_RE.fullmatch(fragment) is None:
            _fail(InvalidUri, raw, f"invalid character in fragment {fragment!r}")

        object.__setattr__(self, "scheme", scheme)
        object.__setattr__(self, "authority", authority)
        object.__setattr__(self, "userinfo", userinfo)
        object.__setattr__(self, "host", host)
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "query", query)
        object.__setattr__(self, "fragment", fragment)

    def __str__(self) -> str:
        return self.value

    @property
    def origin_form(self) -> str:
        """Path and query as an origin-form URL; an empty path reads as "/"."""
        return _join_origin_form(self.path or "/", self.query)

    @property
    def effective_port(self) -> int | None:
        """The explicit port, else the scheme's default port (if known)."""
        if self.port is not None:
            return self.port
        return DEFAULT_PORTS.get(self.scheme.lower())

    def with_origin_form(self, url: OriginUrl) -> AbsoluteUri:
        """Return a copy whose path and query are taken from ``url``.

        Scheme, authority and fragment are carried over untouched.
        """
        text = f"{self.scheme}://{self.authority}{url.value}"
        if self.fragment is not None:
            text = f"{text}#{self.fragment}"
        return AbsoluteUri(text)


def _join_origin_form(path: str, query: str | None) -> str:
    if query is None:
        return path
    return f"{path}?{query}"


def _parse_authority(raw: str, authority: str) -> tuple[str | None, str, int | None]:
    """Split an authority into (userinfo, host, port) and validate each part."""
    userinfo: str | None = None
    hostport = authority
    if "@" in authority:
        userinfo, _, hostport = authority.rpartition("@")
        if _USERINFO_RE.fullmatch(userinfo) is None:
            _fail(InvalidUri, raw, f"invalid userinfo {userinfo!r}")

    if hostport.startswith("["):
        close = hostport.find("]")
        if close == -1:
            _fail(InvalidUri, raw, "unterminated IP literal in host")
        host, rest = hostport[: close + 1], hostport[close + 1 :]
        if _IP_LITERAL_RE.fullmatch(host) is None:
            _fail(InvalidUri, raw, f"invalid IP literal {host!r}")
        if rest and not rest.startswith(":"):
            _fail(InvalidUri, raw, f"unexpected text after IP literal: {rest!r}")
        port_text = rest[1:] if rest else ""
    else:
        host, _, port_text = hostport.partition(":")
        if not host:
            _fail(InvalidUri, raw, "missing host")
        if _REG_NAME_RE.fullmatch(host) is None:
            _fail(InvalidUri, raw, f"invalid host {host!r}")

    if _PORT_RE.fullmatch(port_text) is None:
        _fail(InvalidUri, raw, f"port must be numeric, got {port_text!r}")
    port: int | None = None
    if port_text:
        port = int(port_text)
        if port > 65535:
            _fail(InvalidUri, raw, f"port {port} out of range")
    return userinfo, host, port


# ═══════════════════════════════════════════════════════════════════════════════
# Validator entry points
# ═══════════════════════════════════════════════════════════════════════════════


def validate_method(value: str) -> Method:
    """Validate an HTTP method token. Case is never altered."""
    return Method(value)


def validate_absolute_uri(value: str) -> AbsoluteUri:
    """Validate an absolute URI (scheme and host required)."""
    return AbsoluteUri(value)


def validate_origin_form_url(value: str, *, policy: UrlPolicy = UrlPolicy.REJECT) -> OriginUrl:
    """Validate an origin-form URL.

    Under ``UrlPolicy.REJECT`` (the default) any scheme, authority or
    fragment fails validation. Under ``UrlPolicy.STRIP`` they are removed
    and the remaining path and query are validated.
    """
    if policy is UrlPolicy.STRIP and isinstance(value, str):
        stripped = _strip_to_origin_form(value)
        if stripped != value:
            get_logger().debug("stripped %r to origin-form %r", value, stripped)
        return OriginUrl(stripped)
    return OriginUrl(value)


def _strip_to_origin_form(value: str) -> str:
    m = _URI_REFERENCE_RE.fullmatch(value)
    if m is None:  # pragma: no cover - every string matches the reference grammar
        return value
    _scheme, _authority, path, query, _fragment = m.groups()
    return _join_origin_form(path, query)


def validate_header_name(name: str) -> str:
    """Validate a header field name (an RFC 7230 token)."""
    if not isinstance(name, str):
        _fail(InvalidHeader, name, f"name must be str, got {type(name).__name__}")
    if _TOKEN_RE.fullmatch(name) is None:
        _fail(InvalidHeader, name, "name must be a non-empty token")
    return name


def validate_header_value(name: str, value: str) -> str:
    """Validate a header field value: no CR, LF, NUL or other controls."""
    if not isinstance(value, str):
        _fail(InvalidHeader, value, f"value of {name!r} must be str, got {type(value).__name__}")
    if _FIELD_VALUE_RE.fullmatch(value) is None:
        _fail(InvalidHeader, value, f"value of {name!r} contains control characters")
    return value


def validate_protocol_version(version: str) -> str:
    """Validate a protocol version: non-empty, no whitespace or controls."""
    if not isinstance(version, str):
        _fail(
            InvalidProtocolVersion,
            version,
            f"expected str, got {type(version).__name__}",
        )
    if _VERSION_RE.fullmatch(version) is None:
        _fail(
            InvalidProtocolVersion,
            version,
            "must be non-empty and free of whitespace",
        )
    return version
