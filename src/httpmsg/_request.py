"""Request — an outgoing HTTP request as an immutable value.

The request target is kept in two synchronized forms:

- ``absolute_uri``: scheme, authority, path, query and fragment, or None
  when the scheme or host is unknown
- ``url``: the origin-form path and query, always present

Both forms are derived from a single parsed ``RequestTarget``, so the
path+query of ``absolute_uri`` always equals ``url``. Every ``with_*``
method validates its input first and only then builds the new request;
a failed call leaves nothing half-updated.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Self

from httpmsg._grammar import (
    AbsoluteUri,
    OriginUrl,
    UrlPolicy,
    validate_absolute_uri,
    validate_method,
    validate_origin_form_url,
)
from httpmsg._log import get_logger
from httpmsg._message import Message


@dataclass(frozen=True, slots=True)
class RequestTarget:
    """The pair (absolute URI, origin-form URL) with its sync invariant.

    Build one with ``RequestTarget.parse()``, ``from_absolute_uri()`` or
    ``from_url()``; the constructor checks that both forms agree.
    """

    url: OriginUrl
    absolute_uri: AbsoluteUri | None = None

    def __post_init__(self) -> None:
        if self.absolute_uri is not None and self.absolute_uri.origin_form != self.url.value:
            msg = (
                f"absolute URI {self.absolute_uri.value!r} does not carry "
                f"url {self.url.value!r}"
            )
            raise ValueError(msg)

    @classmethod
    def from_absolute_uri(cls, uri: AbsoluteUri) -> RequestTarget:
        return cls(url=OriginUrl(uri.origin_form), absolute_uri=uri)

    @classmethod
    def from_url(cls, url: OriginUrl) -> RequestTarget:
        return cls(url=url)

    @classmethod
    def parse(cls, target: str, *, policy: UrlPolicy = UrlPolicy.REJECT) -> RequestTarget:
        """Parse a raw target in absolute-form or origin-form.

        Targets starting with "/" (or "?", or empty) are origin-form;
        anything else must be an absolute URI.

        Raises:
            InvalidUri: If an absolute-form target is malformed.
            InvalidUrl: If an origin-form target is malformed.
        """
        if isinstance(target, str) and (not target or target[0] in "/?"):
            return cls.from_url(validate_origin_form_url(target, policy=policy))
        return cls.from_absolute_uri(validate_absolute_uri(target))

    def with_absolute_uri(self, uri: AbsoluteUri) -> RequestTarget:
        return RequestTarget.from_absolute_uri(uri)

    def with_url(self, url: OriginUrl) -> RequestTarget:
        """Swap the path+query; an existing absolute URI follows along."""
        if self.absolute_uri is None:
            return RequestTarget(url=url)
        return RequestTarget(url=url, absolute_uri=self.absolute_uri.with_origin_form(url))

    def __str__(self) -> str:
        if self.absolute_uri is not None:
            return self.absolute_uri.value
        return self.url.value


@dataclass(frozen=True, slots=True)
class Request(Message):
    """An outgoing HTTP request.

    ``method`` is an RFC 7230 token, kept with its exact casing. ``target``
    is either an absolute URI or an origin-form URL; after construction it
    holds the canonical text of the parsed target.

    >>> r = Request("GET", "http://example.com/a?b=1")
    >>> r.url
    '/a?b=1'
    >>> r.with_url("/c").absolute_uri
    'http://example.com/c'

    Raises:
        InvalidMethod: If ``method`` is not a token.
        InvalidUri: If ``target`` looks absolute but is malformed.
        InvalidUrl: If ``target`` looks origin-form but is malformed.
    """

    method: str = "GET"
    target: str = "/"
    _target: RequestTarget = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Zero-argument super() is unavailable in slotted dataclasses.
        Message.__post_init__(self)
        validate_method(self.method)
        parsed = RequestTarget.parse(self.target)
        object.__setattr__(self, "_target", parsed)
        object.__setattr__(self, "target", str(parsed))

    # ── Method ───────────────────────────────────────────────────────────────

    def with_method(self, method: str) -> Self:
        """Return a copy using ``method``, casing untouched.

        Raises:
            InvalidMethod: If ``method`` is not a token.
        """
        validate_method(method)
        return replace(self, method=method)

    # ── Target ───────────────────────────────────────────────────────────────

    @property
    def absolute_uri(self) -> str | None:
        """The absolute URI, or None when scheme or host is unknown."""
        uri = self._target.absolute_uri
        return uri.value if uri is not None else None

    @property
    def url(self) -> str:
        """The origin-form URL (path and query)."""
        return self._target.url.value

    @property
    def request_target(self) -> RequestTarget:
        return self._target

    def with_absolute_uri(self, uri: str) -> Self:
        """Return a copy targeting ``uri``; ``url`` becomes its path+query.

        Raises:
            InvalidUri: If ``uri`` lacks a scheme or host, or is malformed.
        """
        new_target = self._target.with_absolute_uri(validate_absolute_uri(uri))
        get_logger().debug("absolute URI set to %r, url now %r", uri, new_target.url.value)
        return replace(self, target=str(new_target))

    def with_url(self, url: str, *, policy: UrlPolicy = UrlPolicy.REJECT) -> Self:
        """Return a copy with path+query ``url``.

        If the request has an absolute URI, its path and query are replaced
        and its scheme, authority and fragment are kept. Without one, the
        absolute URI stays absent.

        Raises:
            InvalidUrl: If ``url`` is not origin-form (under
                ``UrlPolicy.REJECT``) or is otherwise malformed.
        """
        new_target = self._target.with_url(validate_origin_form_url(url, policy=policy))
        get_logger().debug("url set to %r, target now %r", new_target.url.value, str(new_target))
        return replace(self, target=str(new_target))
