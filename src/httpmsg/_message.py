"""Message — protocol version, headers and body shared by HTTP messages.

A Message is a frozen value. Every ``with_*`` method returns a new
instance of the same class; the receiver is never touched. Unchanged
parts (the header bag and the body handle) are shared by reference.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Self

from httpmsg._body import EmptyBody
from httpmsg._grammar import validate_protocol_version
from httpmsg._headers import Headers
from httpmsg._types import Body

if TYPE_CHECKING:
    from httpmsg._headers import HeaderSource, HeaderValues


@dataclass(frozen=True, slots=True, kw_only=True)
class Message:
    """Base value type for HTTP messages.

    ``headers`` accepts anything ``Headers.of()`` accepts and is stored as a
    ``Headers`` bag. ``body`` defaults to an empty body; it is never None.

    Raises:
        InvalidProtocolVersion: If ``protocol_version`` is empty.
        InvalidHeader: If a header name or value is malformed.
        TypeError: If ``body`` is not a Body.
    """

    protocol_version: str = "1.1"
    headers: Headers = field(default_factory=Headers)
    body: Body = field(default_factory=EmptyBody)

    def __post_init__(self) -> None:
        validate_protocol_version(self.protocol_version)
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers.of(self.headers))
        if self.body is None:
            object.__setattr__(self, "body", EmptyBody())
        elif not isinstance(self.body, Body):
            msg = f"body must provide read() and rewindable, got {type(self.body).__name__}"
            raise TypeError(msg)

    def with_protocol_version(self, version: str) -> Self:
        return replace(self, protocol_version=version)

    # ── Headers ──────────────────────────────────────────────────────────────

    def get_header(self, name: str) -> tuple[str, ...]:
        """All values of a header (case-insensitive); empty when absent."""
        return self.headers.get(name)

    def get_header_line(self, name: str) -> str:
        """Values of a header joined with ", "."""
        return self.headers.line(name)

    def has_header(self, name: str) -> bool:
        return self.headers.has(name)

    def with_header(self, name: str, values: HeaderValues) -> Self:
        """Return a copy with every value of ``name`` replaced."""
        return replace(self, headers=self.headers.with_values(name, values))

    def with_added_header(self, name: str, value: str) -> Self:
        """Return a copy with ``value`` appended to ``name``."""
        return replace(self, headers=self.headers.with_added(name, value))

    def without_header(self, name: str) -> Self:
        return replace(self, headers=self.headers.without(name))

    def with_headers(self, headers: HeaderSource) -> Self:
        """Return a copy with the whole header bag replaced."""
        return replace(self, headers=Headers.of(headers))

    # ── Body ─────────────────────────────────────────────────────────────────

    def with_body(self, body: Body) -> Self:
        """Return a copy referencing ``body``. The body is not read.

        Raises:
            TypeError: If ``body`` is not a Body.
        """
        return replace(self, body=body)
