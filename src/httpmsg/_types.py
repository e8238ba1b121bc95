"""Core protocols for httpmsg.

Body is the only collaborator contract a message consumes: something that
produces bytes. Messages hold a Body by reference and never read it, so a
single-pass stream is safe to attach to any number of derived messages
until the transport finally consumes it.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Body(Protocol):
    """A byte-producing source attached to a message.

    ``read(size)`` returns up to ``size`` bytes, or everything remaining when
    ``size`` is negative. An empty result signals exhaustion.

    ``rewindable`` tells consumers whether the content can be produced more
    than once. Consumers must assume a single pass unless it is True.
    """

    @property
    def rewindable(self) -> bool: ...

    def read(self, size: int = -1, /) -> bytes: ...
