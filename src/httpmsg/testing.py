"""Test utilities for httpmsg.

Provides a Body implementation that records how it is used, so tests can
check that building and deriving messages never consumes a body.
"""

from __future__ import annotations

from httpmsg._body import BytesBody


class RecordingBody(BytesBody):
    """A BytesBody that counts calls to ``read``.

    >>> from httpmsg import Request
    >>> from httpmsg.testing import RecordingBody
    >>> body = RecordingBody(b"payload")
    >>> _ = Request("POST", "/upload", body=body).with_method("PUT")
    >>> body.reads
    0
    """

    __slots__ = ("reads",)

    def __init__(self, content: bytes = b"") -> None:
        super().__init__(content)
        self.reads = 0

    def read(self, size: int = -1, /) -> bytes:
        self.reads += 1
        return super().read(size)
