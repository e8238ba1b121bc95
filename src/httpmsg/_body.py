"""Concrete Body implementations.

Each handle is owned by the caller; messages only keep a reference to it.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import BinaryIO


class EmptyBody:
    """A body with no content. The default for new messages."""

    __slots__ = ()

    @property
    def rewindable(self) -> bool:
        return True

    def read(self, size: int = -1, /) -> bytes:
        return b""

    def __repr__(self) -> str:
        return "EmptyBody()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, EmptyBody)

    def __hash__(self) -> int:
        return hash(EmptyBody)


class BytesBody:
    """An in-memory body over a fixed byte string.

    Reading advances a cursor; ``rewind()`` moves it back to the start.
    """

    __slots__ = ("_buffer", "_content")

    def __init__(self, content: bytes = b"") -> None:
        self._content = bytes(content)
        self._buffer = io.BytesIO(self._content)

    @property
    def rewindable(self) -> bool:
        return True

    @property
    def content(self) -> bytes:
        return self._content

    def read(self, size: int = -1, /) -> bytes:
        return self._buffer.read(size)

    def rewind(self) -> None:
        self._buffer.seek(0)

    def __len__(self) -> int:
        return len(self._content)

    def __repr__(self) -> str:
        return f"BytesBody({self._content!r})"


class StreamBody:
    """Adapts a binary file-like object to the Body protocol.

    The stream is single-pass unless it reports ``seekable()``.
    """

    __slots__ = ("_stream",)

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    @property
    def rewindable(self) -> bool:
        seekable = getattr(self._stream, "seekable", None)
        return bool(seekable and seekable())

    def read(self, size: int = -1, /) -> bytes:
        return self._stream.read(size)

    def rewind(self) -> None:
        if not self.rewindable:
            msg = "stream body is single-pass and cannot be rewound"
            raise io.UnsupportedOperation(msg)
        self._stream.seek(0)

    def __repr__(self) -> str:
        return f"StreamBody({self._stream!r})"
