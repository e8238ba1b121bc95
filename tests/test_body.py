"""Tests for Body handles and the Body protocol."""

from __future__ import annotations

import io

import pytest

from httpmsg import Body, BytesBody, EmptyBody, StreamBody
from httpmsg.testing import RecordingBody


class _Unseekable(io.RawIOBase):
    def __init__(self, data: bytes) -> None:
        self._inner = io.BytesIO(data)

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[no-untyped-def]
        chunk = self._inner.read(len(buffer))
        buffer[: len(chunk)] = chunk
        return len(chunk)


class TestProtocol:
    @pytest.mark.parametrize(
        "body",
        [EmptyBody(), BytesBody(b"x"), StreamBody(io.BytesIO(b"x")), RecordingBody()],
    )
    def test_handles_satisfy_protocol(self, body: object) -> None:
        assert isinstance(body, Body)

    def test_plain_bytes_are_not_a_body(self) -> None:
        assert not isinstance(b"x", Body)


class TestEmptyBody:
    def test_read(self) -> None:
        assert EmptyBody().read() == b""
        assert EmptyBody().rewindable is True

    def test_equality(self) -> None:
        assert EmptyBody() == EmptyBody()
        assert hash(EmptyBody()) == hash(EmptyBody())


class TestBytesBody:
    def test_read_and_rewind(self) -> None:
        body = BytesBody(b"hello")
        assert body.read(2) == b"he"
        assert body.read() == b"llo"
        assert body.read() == b""
        body.rewind()
        assert body.read() == b"hello"

    def test_content_and_len(self) -> None:
        body = BytesBody(bytearray(b"abc"))
        assert body.content == b"abc"
        assert len(body) == 3


class TestStreamBody:
    def test_seekable_stream_rewinds(self) -> None:
        body = StreamBody(io.BytesIO(b"data"))
        assert body.rewindable
        assert body.read() == b"data"
        body.rewind()
        assert body.read(2) == b"da"

    def test_single_pass_stream(self) -> None:
        body = StreamBody(_Unseekable(b"data"))  # type: ignore[arg-type]
        assert not body.rewindable
        assert body.read() == b"data"
        with pytest.raises(io.UnsupportedOperation):
            body.rewind()


class TestRecordingBody:
    def test_counts_reads(self) -> None:
        body = RecordingBody(b"ab")
        body.read(1)
        body.read()
        assert body.reads == 2
