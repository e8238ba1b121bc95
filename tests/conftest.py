"""Shared fixtures for httpmsg tests."""

from __future__ import annotations

import pytest

from httpmsg import Request
from httpmsg.testing import RecordingBody


@pytest.fixture
def body() -> RecordingBody:
    return RecordingBody(b'{"name": "widget"}')


@pytest.fixture
def absolute_request(body: RecordingBody) -> Request:
    return Request(
        "POST",
        "http://example.com/old?y=2",
        headers={"Content-Type": "application/json", "Accept": ["a/b", "c/d"]},
        body=body,
    )


@pytest.fixture
def relative_request() -> Request:
    return Request("GET", "/relative?x=1")
