import json

import pytest
import requests


class FakeResponse:
    def __init__(self, status_code=200, payload=None, content=b"", reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self.content = content
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.closed = True

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise json.JSONDecodeError("Expecting value", "", 0)
        return self._payload

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i : i + chunk_size]


class FakeSession:
    """
    Stand-in for requests.Session. `handler(url, params)` returns a
    FakeResponse or raises; every call is recorded.
    """

    def __init__(self, handler):
        self.handler = handler
        self.calls = []
        self.headers = {}

    def get(self, url, params=None, **kwargs):
        self.calls.append((url, dict(params or {})))
        return self.handler(url, params or {})


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def no_sleep():
    return SleepRecorder()


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
