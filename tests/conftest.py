"""Shared fixtures: an in-process fake homeserver behind httpx.MockTransport."""

import threading
import time
from typing import Optional

import httpx
import pytest

from matrix_lite import Credentials

SERVER = "https://matrix.example.org"
LOGIN_PATH = "/_matrix/client/v3/login"
UPLOAD_PATH = "/_matrix/media/v3/upload"


class FakeHomeserver:
    """Issues tok1, tok2, ... on each login; only the latest token is valid."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.requests: list[httpx.Request] = []
        self.logins = 0
        self.valid_tokens: set[str] = set()
        self.login_status = 200
        self.login_body: Optional[bytes] = None
        self.login_delay = 0.0
        self.upload_body = b'{"content_uri":"mxc://example"}'
        # Responses returned, in order, for the next authenticated calls.
        self.forced: list[httpx.Response] = []
        self.fail_transport = False
        self.transport_error: type[httpx.TransportError] = httpx.ConnectError

    def expire(self) -> None:
        with self.lock:
            self.valid_tokens.clear()

    def calls(self, path_prefix: str) -> list[httpx.Request]:
        with self.lock:
            return [r for r in self.requests if r.url.path.startswith(path_prefix)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self.lock:
            self.requests.append(request)
        if self.fail_transport:
            raise self.transport_error("connection failed", request=request)
        if request.url.path == LOGIN_PATH:
            return self._login(request)

        with self.lock:
            if self.forced:
                return self.forced.pop(0)
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            if token not in self.valid_tokens:
                return httpx.Response(401, json={"errcode": "M_UNKNOWN_TOKEN", "error": "Invalid access token"})

        if request.url.path == UPLOAD_PATH:
            return httpx.Response(200, content=self.upload_body)
        if "/send/m.room.message/" in request.url.path:
            return httpx.Response(200, json={"event_id": f"$event{len(self.requests)}"})
        return httpx.Response(404, json={"errcode": "M_UNRECOGNIZED"})

    def _login(self, request: httpx.Request) -> httpx.Response:
        if self.login_delay:
            time.sleep(self.login_delay)
        if self.login_status >= 400:
            return httpx.Response(self.login_status, json={"errcode": "M_FORBIDDEN", "error": "Invalid password"})
        with self.lock:
            self.logins += 1
            token = f"tok{self.logins}"
            self.valid_tokens = {token}
        if self.login_body is not None:
            return httpx.Response(200, content=self.login_body)
        return httpx.Response(200, json={
            "access_token": token,
            "device_id": "DEVICE",
            "user_id": "@alice:example.org",
            "home_server": "example.org",
        })


@pytest.fixture
def server() -> FakeHomeserver:
    return FakeHomeserver()


@pytest.fixture
def http(server: FakeHomeserver):
    client = httpx.Client(transport=httpx.MockTransport(server))
    yield client
    client.close()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(server=SERVER + "/", user="alice", password="secret")
