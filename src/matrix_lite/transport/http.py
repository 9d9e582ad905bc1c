"""
Authenticated HTTP client for the Matrix client-server API.

Every authenticated call carries ``Authorization: Bearer <token>``. A 401
triggers one re-authentication and one resend of the identical request;
a second 401 is final.
"""

import logging
from typing import Any, Callable, Optional

import httpx

from matrix_lite.errors import MarshalError, RequestError, TransportError
from matrix_lite.token import TokenGuard

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 60.0
MAX_ATTEMPTS = 2
USER_AGENT = "matrix-lite-sdk/0.1.0"

Reauthenticator = Callable[[str], None]


class HttpClient:
    def __init__(
        self,
        base_url: str,
        token: str = "",
        client: Optional[httpx.Client] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self.token = TokenGuard(token)
        self._owns_client = client is None
        self._client = client or httpx.Client(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=REQUEST_TIMEOUT,
        )
        self._reauthenticate: Optional[Reauthenticator] = None

    def set_reauthenticator(self, fn: Reauthenticator) -> None:
        """``fn(stale_token)`` is called on a 401 before the single retry."""
        self._reauthenticate = fn

    def send(
        self,
        method: str,
        path: str,
        *,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Issue one unauthenticated call. Any status is returned as-is."""
        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        try:
            return self._client.request(
                method, self._base_url + path,
                content=content, headers=headers, params=params, **kwargs,
            )
        except httpx.DecodingError as e:
            raise MarshalError(f"{method} {path}: undecodable response body: {e!r}") from e
        except httpx.RequestError as e:
            raise TransportError(f"{method} {path}: request failed: {e!r}") from e

    def request(
        self,
        method: str,
        path: str,
        *,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, str]] = None,
        allow_auth_retry: bool = True,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Issue an authenticated call, re-authenticating once on a 401."""
        reauthenticate = self._reauthenticate if allow_auth_retry else None
        attempts = MAX_ATTEMPTS if reauthenticate is not None else 1
        attempt = 1
        while True:
            token = self.token.read()
            req_headers = {"Authorization": f"Bearer {token}"}
            if headers:
                req_headers.update(headers)
            resp = self.send(method, path, content=content, headers=req_headers, params=params, timeout=timeout)
            if resp.status_code < 400:
                return resp
            if resp.status_code != 401 or reauthenticate is None or attempt >= attempts:
                raise RequestError(
                    f"{method} {path}: unexpected status code: {resp.status_code}; body: {resp.text}",
                    resp.status_code, resp.text,
                )
            logger.debug("%s %s: unauthorized, re-authenticating before retry", method, path)
            reauthenticate(token)
            attempt += 1

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
