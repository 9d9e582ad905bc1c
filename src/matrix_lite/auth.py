"""
Password login and token refresh.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from matrix_lite.errors import AuthError, MarshalError, MatrixError, StorageError
from matrix_lite.models.message import LoginRequest
from matrix_lite.models.session import Credentials, Session
from matrix_lite.sessions import SessionStorage
from matrix_lite.transport.http import REQUEST_TIMEOUT, HttpClient

logger = logging.getLogger(__name__)

LOGIN_PATH = "/_matrix/client/v3/login"


class Auth:
    def __init__(self, http: HttpClient, credentials: Credentials, storage: Optional[SessionStorage] = None):
        self._http = http
        self._credentials = credentials
        self._storage = storage

    def authenticate(self, previous_token: str) -> bool:
        """Log in again unless someone already replaced ``previous_token``.

        Concurrent callers holding the same stale token are serialized on the
        token's exclusive lock; only the first one hits the login endpoint.
        Returns True if this call performed the login.
        """
        refreshed = self._http.token.refresh_if_stale(previous_token, self._login, self._persist)
        if not refreshed:
            logger.debug("token already refreshed by another caller, skipping login")
        return refreshed

    def _login(self) -> Session:
        try:
            payload = LoginRequest(user=self._credentials.user, password=self._credentials.password)
            content = payload.model_dump_json().encode()
        except ValueError as e:
            raise MarshalError(f"Failed to marshal auth payload: {e}") from e

        logger.debug("logging in as %s", self._credentials.user)
        resp = self._http.send(
            "POST", LOGIN_PATH,
            content=content,
            headers={"Content-Type": "application/json"},
            timeout=REQUEST_TIMEOUT,
        )
        if resp.status_code >= 400:
            raise AuthError(
                f"auth - unexpected status code: {resp.status_code}; body: {resp.text}",
                resp.status_code, resp.text,
            )
        try:
            session = Session.model_validate_json(resp.content)
        except ValidationError as e:
            raise MarshalError(f"Failed to unmarshal auth session: {e}") from e
        if not session.access_token:
            raise MarshalError("Login response carries no access_token")
        return session

    def _persist(self, session: Session) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set(session)
        except MatrixError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to store session: {e}") from e
