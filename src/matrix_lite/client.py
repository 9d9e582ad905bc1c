"""
MatrixClient — send messages and upload media as a password-authenticated user.
"""

import uuid
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from matrix_lite.auth import Auth
from matrix_lite.errors import MarshalError, MatrixError, StorageError
from matrix_lite.models.message import HTML_FORMAT, Media, SendMessageRequest, UploadResponse
from matrix_lite.models.session import Credentials, Session
from matrix_lite.sessions import SessionStorage
from matrix_lite.transport.http import HttpClient

SEND_PATH = "/_matrix/client/v3/rooms/{room_id}/send/m.room.message/{txn_id}"
UPLOAD_PATH = "/_matrix/media/v3/upload"


class ClientConfig(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    credentials: Credentials
    session_storage: Optional[SessionStorage] = None
    http_client: Optional[httpx.Client] = None


class MatrixClient:
    """Thread-safe Matrix client.

    Construction loads the stored session, or logs in right away when there
    is none. After that every call re-authenticates by itself once if the
    server reports the token as unknown or expired.
    """

    def __init__(
        self,
        credentials: Credentials,
        session_storage: Optional[SessionStorage] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.credentials = credentials
        self.session_storage = session_storage

        stored = self._load_session()
        self.http = HttpClient(base_url=credentials.server, token=stored.access_token, client=http_client)
        self.auth = Auth(self.http, credentials, session_storage)
        self.http.set_reauthenticator(self.auth.authenticate)

        if not stored.access_token:
            try:
                self.auth.authenticate("")
            except MatrixError:
                self.http.close()
                raise

    @classmethod
    def from_config(cls, config: ClientConfig) -> "MatrixClient":
        return cls(config.credentials, config.session_storage, config.http_client)

    def _load_session(self) -> Session:
        if self.session_storage is None:
            return Session()
        try:
            return self.session_storage.get()
        except MatrixError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to load session: {e}") from e

    @property
    def access_token(self) -> str:
        return self.http.token.read()

    def send_text(self, room_id: str, text: str, timeout: Optional[float] = None) -> Optional[str]:
        """Send a plain text message. Returns the event id if the server sent one."""
        return self._send_message(SendMessageRequest(room_id=room_id, msgtype="m.text", body=text), timeout)

    def send_notice(self, room_id: str, text: str, timeout: Optional[float] = None) -> Optional[str]:
        """Send an m.notice — the msgtype bots are expected to use."""
        return self._send_message(SendMessageRequest(room_id=room_id, msgtype="m.notice", body=text), timeout)

    def send_html(self, room_id: str, text: str, html: str, timeout: Optional[float] = None) -> Optional[str]:
        """Send a text message with an HTML rendering; ``text`` is the fallback body."""
        return self._send_message(SendMessageRequest(
            room_id=room_id,
            msgtype="m.text",
            body=text,
            format=HTML_FORMAT,
            formatted_body=html,
        ), timeout)

    def send_media(self, room_id: str, media: Media, timeout: Optional[float] = None) -> Optional[str]:
        """Send a media event pointing at content already uploaded with upload_file()."""
        return self._send_message(SendMessageRequest(
            room_id=room_id,
            msgtype=media.type.value,
            body=media.caption,
            filename=media.filename,
            url=media.uri,
        ), timeout)

    def _send_message(self, msg: SendMessageRequest, timeout: Optional[float]) -> Optional[str]:
        try:
            payload = msg.encode()
        except ValueError as e:
            raise MarshalError(f"Failed to marshal message payload: {e}") from e

        # One transaction id per logical send; the auth retry resends it as-is.
        path = SEND_PATH.format(room_id=msg.room_id, txn_id=uuid.uuid4())
        resp = self.http.request(
            "PUT", path,
            content=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
        return _json_field(resp, "event_id")

    def upload_file(
        self,
        content_type: str,
        data: bytes,
        filename: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """Upload raw bytes to the media repository and return the mxc:// content URI."""
        resp = self.http.request(
            "POST", UPLOAD_PATH,
            content=data,
            headers={"Content-Type": content_type, "Content-Length": str(len(data))},
            params={"filename": filename} if filename else None,
            timeout=timeout,
        )
        try:
            return UploadResponse.model_validate_json(resp.content).content_uri
        except ValidationError as e:
            raise MarshalError(f"Failed to unmarshal upload file response: {e}") from e

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "MatrixClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _json_field(resp: httpx.Response, key: str) -> Optional[str]:
    try:
        data = resp.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get(key), str):
        return data[key]
    return None
