from matrix_lite.models.session import Credentials, Session
from matrix_lite.models.message import (
    HTML_FORMAT,
    LoginRequest,
    Media,
    MediaType,
    SendMessageRequest,
    UploadResponse,
)

__all__ = [
    "Credentials",
    "Session",
    "HTML_FORMAT",
    "LoginRequest",
    "Media",
    "MediaType",
    "SendMessageRequest",
    "UploadResponse",
]
