"""
matrix-lite — a small Matrix client SDK for Python.

Password login with a cached, self-refreshing access token; send text and
media messages, upload files to the media repository.
"""

from matrix_lite.client import MatrixClient, ClientConfig
from matrix_lite.auth import Auth
from matrix_lite.sessions import SessionStorage, InMemorySessionStorage, FileSessionStorage
from matrix_lite.errors import (
    MatrixError,
    MarshalError,
    TransportError,
    AuthError,
    RequestError,
    StorageError,
)
from matrix_lite.models import Credentials, Session, Media, MediaType

__version__ = "0.1.0"
__all__ = [
    "MatrixClient",
    "ClientConfig",
    "Auth",
    "SessionStorage",
    "InMemorySessionStorage",
    "FileSessionStorage",
    "MatrixError",
    "MarshalError",
    "TransportError",
    "AuthError",
    "RequestError",
    "StorageError",
    "Credentials",
    "Session",
    "Media",
    "MediaType",
]
