"""
matrix-lite error types.

Every failure raised by the client is a MatrixError; the only automatic
recovery is the single re-authentication retry in the HTTP layer.
"""

from typing import Any, Optional


class MatrixError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class MarshalError(MatrixError):
    def __init__(self, message: str):
        super().__init__("marshal_error", message)


class TransportError(MatrixError):
    def __init__(self, message: str):
        super().__init__("transport_error", message)


class _HttpStatusError(MatrixError):
    def __init__(self, code: str, message: str, status_code: int, body: str):
        super().__init__(code, message, {"status_code": status_code, "body": body})
        self.status_code = status_code
        self.body = body


class AuthError(_HttpStatusError):
    """Login rejected by the server."""

    def __init__(self, message: str, status_code: int, body: str):
        super().__init__("auth_error", message, status_code, body)


class RequestError(_HttpStatusError):
    """Authenticated call answered with a status >= 400."""

    def __init__(self, message: str, status_code: int, body: str):
        super().__init__("request_error", message, status_code, body)


class StorageError(MatrixError):
    def __init__(self, message: str):
        super().__init__("storage_error", message)
