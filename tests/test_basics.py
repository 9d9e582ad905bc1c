"""Basic unit tests for matrix-lite package."""

from matrix_lite import (
    MatrixClient,
    MatrixError,
    MarshalError,
    TransportError,
    AuthError,
    RequestError,
    StorageError,
    MediaType,
    __version__,
)


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert MatrixClient is not None


def test_error_hierarchy():
    for cls in (MarshalError, TransportError, AuthError, RequestError, StorageError):
        assert issubclass(cls, MatrixError)
    assert not issubclass(RequestError, AuthError)


def test_error_attributes():
    err = MatrixError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    req_err = RequestError("PUT /x: unexpected status code: 403; body: nope", 403, "nope")
    assert req_err.code == "request_error"
    assert req_err.status_code == 403
    assert req_err.body == "nope"
    assert req_err.details == {"status_code": 403, "body": "nope"}

    assert AuthError("denied", 403, "{}").code == "auth_error"
    assert StorageError("gone").code == "storage_error"


def test_media_type_constants():
    assert MediaType.FILE == "m.file"
    assert MediaType.IMAGE == "m.image"
    assert MediaType.AUDIO == "m.audio"
    assert MediaType.VIDEO == "m.video"
