"""Session storage backends."""

import os
import stat

import pytest

from matrix_lite import FileSessionStorage, InMemorySessionStorage, Session, StorageError


def test_in_memory_defaults_to_empty_session():
    storage = InMemorySessionStorage()
    assert storage.get() == Session()
    storage.set(Session(access_token="t", device_id="D"))
    assert storage.get().access_token == "t"


class TestFileSessionStorage:

    def test_missing_file_is_empty_session(self, tmp_path):
        assert FileSessionStorage(tmp_path / "none.json").get() == Session()

    def test_set_then_get(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        FileSessionStorage(path).set(Session(access_token="t", device_id="D", user_id="@a:x"))
        loaded = FileSessionStorage(path).get()
        assert loaded == Session(access_token="t", device_id="D", user_id="@a:x")

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_file_is_owner_only(self, tmp_path):
        path = tmp_path / "session.json"
        FileSessionStorage(path).set(Session(access_token="t"))
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        with pytest.raises(StorageError):
            FileSessionStorage(path).get()

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(StorageError):
            FileSessionStorage(blocker / "session.json").set(Session(access_token="t"))

    def test_clear(self, tmp_path):
        storage = FileSessionStorage(tmp_path / "session.json")
        storage.set(Session(access_token="t"))
        storage.clear()
        storage.clear()
        assert storage.get() == Session()
