"""
Session storage — where the access token lives between process restarts.

Stores are only called from the client constructor and from inside the
authenticator's exclusive section, so they need no locking of their own.
"""

from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from matrix_lite.errors import StorageError
from matrix_lite.models.session import Session


class SessionStorage(ABC):
    @abstractmethod
    def set(self, session: Session) -> None:
        """Persist ``session``. Raise StorageError on failure."""

    @abstractmethod
    def get(self) -> Session:
        """Return the stored session, or ``Session()`` if none was stored."""


class InMemorySessionStorage(SessionStorage):
    def __init__(self) -> None:
        self._session = Session()

    def set(self, session: Session) -> None:
        self._session = session

    def get(self) -> Session:
        return self._session


class FileSessionStorage(SessionStorage):
    """JSON file store, readable by the owner only."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def set(self, session: Session) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(session.model_dump_json(indent=2))
        except OSError as e:
            raise StorageError(f"Failed to write session to {self.path}: {e}") from e

    def get(self) -> Session:
        try:
            raw = self.path.read_text()
        except FileNotFoundError:
            return Session()
        except OSError as e:
            raise StorageError(f"Failed to read session from {self.path}: {e}") from e
        try:
            return Session.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Malformed session file {self.path}: {e}") from e

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to remove session file {self.path}: {e}") from e
