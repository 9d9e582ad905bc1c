"""
Lock-guarded access token.

One reader/writer lock protects the token. Building a request takes the
shared side; a refresh takes the exclusive side for its whole network round
trip, so concurrent 401s collapse into a single login.
"""

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from matrix_lite.models.session import Session


class ReadWriteLock:
    """Writer-preferring: once a writer waits, new readers queue behind it."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
                self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class TokenGuard:
    def __init__(self, token: str = ""):
        self._token = token
        self._lock = ReadWriteLock()

    def read(self) -> str:
        with self._lock.read():
            return self._token

    def refresh_if_stale(
        self,
        expected: str,
        refresh: Callable[[], Session],
        installed: Optional[Callable[[Session], None]] = None,
    ) -> bool:
        """Run ``refresh`` and install its token, unless the token moved on.

        Returns False without calling ``refresh`` when the current token no
        longer equals ``expected``. ``installed`` runs after the new token is
        in place, still under the exclusive lock; if it raises, the new token
        stays installed.
        """
        with self._lock.write():
            if self._token != expected:
                return False
            session = refresh()
            self._token = session.access_token
            if installed is not None:
                installed(session)
            return True
