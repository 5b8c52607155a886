"""Reader/writer lock used to guard registry state."""

from __future__ import annotations

from contextlib import contextmanager
from threading import Condition, Lock
from typing import Generator


class ReadWriteLock:
    """A writer-preferring reader/writer lock.

    Any number of readers may hold the lock at once; a writer holds it
    exclusively. Once a writer is waiting, new readers block until it has
    finished, so a steady stream of readers cannot starve writers.

    The lock is not reentrant: a thread holding it in either mode must not
    try to acquire it again.

    Example::

        lock = ReadWriteLock()
        with lock.read():
            ...
        with lock.write():
            ...
    """

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Generator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Generator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
