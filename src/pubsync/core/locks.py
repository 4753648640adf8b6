"""Named mutual exclusion for catalog scopes."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class ScopeLocks:
    """Registry of one lock per catalog scope (delivery group).

    The catalog find-then-create sequence is not atomic, so callers hold the
    scope's lock around it. Locks are created lazily and never discarded.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, scope: str) -> threading.Lock:
        key = scope.casefold()
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, scope: str) -> Iterator[None]:
        """Hold the lock for `scope` for the duration of the block."""
        lock = self._lock_for(scope)
        with lock:
            yield

    @property
    def scopes(self) -> list[str]:
        """Scopes that have been locked at least once (for diagnostics and tests)."""
        with self._guard:
            return sorted(self._locks)
