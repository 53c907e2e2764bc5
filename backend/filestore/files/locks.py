"""Per-name locking for storage operations.

Requests run on worker threads, so two operations on the same file name can
otherwise interleave at the byte level.  ``KeyedLock`` hands out one
``threading.Lock`` per key, created on demand and discarded once no thread
holds or waits for it.  Operations on different keys never block each other.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class KeyedLock:
    """Registry of mutexes keyed by string."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # key -> [lock, number of threads holding or waiting]
        self._entries: Dict[str, List] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._entries[key] = entry
            entry[1] += 1

        lock = entry[0]
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)
