"""
Per-product mutual exclusion.

Sale attempts on the same product must not interleave their stock check and
stock decrement. Attempts on different products never share a lock.

Locks are held weakly: an entry lives only while some caller holds a
reference to its lock, so ids that are never sold again (including ids that
do not exist) do not accumulate.
"""

from __future__ import annotations

import threading
import weakref
from contextlib import contextmanager
from typing import Iterator


class ProductLockRegistry:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def lock_for(self, product_id: int) -> threading.Lock:
        """Return the lock for product_id, creating it if no caller holds one."""

        with self._guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[product_id] = lock
            return lock

    @contextmanager
    def hold(self, product_id: int) -> Iterator[None]:
        lock = self.lock_for(product_id)
        with lock:
            yield


__all__ = ["ProductLockRegistry"]
