"""Per-customer serialization of load evaluations"""

import threading
import weakref
from contextlib import contextmanager
from typing import Iterator


class CustomerLocks:
    """Registry of one lock per customer, created on first use.

    Entries are weak: a customer's lock is dropped once no evaluation holds
    a reference to it, so the registry only tracks customers in flight.
    """

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, customer_id: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(customer_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[customer_id] = lock
            return lock

    @contextmanager
    def hold(self, customer_id: int) -> Iterator[None]:
        """Block other evaluations for the same customer until the block exits"""
        lock = self._lock_for(customer_id)
        with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)
