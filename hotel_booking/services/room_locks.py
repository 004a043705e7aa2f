"""
Per-room mutual exclusion for check-then-write sequences

One lock per room id, created on first use. Locks for several rooms are always
acquired in ascending id order.
"""
from contextlib import contextmanager
from typing import Dict, Iterator
import logging
import threading

logger = logging.getLogger(__name__)


class RoomLockRegistry:
    """Thread-safe registry of per-room locks (one per process)"""

    def __init__(self):
        self._locks: Dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def lock_for(self, room_id: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[room_id] = lock
            return lock

    @contextmanager
    def hold(self, *room_ids: int) -> Iterator[None]:
        """Hold the locks of all given rooms for the duration of the block"""
        locks = [self.lock_for(room_id) for room_id in sorted(set(room_ids))]
        acquired = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)


# Process-wide registry
room_locks = RoomLockRegistry()
