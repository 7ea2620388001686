"""
Database utilities: per-key locking for count-then-write critical sections.
"""

import contextlib
import threading
from typing import Dict, Hashable, Iterator, List


class KeyedLock:
    """
    Process-local mutex registry keyed by an arbitrary hashable value.

    Serializes critical sections for one key (e.g. one license) while
    leaving other keys uncontended. Entries are dropped once no thread
    holds or waits on them.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[Hashable, List] = {}

    @contextlib.contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Block until the lock for ``key`` is acquired; release on exit."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


# Serializes count-then-write per license within this process; the row lock
# taken by select_for_update does the same across processes on PostgreSQL.
# Shared by every write that checks active devices against max_devices.
license_slot_locks = KeyedLock()
