"""Per-user mutual exclusion for wallet and order mutations.

Every operation that moves money for a user runs while holding that user's
lock, so two checkouts (or a checkout and a cancellation) for the same user
never interleave their balance reads and writes. Locks for different users
are independent.

The locks are re-entrant: the ``Ledger`` takes the same lock around its own
read-modify-write, which is harmless when the caller already holds it.

This guards a single process. Multi-node deployments need the database to
serialise balance updates instead.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from protean.utils.globals import current_domain


class _UserLock:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.holders = 0


class UserLockRegistry:
    """Locks keyed by user id, kept only while someone holds or waits on them.

    Each ``hold`` counts itself in before acquiring and out after releasing,
    all under ``_guard``. The entry is dropped when the count returns to zero,
    so ids that never match a user leave nothing behind.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _UserLock] = {}

    def _checkout(self, key: str) -> _UserLock:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _UserLock()
            entry.holders += 1
            return entry

    def _release(self, key: str, entry: _UserLock) -> None:
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, user_id) -> Iterator[threading.RLock]:
        key = str(user_id)
        entry = self._checkout(key)
        try:
            with entry.lock:
                yield entry.lock
        finally:
            self._release(key, entry)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


user_locks = UserLockRegistry()


def process_serialized(user_id, command):
    """Process ``command`` synchronously while holding ``user_id``'s lock.

    The lock spans the whole handler including the unit of work commit, so
    the next operation for the same user reads committed balances.
    """
    with user_locks.hold(user_id):
        return current_domain.process(command, asynchronous=False)
