"""
Per-card write serialization.

Review submission is a read-modify-write on a single card. Within one process
the lock below makes it single-writer per card id; across processes the
version compare-and-swap in the review service catches the remaining races.
"""
import weakref
from threading import Lock


class CardLockRegistry:
    """
    Hands out one lock per card id.

    Locks are held weakly: an entry lives only while some caller holds its
    lock, so the registry is bounded by the number of cards being written.
    """

    def __init__(self):
        self._guard = Lock()
        self._locks: "weakref.WeakValueDictionary[int, Lock]" = weakref.WeakValueDictionary()

    def lock_for(self, card_id: int) -> Lock:
        with self._guard:
            lock = self._locks.get(card_id)
            if lock is None:
                lock = Lock()
                self._locks[card_id] = lock
            return lock

    def __len__(self) -> int:
        return len(self._locks)


card_locks = CardLockRegistry()
