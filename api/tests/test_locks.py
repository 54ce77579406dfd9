"""
Tests for the per-card lock registry.
"""
import gc

from leetcoach.core.locks import CardLockRegistry


def test_same_card_gets_same_lock_while_held():
    registry = CardLockRegistry()

    lock = registry.lock_for(7)

    assert registry.lock_for(7) is lock
    assert registry.lock_for(8) is not lock


def test_released_locks_are_dropped():
    registry = CardLockRegistry()
    for card_id in range(100):
        with registry.lock_for(card_id):
            pass
    gc.collect()

    assert len(registry) == 0


def test_held_lock_is_kept():
    registry = CardLockRegistry()
    held = registry.lock_for(1)
    with registry.lock_for(2):
        pass
    gc.collect()

    assert len(registry) == 1
    assert registry.lock_for(1) is held
