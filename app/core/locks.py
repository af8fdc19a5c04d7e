"""Per-user guard against overlapping moderation actions.

A second ban / unban / delete on the same user while one is still in
flight is refused instead of issuing duplicate backend calls.  Acquire is
non-blocking: the caller gets False and can answer 409.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

_registry_lock = threading.Lock()
_busy_users: set[str] = set()


def acquire_user_lock(user_id: str) -> bool:
    """Mark ``user_id`` as busy; return False if it already is."""
    with _registry_lock:
        if user_id in _busy_users:
            return False
        _busy_users.add(user_id)
        return True


def release_user_lock(user_id: str) -> None:
    """Release ``user_id``.  Safe to call when it is not held."""
    with _registry_lock:
        _busy_users.discard(user_id)


def is_user_locked(user_id: str) -> bool:
    """Check whether an action on ``user_id`` is in flight."""
    with _registry_lock:
        return user_id in _busy_users


class UserBusyError(RuntimeError):
    """Raised by ``user_action`` when the user is already locked."""


@contextmanager
def user_action(user_id: str) -> Iterator[None]:
    """Hold the lock for ``user_id`` for the duration of the block."""
    if not acquire_user_lock(user_id):
        raise UserBusyError(user_id)
    try:
        yield
    finally:
        release_user_lock(user_id)
