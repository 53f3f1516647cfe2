"""Noise suppression for issue update notifications.

Plane emits one webhook per changed attribute, and many of them (sort order,
label churn, description autosaves) are of no interest in a chat channel.
Two independent filters apply to ``issue``/``updated`` events:

- FieldWhitelist: only changes to a fixed set of fields are reported.
- UpdateDebouncer: at most one update notification per issue within a
  short window, so a burst of edits produces a single message.

The debouncer is the only mutable state shared between concurrent requests;
its check-and-set runs under one lock.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 2
DEFAULT_MAX_ENTRIES = 10_000

ALLOWED_UPDATE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "priority",
        "state",
        "state_id",
        "assignee_ids",
        "target_date",
        "parent",
        "estimate_point",
    }
)


class FieldWhitelist:
    """Membership filter over activity field names."""

    def __init__(self, allowed: Iterable[str] = ALLOWED_UPDATE_FIELDS) -> None:
        self.allowed = frozenset(allowed)

    def allows(self, field_name: str) -> bool:
        """Check whether changes to ``field_name`` should be reported."""
        return field_name in self.allowed

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.allowed

    def __repr__(self) -> str:
        return f"FieldWhitelist({sorted(self.allowed)!r})"


@dataclass
class UpdateDebouncer:
    """Per-entity debounce filter for update notifications.

    Timestamps are whole seconds since the epoch. An update for an entity is
    rejected when ``now < last_accepted + window_seconds``; otherwise ``now``
    is recorded as the new acceptance time before the lock is released, so a
    concurrent burst for one entity yields a single accepted notification.

    Expired entries are pruned once the map grows beyond ``max_entries``.
    Pruning only removes entries that could no longer reject anything.

    Usage:
        debouncer = UpdateDebouncer()
        if debouncer.should_notify(issue_id):
            ...
    """

    window_seconds: int = DEFAULT_WINDOW_SECONDS
    max_entries: int | None = DEFAULT_MAX_ENTRIES
    clock: Callable[[], float] = time.time
    _last_accepted: dict[str, int] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def should_notify(self, entity_id: str) -> bool:
        """Atomically check the window for ``entity_id`` and record acceptance.

        Args:
            entity_id: Identifier of the issue being updated.

        Returns:
            True if the notification may be sent, False if it is suppressed.
        """
        with self._lock:
            now = int(self.clock())
            last = self._last_accepted.get(entity_id)
            if last is not None and now < last + self.window_seconds:
                return False
            self._last_accepted[entity_id] = now
            if self.max_entries is not None and len(self._last_accepted) > self.max_entries:
                self._prune_locked(now)
            return True

    def prune(self) -> int:
        """Remove entries whose window has elapsed.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            return self._prune_locked(int(self.clock()))

    def _prune_locked(self, now: int) -> int:
        expired = [
            key for key, last in self._last_accepted.items() if now >= last + self.window_seconds
        ]
        for key in expired:
            del self._last_accepted[key]
        if expired:
            logger.debug("Pruned %d expired debounce entries", len(expired))
        return len(expired)

    def last_accepted(self, entity_id: str) -> int | None:
        """Return the recorded acceptance time for an entity, if any."""
        with self._lock:
            return self._last_accepted.get(entity_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_accepted)


__all__ = [
    "ALLOWED_UPDATE_FIELDS",
    "DEFAULT_WINDOW_SECONDS",
    "FieldWhitelist",
    "UpdateDebouncer",
]
