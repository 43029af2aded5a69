# learner.py
# turns observed token sequences into transition-count updates

from __future__ import annotations

import logging
import threading
from typing import Sequence

from babbler.core.lexicon_store import LexiconStore

logger = logging.getLogger(__name__)


class Learner:
    """
    First-order transition counter on top of a LexiconStore.

    Every adjacent pair (a, b) in a sequence adds exactly 1 to the a -> b
    weight. The store is saved after every `save_every` updating sequences
    (1 = write-through). If a save fails the pending count is kept, so the
    next attempt still covers everything learned since the last good save.
    """

    def __init__(self, store: LexiconStore, *, save_every: int = 1):
        if save_every < 1:
            raise ValueError("save_every must be >= 1")
        self.store = store
        self.save_every = save_every
        self._pending = 0
        self._pending_lock = threading.Lock()

    @property
    def pending(self) -> int:
        """Updating sequences not yet persisted."""
        with self._pending_lock:
            return self._pending

    def learn(self, tokens: Sequence[str]) -> int:
        """
        Record every adjacent pair of `tokens`; returns the number of
        transitions added. Raises PersistenceSaveError if the follow-up save
        fails (the in-memory update is already complete by then).
        """
        if len(tokens) < 2:
            return 0

        with self.store.apply() as lex:
            for a, b in zip(tokens, tokens[1:]):
                assoc = lex.setdefault(a, {})
                assoc[b] = assoc.get(b, 0) + 1
        n = len(tokens) - 1
        logger.debug(f"learned {n} transitions")

        with self._pending_lock:
            self._pending += 1
            due = self._pending >= self.save_every
        if due:
            self.save()
        return n

    def flush(self) -> bool:
        """Save if anything is pending. Returns True when a save happened."""
        with self._pending_lock:
            if not self._pending:
                return False
        self.save()
        return True

    def save(self) -> None:
        """Persist the store now and clear the pending count."""
        with self._pending_lock:
            saving = self._pending
        self.store.save()
        with self._pending_lock:
            # updates that raced in during the write stay pending
            self._pending = max(0, self._pending - saving)
