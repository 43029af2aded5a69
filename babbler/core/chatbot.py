# chatbot.py
"""
Chatbot - learn-then-respond control flow around one shared LexiconStore.

Every incoming token sequence is learned from; a reply is generated only
when the caller asks for one. Persistence and empty-input failures are
logged here and never reach the serving loop.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from babbler.core.errors import EmptyInputError, PersistenceSaveError
from babbler.core.generator import DEFAULT_MAX_LENGTH, Generator
from babbler.core.learner import Learner
from babbler.core.lexicon_store import LexiconStore

logger = logging.getLogger(__name__)


class Chatbot:
    def __init__(
        self,
        store: LexiconStore,
        *,
        learner: Optional[Learner] = None,
        generator: Optional[Generator] = None,
    ):
        self.store = store
        self.learner = learner or Learner(store)
        self.generator = generator or Generator(store)

    @classmethod
    def from_config(cls, config) -> "Chatbot":
        """Build the store, learner and generator from a Config."""
        store = LexiconStore(config.get("lexicon_path"), indent=config.get("json_indent"))
        seed = config.get("seed")
        return cls(
            store,
            learner=Learner(store, save_every=int(config.get("save_every", 1))),
            generator=Generator(
                store,
                max_length=int(config.get("max_length", DEFAULT_MAX_LENGTH)),
                rng=random.Random(seed) if seed is not None else random.Random(),
            ),
        )

    def hear(self, tokens: Sequence[str]) -> int:
        """Learn from `tokens`. Returns the number of transitions recorded."""
        try:
            return self.learner.learn(tokens)
        except PersistenceSaveError as e:
            logger.error(f"lexicon save failed, keeping changes in memory: {e}")
            return max(0, len(tokens) - 1)

    def reply(self, tokens: Sequence[str]) -> Optional[str]:
        """Generated response, or None if there is nothing to seed from."""
        try:
            return self.generator.generate(tokens)
        except EmptyInputError:
            logger.debug("empty message, not replying")
            return None

    def handle(self, tokens: Sequence[str], respond: bool = True) -> Optional[str]:
        self.hear(tokens)
        if not respond:
            return None
        return self.reply(tokens)

    def flush(self) -> bool:
        """Persist pending updates. Returns True if a save happened."""
        try:
            return self.learner.flush()
        except PersistenceSaveError as e:
            logger.error(f"lexicon save failed: {e}")
            return False

    def save(self) -> bool:
        """Persist the whole lexicon unconditionally. Returns False on failure."""
        try:
            self.learner.save()
            return True
        except PersistenceSaveError as e:
            logger.error(f"lexicon save failed: {e}")
            return False
