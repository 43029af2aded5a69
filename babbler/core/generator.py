# generator.py
"""
Generator - weighted random walk over the lexicon.

generate(tokens):
  1. pick a seed uniformly from the triggering tokens
  2. walk: repeatedly draw the next word in proportion to transition weight,
     stopping at a terminator (kept), a dead end, or max_length tokens
  3. join with spaces and pull punctuation/clitics back onto their words

Next words are enumerated in sorted order before the cumulative draw, so a
seeded random.Random gives the same output on every run and platform.
"""

from __future__ import annotations

import bisect
import logging
import random
from itertools import accumulate
from typing import Iterable, List, Mapping, Optional, Sequence

from babbler.core.errors import EmptyInputError
from babbler.core.lexicon_store import LexiconStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 256
TERMINATORS = (".", ",", "?", "!")
NO_SPACE_BEFORE = ("n't", ".", ",", "?", "!", '"', "'s", "'ll", "'re", ")")
NO_SPACE_AFTER = (")",)


def weighted_choice(associations: Mapping[str, int], rng: random.Random) -> Optional[str]:
    """
    Draw a key with probability proportional to its weight.
    Returns None when there is nothing to draw from (no keys or zero total).
    """
    if not associations:
        return None
    words = sorted(associations)
    cumulative = list(accumulate(associations[w] for w in words))
    total = cumulative[-1]
    if total <= 0:
        return None
    draw = rng.randrange(total)
    # first cumulative weight strictly greater than the draw
    return words[bisect.bisect_right(cumulative, draw)]


def normalize_response(
    text: str,
    no_space_before: Iterable[str] = NO_SPACE_BEFORE,
    no_space_after: Iterable[str] = NO_SPACE_AFTER,
) -> str:
    """Literal rewrite: "hello , world !" -> "hello, world!"."""
    for tok in no_space_before:
        text = text.replace(" " + tok, tok)
    for tok in no_space_after:
        text = text.replace(tok + " ", tok)
    return text


class Generator:
    def __init__(
        self,
        store: LexiconStore,
        *,
        max_length: int = DEFAULT_MAX_LENGTH,
        rng: Optional[random.Random] = None,
        terminators: Iterable[str] = TERMINATORS,
        no_space_before: Sequence[str] = NO_SPACE_BEFORE,
        no_space_after: Sequence[str] = NO_SPACE_AFTER,
    ):
        if max_length < 1:
            raise ValueError("max_length must be >= 1")
        self.store = store
        self.max_length = max_length
        self.rng = rng or random.Random()
        self.terminators = frozenset(terminators)
        self.no_space_before = tuple(no_space_before)
        self.no_space_after = tuple(no_space_after)

    # Public API ---------------------------------------------------------------
    def generate(self, tokens: Sequence[str]) -> str:
        """
        Produce a response seeded from `tokens`.
        Raises EmptyInputError when `tokens` is empty.
        """
        seed = self.pick_seed(tokens)
        words = self.walk(seed)
        return self.render(words)

    def pick_seed(self, tokens: Sequence[str]) -> str:
        if not tokens:
            raise EmptyInputError()
        return self.rng.choice(list(tokens))

    def walk(self, seed: str) -> List[str]:
        """Token buffer starting at `seed`, at most max_length long."""
        out = [seed]
        if seed in self.terminators:
            return out
        while len(out) < self.max_length:
            nxt = self.next_word(out[-1])
            if nxt is None:
                break
            out.append(nxt)
            if nxt in self.terminators:
                break
        else:
            logger.debug(f"walk truncated at {self.max_length} tokens")
        return out

    def next_word(self, word: str) -> Optional[str]:
        """Sampled successor of `word`; None at a dead end."""
        assoc = self.store.lookup(word)
        if assoc is None:
            return None
        return weighted_choice(assoc, self.rng)

    def render(self, words: Sequence[str]) -> str:
        return normalize_response(" ".join(words), self.no_space_before, self.no_space_after)
