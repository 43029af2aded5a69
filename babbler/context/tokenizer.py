# babbler/context/tokenizer.py
# word/punctuation tokenizer backed by spaCy's rule-based tokenizer

from __future__ import annotations

import logging
import threading
from typing import List

import spacy

logger = logging.getLogger(__name__)


class Tokenizer:
    """
    Splits text into word and punctuation tokens, e.g.
        "don't stop, ok?" -> ["do", "n't", "stop", ",", "ok", "?"]
    Uses a blank spaCy pipeline, so no statistical model has to be installed.
    The pipeline is built on first use.
    """

    def __init__(self, lang: str = "en"):
        self.lang = lang
        self._nlp = None
        self._lock = threading.Lock()

    def _ensure_loaded(self):
        if self._nlp is None:
            with self._lock:
                if self._nlp is None:
                    self._nlp = spacy.blank(self.lang)
                    logger.debug(f"built blank spaCy tokenizer for '{self.lang}'")
        return self._nlp

    def tokenize(self, text: str) -> List[str]:
        if not text:
            return []
        doc = self._ensure_loaded().make_doc(text)
        return [t.text for t in doc if not t.is_space]

    __call__ = tokenize
