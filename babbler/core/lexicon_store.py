# lexicon_store.py
"""
LexiconStore
------------
Sole owner of the word -> {next word: weight} transition table.

 - load() restores the table from disk; a missing or unreadable file gives an
   empty table, never an exception
 - save() writes the whole table atomically (tmp file + os.replace)
 - apply() hands out the live table under an exclusive lock for updates
 - lookup()/weight()/snapshot() are locked reads that return copies

save() only holds the table lock long enough to copy it. Disk I/O runs under a
second lock so two concurrent saves cannot land out of order.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from babbler.core.errors import PersistenceLoadError, PersistenceSaveError
from babbler.core.serializer import Associations, Lexicon, decode_lexicon, encode_lexicon
from babbler.utils.logger_utils import Log

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LexiconStats:
    words: int
    transitions: int
    total_weight: int


def copy_lexicon(lexicon: Lexicon) -> Lexicon:
    return {word: dict(assoc) for word, assoc in lexicon.items()}


class LexiconStore:
    def __init__(self, path: str, *, indent: Optional[int] = None, autoload: bool = True):
        """
        Args:
            path: file holding the persisted lexicon.
            indent: JSON indent for the persisted file (None = compact).
            autoload: read `path` immediately; otherwise start empty.
        """
        self.path = path
        self.indent = indent
        self._lexicon: Lexicon = {}
        self._lock = threading.RLock()
        self._io_lock = threading.Lock()
        if autoload:
            self.load()

    # Loading/saving ----------------------------------------------------------
    def load(self) -> Lexicon:
        """
        Replace the in-memory table with the persisted one and return a copy.
        Missing or corrupt state yields an empty lexicon.
        """
        try:
            data = self._read()
        except PersistenceLoadError as e:
            logger.warning(f"could not read lexicon, starting empty: {e}")
            data = None

        lexicon = decode_lexicon(data) if data is not None else None
        if lexicon is None:
            if data is not None:
                logger.warning(f"ignoring unusable lexicon at {self.path}, starting empty")
            lexicon = {}
        else:
            logger.info(f"loaded lexicon from {self.path} ({len(lexicon)} words)")

        with self._lock:
            self._lexicon = lexicon
            return copy_lexicon(lexicon)

    def _read(self) -> Optional[bytes]:
        if not os.path.exists(self.path):
            logger.info(f"no lexicon at {self.path}, starting empty")
            return None
        try:
            with open(self.path, "rb") as fh:
                return fh.read()
        except OSError as e:
            raise PersistenceLoadError(self.path, str(e)) from e

    def save(self) -> None:
        """
        Persist the whole table, overwriting earlier state.
        Raises PersistenceSaveError on I/O failure; memory is left as it was.
        """
        with self._io_lock:
            snap = self.snapshot()
            payload = encode_lexicon(snap, indent=self.indent)
            with Log.time_block("lexicon save", logger):
                self._write(payload)
        logger.debug(f"saved lexicon to {self.path} ({len(snap)} words)")

    def _write(self, payload: bytes) -> None:
        dirname = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(dirname, exist_ok=True)
            tmp_fd, tmp_path = tempfile.mkstemp(prefix=".lexicon_", suffix=".tmp", dir=dirname)
            with os.fdopen(tmp_fd, "wb") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.debug(f"could not remove temp file {tmp_path}")
            raise PersistenceSaveError(self.path, str(e), cause=e) from e

    # Access ------------------------------------------------------------------
    @contextmanager
    def apply(self) -> Iterator[Lexicon]:
        """
        Exclusive access to the live table for a read-modify-write.
            with store.apply() as lex:
                lex.setdefault("a", {})["b"] = 1
        Callers must keep every association set non-empty.
        """
        with self._lock:
            yield self._lexicon

    def lookup(self, word: str) -> Optional[Associations]:
        """Copy of the association set for `word`, or None if it is unknown."""
        with self._lock:
            assoc = self._lexicon.get(word)
            return dict(assoc) if assoc is not None else None

    def weight(self, word: str, next_word: str) -> int:
        with self._lock:
            return self._lexicon.get(word, {}).get(next_word, 0)

    def snapshot(self) -> Lexicon:
        with self._lock:
            return copy_lexicon(self._lexicon)

    def stats(self) -> LexiconStats:
        with self._lock:
            transitions = sum(len(a) for a in self._lexicon.values())
            total = sum(sum(a.values()) for a in self._lexicon.values())
            return LexiconStats(len(self._lexicon), transitions, total)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lexicon)

    def __contains__(self, word: object) -> bool:
        with self._lock:
            return word in self._lexicon
