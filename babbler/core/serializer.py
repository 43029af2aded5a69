# serializer.py - lexicon <-> bytes
#
# The persisted form is a UTF-8 JSON object of objects:
#   {"word": {"next": weight, ...}, ...}
# Keys are sorted on output so the file is stable between saves.

from __future__ import annotations

import json
import logging
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

Word = str
Associations = Dict[Word, int]
Lexicon = Dict[Word, Associations]


def encode_lexicon(lexicon: Lexicon, indent: Optional[int] = None) -> bytes:
    """Serialize a lexicon to UTF-8 JSON bytes."""
    return json.dumps(
        lexicon, ensure_ascii=False, sort_keys=True, indent=indent
    ).encode("utf-8")


def decode_lexicon(data: Optional[Union[bytes, str]]) -> Optional[Lexicon]:
    """
    Parse persisted bytes back into a lexicon.
    Returns None when there is nothing to decode or the payload is malformed;
    never raises for bad input. Words with an empty association set are dropped.
    """
    if data is None:
        return None
    try:
        text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
    except UnicodeDecodeError as e:
        logger.warning(f"lexicon data is not valid UTF-8: {e}")
        return None
    if not text.strip():
        return None

    try:
        raw = json.loads(text)
    except ValueError as e:
        logger.warning(f"lexicon data is not valid JSON: {e}")
        return None

    lexicon = _validate(raw)
    if lexicon is None:
        logger.warning("lexicon data has an unexpected shape, ignoring it")
    return lexicon


def _validate(raw: object) -> Optional[Lexicon]:
    if not isinstance(raw, dict):
        return None
    out: Lexicon = {}
    for word, assoc in raw.items():
        if not isinstance(assoc, dict):
            return None
        checked: Associations = {}
        for nxt, weight in assoc.items():
            # bool is an int subclass; reject it explicitly
            if isinstance(weight, bool) or not isinstance(weight, int) or weight < 1:
                return None
            checked[nxt] = weight
        if checked:
            out[word] = checked
    return out
