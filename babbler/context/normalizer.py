# babbler/context/normalizer.py
import re

_space_re = re.compile(r"\s+")


def _mention_re(bot_name: str):
    return re.compile("@" + re.escape(bot_name.lstrip("@")), re.IGNORECASE)


def is_mentioned(s: str, bot_name: str) -> bool:
    """True if `s` contains @bot_name (case-insensitive)."""
    if not s or not bot_name:
        return False
    return bool(_mention_re(bot_name).search(s))


def clean_message(s: str, bot_name: str = "") -> str:
    """
    Prepare an incoming message for tokenization:
    drop @bot_name mentions, lower-case, collapse whitespace.
    """
    if not s:
        return ""
    if bot_name:
        s = _mention_re(bot_name).sub("", s)
    s = s.lower()
    return _space_re.sub(" ", s).strip()
