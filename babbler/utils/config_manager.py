# config_manager.py - JSON config manager

import json
import logging
import os

logger = logging.getLogger(__name__)

# options that must be a positive integer
POSITIVE_INTS = ("max_length", "save_every")

DEFAULTS = {
    "lexicon_path": os.path.join("data", "lexicon.json"),
    "max_length": 256,   # generated tokens, seed included
    "save_every": 1,     # 1 = save after every learned message
    "seed": None,        # RNG seed, None = OS entropy
    "bot_name": "",      # stripped from incoming messages as @bot_name
    "mention_only": False,  # reply only when @bot_name is mentioned
    "json_indent": None,
    "log_level": "INFO",
    "log_path": None,
}


class Config:
    def __init__(self, path="config.json", create=True):
        self.path = path
        self.data = dict(DEFAULTS)
        self._load(create)

    def _load(self, create):
        if os.path.exists(self.path):
            try:
                with open(self.path, "r", encoding="utf8") as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("top level must be an object")
                self.data.update(loaded)
            except (OSError, ValueError) as e:
                logger.warning(f"config {self.path} unreadable, using defaults: {e}")
        elif create:
            self.save()

    def save(self):
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def get(self, key, default=None):
        return self.data.get(key, default)

    def __getitem__(self, key):
        return self.data[key]

    def items(self):
        return sorted(self.data.items())

    def set(self, key, val):
        """
        Set an option and persist. String values are cast to the type of the
        default; options whose default is None take a JSON literal.
        """
        if key not in DEFAULTS:
            raise KeyError(f"no such option: {key}")
        val = _cast(DEFAULTS[key], val)
        if key in POSITIVE_INTS and (isinstance(val, bool) or not isinstance(val, int) or val < 1):
            raise ValueError(f"{key} must be a positive integer, got {val!r}")
        self.data[key] = val
        self.save()
        return self.data[key]


def _cast(default, val):
    if not isinstance(val, str):
        return val
    if default is None:
        try:
            return json.loads(val)
        except ValueError:
            return val
    if isinstance(default, bool):
        return val.strip().lower() in ("1", "true", "yes", "on")
    return type(default)(val)
