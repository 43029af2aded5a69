"""
babbler.core

The learning/generation/persistence engine:
 - LexiconStore: owns the transition table, load/save/apply
 - Learner: token sequence -> transition counts
 - Generator: weighted random walk -> response text
 - Chatbot: learn-then-respond facade used by the CLI
"""

from .errors import (
    BabblerError,
    EmptyInputError,
    PersistenceError,
    PersistenceLoadError,
    PersistenceSaveError,
)
from .serializer import decode_lexicon, encode_lexicon
from .lexicon_store import LexiconStore, LexiconStats
from .learner import Learner
from .generator import Generator, normalize_response, weighted_choice
from .chatbot import Chatbot

__all__ = [
    "BabblerError",
    "EmptyInputError",
    "PersistenceError",
    "PersistenceLoadError",
    "PersistenceSaveError",
    "decode_lexicon",
    "encode_lexicon",
    "LexiconStore",
    "LexiconStats",
    "Learner",
    "Generator",
    "normalize_response",
    "weighted_choice",
    "Chatbot",
]
