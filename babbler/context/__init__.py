from .normalizer import clean_message, is_mentioned
from .tokenizer import Tokenizer

__all__ = ["clean_message", "is_mentioned", "Tokenizer"]
