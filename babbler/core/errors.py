# errors.py - exception types shared by the core engine

from __future__ import annotations

from typing import Optional


class BabblerError(Exception):
    """Base class for every error raised by babbler."""


class EmptyInputError(BabblerError, ValueError):
    """Generation was asked to start from an empty token sequence."""

    def __init__(self, msg: str = "cannot pick a seed word from an empty token sequence"):
        super().__init__(msg)


class PersistenceError(BabblerError):
    """Reading or writing the persisted lexicon failed."""

    def __init__(self, path: str, msg: str = ""):
        self.path = path
        super().__init__(f"{path}: {msg}" if msg else path)


class PersistenceLoadError(PersistenceError):
    """The persisted lexicon exists but could not be read."""


class PersistenceSaveError(PersistenceError):
    """
    Writing the lexicon to disk failed.
    The in-memory table is unaffected; a later successful save includes
    every update made in the meantime.
    """

    def __init__(self, path: str, msg: str = "", cause: Optional[BaseException] = None):
        super().__init__(path, msg)
        self.cause = cause
