import pytest

from babbler.core.lexicon_store import LexiconStore


@pytest.fixture
def lex_path(tmp_path):
    return str(tmp_path / "lexicon.json")


@pytest.fixture
def store(lex_path):
    return LexiconStore(lex_path)
