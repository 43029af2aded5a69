# tests/test_context.py
from babbler.context import Tokenizer, clean_message, is_mentioned


def test_clean_message():
    assert clean_message("  Hello   @MyBot  THERE ", "mybot") == "hello there"
    assert clean_message("Hi @mybot!", "@mybot") == "hi !"
    assert clean_message("") == ""
    assert clean_message("No\tBot\nName") == "no bot name"


def test_is_mentioned():
    assert is_mentioned("hey @MyBot what's up", "mybot")
    assert not is_mentioned("hey you", "mybot")
    assert not is_mentioned("hey @mybot", "")


def test_tokenize_punctuation():
    tok = Tokenizer()
    assert tok.tokenize("hello, world!") == ["hello", ",", "world", "!"]
    assert tok("i am happy.") == ["i", "am", "happy", "."]


def test_tokenize_contractions():
    tok = Tokenizer()
    assert tok("don't stop") == ["do", "n't", "stop"]


def test_tokenize_drops_whitespace():
    tok = Tokenizer()
    assert tok("a  \n  b") == ["a", "b"]
    assert tok("") == []
