# tests/test_learner.py
import os
import threading

import pytest

from babbler.core.errors import PersistenceSaveError
from babbler.core.learner import Learner
from babbler.core.lexicon_store import LexiconStore


def test_learn_example(store):
    n = Learner(store).learn(["i", "am", "happy", "."])
    assert n == 3
    assert store.snapshot() == {"i": {"am": 1}, "am": {"happy": 1}, "happy": {".": 1}}


def test_each_pair_increments_by_one(store):
    learner = Learner(store)
    learner.learn(["a", "b", "a", "b"])
    before = store.snapshot()
    tokens = ["a", "b", "c", "a", "b"]
    learner.learn(tokens)
    after = store.snapshot()
    # ("a","b") appears twice in the second sequence
    assert after["a"]["b"] == before["a"]["b"] + 2
    assert after["b"]["c"] == 1
    assert after["c"]["a"] == 1
    assert after["b"]["a"] == before["b"]["a"]


@pytest.mark.parametrize("tokens", [[], ["solo"]])
def test_short_sequences_do_nothing(store, lex_path, tokens):
    learner = Learner(store)
    assert learner.learn(tokens) == 0
    assert store.snapshot() == {}
    assert learner.pending == 0
    assert not os.path.exists(lex_path)


def test_write_through_saves_every_time(store, lex_path):
    Learner(store).learn(["x", "y"])
    assert LexiconStore(lex_path).snapshot() == {"x": {"y": 1}}


def test_batched_saves(store, lex_path):
    learner = Learner(store, save_every=3)
    learner.learn(["a", "b"])
    learner.learn(["b", "c"])
    assert learner.pending == 2
    assert LexiconStore(lex_path).snapshot() == {}
    learner.learn(["c", "d"])
    assert learner.pending == 0
    assert LexiconStore(lex_path).snapshot() == {"a": {"b": 1}, "b": {"c": 1}, "c": {"d": 1}}


def test_flush(store, lex_path):
    learner = Learner(store, save_every=100)
    assert learner.flush() is False
    learner.learn(["a", "b"])
    assert learner.flush() is True
    assert learner.pending == 0
    assert LexiconStore(lex_path).snapshot() == {"a": {"b": 1}}


def test_save_every_must_be_positive(store):
    with pytest.raises(ValueError):
        Learner(store, save_every=0)


def test_failed_save_keeps_updates_pending(tmp_path, monkeypatch):
    path = tmp_path / "lex.json"
    store = LexiconStore(str(path))
    learner = Learner(store)
    real_write = store._write

    def broken(payload):
        raise PersistenceSaveError(str(path), "disk full")

    monkeypatch.setattr(store, "_write", broken)
    with pytest.raises(PersistenceSaveError):
        learner.learn(["a", "b"])
    # memory has the update even though the save failed
    assert store.weight("a", "b") == 1
    assert learner.pending == 1

    monkeypatch.setattr(store, "_write", real_write)
    learner.learn(["b", "c"])
    assert learner.pending == 0
    assert LexiconStore(str(path)).snapshot() == {"a": {"b": 1}, "b": {"c": 1}}


def test_weights_never_decrease(store):
    learner = Learner(store)
    seqs = [["a", "b", "c"], ["c", "b", "a"], ["a", "b"], ["b"], []]
    prev = store.snapshot()
    for s in seqs:
        learner.learn(s)
        cur = store.snapshot()
        for w, assoc in prev.items():
            for nxt, c in assoc.items():
                assert cur[w][nxt] >= c
        prev = cur


def test_concurrent_learning_counts_every_pair(store):
    learner = Learner(store, save_every=10_000)

    def work():
        for _ in range(200):
            learner.learn(["a", "b", "c"])

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert store.weight("a", "b") == 1600
    assert store.weight("b", "c") == 1600
    assert learner.pending == 1600


def test_pending_counts_concurrent_learns(store):
    learner = Learner(store, save_every=1000)
    threads = [threading.Thread(target=learner.learn, args=(["x", "y"],)) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert learner.pending == 8
    assert learner.flush() is True
    assert learner.pending == 0
    assert learner.flush() is False
    assert store.weight("x", "y") == 8
