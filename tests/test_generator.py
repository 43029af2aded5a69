# tests/test_generator.py
import random

import pytest

from babbler.core.errors import EmptyInputError
from babbler.core.generator import (
    Generator,
    normalize_response,
    weighted_choice,
)
from babbler.core.learner import Learner


def fill(store, lex):
    with store.apply() as live:
        live.update({k: dict(v) for k, v in lex.items()})


def test_end_to_end_example(store):
    Learner(store).learn(["i", "am", "happy", "."])
    gen = Generator(store, rng=random.Random(0))
    assert gen.walk("am") == ["am", "happy", "."]
    assert gen.generate(["am"]) == "am happy."


def test_empty_input_raises(store):
    with pytest.raises(EmptyInputError):
        Generator(store).generate([])


def test_empty_input_error_is_value_error():
    assert issubclass(EmptyInputError, ValueError)


def test_seed_comes_from_input(store):
    gen = Generator(store, rng=random.Random(3))
    seen = {gen.generate(["x", "y", "z"]) for _ in range(200)}
    # empty lexicon: every walk dead-ends on the seed
    assert seen == {"x", "y", "z"}


def test_unknown_seed_is_single_word(store):
    fill(store, {"a": {"b": 1}})
    assert Generator(store).walk("nope") == ["nope"]


def test_terminator_seed_is_single_token(store):
    fill(store, {".": {"and": 1}, "and": {"so": 1}})
    assert Generator(store).walk(".") == ["."]


def test_stops_at_first_terminator(store):
    fill(store, {"a": {"b": 1}, "b": {"?": 1}, "?": {"c": 1}, "c": {"d": 1}})
    assert Generator(store).walk("a") == ["a", "b", "?"]


def test_dead_end_stops_walk(store):
    fill(store, {"a": {"b": 1}, "b": {"c": 1}})
    assert Generator(store).walk("a") == ["a", "b", "c"]


def test_cycle_is_truncated_at_max_length(store):
    fill(store, {"a": {"b": 1}, "b": {"a": 1}})
    out = Generator(store, max_length=10).walk("a")
    assert len(out) == 10
    assert out[:4] == ["a", "b", "a", "b"]


def test_default_max_length_bounds_output(store):
    fill(store, {"la": {"la": 5}})
    out = Generator(store, rng=random.Random(1)).walk("la")
    assert len(out) == 256


def test_max_length_one(store):
    fill(store, {"a": {"b": 1}})
    assert Generator(store, max_length=1).walk("a") == ["a"]


def test_max_length_must_be_positive(store):
    with pytest.raises(ValueError):
        Generator(store, max_length=0)


def test_empty_string_token_is_not_a_dead_end(store):
    fill(store, {"a": {"": 1}, "": {".": 1}})
    assert Generator(store).walk("a") == ["a", "", "."]


def test_weighted_choice_converges():
    rng = random.Random(1234)
    n = 20000
    hits = sum(weighted_choice({"a": 3, "b": 1}, rng) == "a" for _ in range(n))
    assert abs(hits / n - 0.75) <= 0.02


def test_weighted_choice_is_order_independent():
    a = weighted_choice({"x": 2, "y": 5, "z": 1}, random.Random(42))
    b = weighted_choice({"z": 1, "y": 5, "x": 2}, random.Random(42))
    assert a == b


def test_weighted_choice_boundaries():
    class FixedRng:
        def __init__(self, value):
            self.value = value

        def randrange(self, total):
            assert total == 4
            return self.value

    # sorted order: a (cum 3), b (cum 4)
    assert weighted_choice({"b": 1, "a": 3}, FixedRng(0)) == "a"
    assert weighted_choice({"b": 1, "a": 3}, FixedRng(2)) == "a"
    assert weighted_choice({"b": 1, "a": 3}, FixedRng(3)) == "b"


def test_weighted_choice_nothing_to_draw():
    rng = random.Random(0)
    assert weighted_choice({}, rng) is None
    assert weighted_choice({"a": 0}, rng) is None


def test_same_seed_same_output(store):
    fill(store, {"a": {"b": 2, "c": 1}, "b": {"a": 1, ".": 1}, "c": {"a": 3, "!": 1}})
    out1 = Generator(store, rng=random.Random(7)).generate(["a", "b"])
    out2 = Generator(store, rng=random.Random(7)).generate(["a", "b"])
    assert out1 == out2


@pytest.mark.parametrize(
    "words, expected",
    [
        (["hello", ",", "world", "!"], "hello, world!"),
        (["i", "do", "n't", "know", "."], "i don't know."),
        (["it", "'s", "fine", "?"], "it's fine?"),
        (["we", "'ll", "see", "(", "maybe", ")", "ok"], "we'll see ( maybe)ok"),
        (["he", "said", '"', "hi", '"'], 'he said" hi"'),
    ],
)
def test_normalize(words, expected):
    assert normalize_response(" ".join(words)) == expected


def test_render_uses_configured_sets(store):
    gen = Generator(store, no_space_before=[":"], no_space_after=["("])
    assert gen.render(["note", ":", "(", "x"]) == "note: (x"
