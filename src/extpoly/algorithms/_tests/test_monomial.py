import random

import pytest

from extpoly.algorithms.monomial import (canonical, combine, decode, degree,
                                         encode)
from extpoly.utils.exceptions import MalformedKey, MalformedTerm

VARIABLES = ["x", "y", "z", "w", "q1", "p2"]


def _random_key(rng, max_vars=4, max_exp=6):
    names = rng.sample(VARIABLES, rng.randint(0, max_vars))
    return encode({name: rng.randint(1, max_exp) for name in names})


def test_decode_basic():
    assert decode("x^2*y") == {"x": 2, "y": 1}
    assert decode("x") == {"x": 1}
    assert decode("") == {}


def test_decode_repeated_variable_accumulates():
    assert decode("x*x^2") == {"x": 3}


def test_decode_returns_fresh_mapping():
    first = decode("x^2")
    first["x"] = 99
    assert decode("x^2") == {"x": 2}


@pytest.mark.parametrize("key", ["x^", "x^0", "x^-1", "x^1.5", "x^a", "^2", "x**y", "2x", "x y"])
def test_decode_rejects_malformed(key):
    with pytest.raises(MalformedKey):
        decode(key)


def test_malformed_key_is_malformed_term():
    with pytest.raises(MalformedTerm):
        decode("x^0")


def test_encode_sorted_and_unit_exponent_omitted():
    assert encode({"y": 3, "x": 1}) == "x*y^3"
    assert encode({}) == ""


def test_encode_rejects_non_positive_exponent():
    with pytest.raises(MalformedKey):
        encode({"x": 0})


def test_combine_examples():
    assert combine("x", "y") == "x*y"
    assert combine("x^2", "x^3") == "x^5"
    assert combine("x*y", "y^2") == "x*y^3"
    assert combine("", "x^4") == "x^4"
    assert combine("", "") == ""


def test_combine_is_canonical_whatever_the_input_order():
    assert combine("y*x", "") == "x*y"
    assert combine("z^2*x", "y") == combine("y", "x*z^2") == "x*y*z^2"


def test_degree():
    assert degree("") == 0
    assert degree("x") == 1
    assert degree("x^50*y^100") == 150


def test_canonical():
    assert canonical("y^2*x") == "x*y^2"
    assert canonical("x^1") == "x"
    assert canonical("") == ""


def test_combine_properties_random():
    rng = random.Random(1234)
    for _ in range(200):
        k1 = _random_key(rng)
        k2 = _random_key(rng)
        combined = combine(k1, k2)
        # Degree is additive.
        assert degree(combined) == degree(k1) + degree(k2)
        # Order independent, both semantically and as a string.
        assert combined == combine(k2, k1)
        assert decode(combined) == decode(combine(k2, k1))
        # Round trip through the codec.
        assert encode(decode(combined)) == combined
