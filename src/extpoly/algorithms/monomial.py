"""
extpoly.algorithms.monomial
===========================

Canonical string keys for monomials.

A key is ``f1*f2*...*fn`` where each factor is ``var`` (exponent 1) or
``var^e`` with ``e >= 2``. The empty key is the constant monomial. Factors
are always emitted in lexicographic order of the variable name so that two
equal variable->exponent mappings serialise to the same string; merging
terms relies on plain string equality.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Dict, Mapping, Tuple

from extpoly.utils.exceptions import MalformedKey

FACTOR_SEP = "*"
"""Separator between the factors of a key."""

CARET = "^"
"""Separator between a variable and its exponent."""


@lru_cache(maxsize=65536)
def _parse_key(key: str) -> Tuple[Tuple[str, int], ...]:
    """Parse *key* into sorted ``(variable, exponent)`` pairs.

    Cached because a cross product decodes the same few keys over and over.
    The result is immutable so sharing it between callers is safe.
    """
    if key == "":
        return ()

    exponents: Dict[str, int] = {}
    for factor in key.split(FACTOR_SEP):
        name, sep, exp_text = factor.partition(CARET)
        name = name.strip()
        if not name.isidentifier():
            raise MalformedKey(f"Invalid variable name {name!r} in monomial key {key!r}")
        if sep:
            exp_text = exp_text.strip()
            if not exp_text.isdecimal():
                raise MalformedKey(
                    f"Exponent {exp_text!r} of {name!r} in monomial key {key!r} is not a positive integer"
                )
            exponent = int(exp_text)
            if exponent < 1:
                raise MalformedKey(
                    f"Exponent {exp_text!r} of {name!r} in monomial key {key!r} is not a positive integer"
                )
        else:
            exponent = 1
        exponents[name] = exponents.get(name, 0) + exponent

    return tuple(sorted(exponents.items()))


def decode(key: str) -> Dict[str, int]:
    """
    Decode a monomial key into a variable -> exponent mapping.

    Parameters
    ----------
    key : str
        Monomial key, e.g. ``"x^2*y"``. The empty string is the constant
        monomial.

    Returns
    -------
    dict
        Fresh mapping, e.g. ``{"x": 2, "y": 1}``. A variable that appears
        more than once accumulates its exponents.

    Raises
    ------
    MalformedKey
        If a variable name is not an identifier or an exponent is not a
        positive integer.
    """
    return dict(_parse_key(key))


def encode(exponents: Mapping[str, int]) -> str:
    """
    Encode a variable -> exponent mapping as a canonical key.

    Parameters
    ----------
    exponents : Mapping[str, int]
        Exponent of every variable; all exponents must be positive.

    Returns
    -------
    str
        Factors sorted by variable name, ``^1`` omitted. ``{}`` gives ``""``.
    """
    factors = []
    for name in sorted(exponents):
        exponent = exponents[name]
        if exponent < 1:
            raise MalformedKey(f"Exponent {exponent} of {name!r} is not a positive integer")
        factors.append(name if exponent == 1 else f"{name}{CARET}{exponent}")
    return FACTOR_SEP.join(factors)


@lru_cache(maxsize=65536)
def combine(key1: str, key2: str) -> str:
    """
    Multiply two monomials by adding their exponents.

    Parameters
    ----------
    key1, key2 : str
        Monomial keys.

    Returns
    -------
    str
        Canonical key of the product.

    Examples
    --------
    >>> combine("x^2", "x^3")
    'x^5'
    >>> combine("x*y", "y^2")
    'x*y^3'
    """
    exponents = dict(_parse_key(key1))
    for name, exponent in _parse_key(key2):
        exponents[name] = exponents.get(name, 0) + exponent
    return encode(exponents)


def degree(key: str) -> int:
    """Total degree of a monomial key (sum of its exponents)."""
    return sum(exponent for _, exponent in _parse_key(key))


@lru_cache(maxsize=65536)
def canonical(key: str) -> str:
    """Return the canonical spelling of *key* (``"y*x"`` -> ``"x*y"``)."""
    return encode(dict(_parse_key(key)))
