"""Mixing polynomials.

The number of ways to pay an amount with coins or bills of one denomination
is read off the polynomial ``1 + v^k + v^(2k) + ... + v^(nk)``, where ``k``
is the denomination and ``n`` the number of pieces available. Multiplying
one such polynomial per denomination counts the mixed payments.
"""

from __future__ import annotations

from typing import Iterator

import numpy as np

from extpoly.algorithms.monomial import encode
from extpoly.algorithms.notation import Term, format_terms
from extpoly.utils.log_config import logger


def _check(n: int, k: int, variable: str) -> None:
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    if k < 1:
        raise ValueError(f"k must be a positive integer, got {k}")
    if not variable.isidentifier():
        raise ValueError(f"variable must be an identifier, got {variable!r}")


def mixing_coefficients(n: int, k: int) -> np.ndarray:
    """
    Dense coefficient vector of ``1 + x^k + ... + x^(nk)``.

    Parameters
    ----------
    n : int
        Number of pieces; the polynomial has ``n + 1`` nonzero terms.
    k : int
        Step (denomination).

    Returns
    -------
    numpy.ndarray
        Float array of length ``n * k + 1`` with ones at the multiples of
        ``k`` and zeros elsewhere.

    Examples
    --------
    >>> mixing_coefficients(3, 2)
    array([1., 0., 1., 0., 1., 0., 1.])
    """
    _check(n, k, "x")
    coefficients = np.zeros(n * k + 1, dtype=np.float64)
    coefficients[::k] = 1.0
    return coefficients


def mixing_terms(n: int, k: int, variable: str) -> Iterator[Term]:
    """Yield the nonzero terms of the mixing polynomial in ascending degree."""
    _check(n, k, variable)
    coefficients = mixing_coefficients(n, k)
    for power in np.flatnonzero(coefficients):
        power = int(power)
        key = encode({variable: power}) if power else ""
        yield key, float(coefficients[power])


def mixing_string(n: int, k: int, variable: str) -> str:
    """Mixing polynomial in the input grammar, e.g. ``1.0 + 1.0*x^50``."""
    text = format_terms(mixing_terms(n, k, variable))
    logger.info("Polynomial from (%d, %d): %s", n, k, text if len(text) <= 200 else text[:200] + " ...")
    return text
