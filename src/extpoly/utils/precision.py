"""
Precision utilities for coefficient accumulation.

This module provides the arbitrary precision summation used by
simplification when it is explicitly enabled, with mpmath doing the work.
"""

from typing import Dict, Iterable, Tuple

import mpmath as mp

from extpoly.config import MPMATH_DPS


def with_precision(precision: int = None):
    """
    Context manager for setting mpmath precision.
    
    Parameters
    ----------
    precision : int, optional
        Number of decimal places. If None, uses MPMATH_DPS from config.
    """
    if precision is None:
        precision = MPMATH_DPS
    return mp.workdps(precision)


def high_precision_accumulate(terms: Iterable[Tuple[str, float]], precision: int = None) -> Dict[str, float]:
    """
    Sum coefficients per key in arbitrary precision.

    Parameters
    ----------
    terms : iterable of (str, float)
        Stream of ``(key, coefficient)`` pairs, possibly with repeated keys.
    precision : int, optional
        Number of decimal places. If None, uses MPMATH_DPS from config.

    Returns
    -------
    dict
        Mapping ``key -> sum`` in first-appearance order, each sum rounded to
        float64 exactly once.
    """
    sums = {}
    with with_precision(precision):
        for key, coefficient in terms:
            previous = sums.get(key)
            if previous is None:
                sums[key] = mp.mpf(coefficient)
            else:
                sums[key] = previous + mp.mpf(coefficient)
        return {key: float(value) for key, value in sums.items()}
