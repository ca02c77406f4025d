"""Conversion between term sequences and symengine expressions."""

from __future__ import annotations

from typing import Dict, Iterable, List

import symengine as se

from extpoly.algorithms.monomial import decode, encode
from extpoly.algorithms.notation import Term


def terms_to_symengine(terms: Iterable[Term]) -> se.Basic:
    """
    Build a symengine expression from ``(key, coefficient)`` terms.

    Duplicate keys are simply added, so an unsimplified store converts to
    the same expression as its simplified form.
    """
    symbols: Dict[str, se.Symbol] = {}
    expr = se.Integer(0)
    for key, coefficient in terms:
        monomial = se.Integer(1)
        for name, exponent in decode(key).items():
            sym = symbols.setdefault(name, se.Symbol(name))
            monomial = monomial * sym**exponent
        expr = expr + float(coefficient) * monomial
    return expr


def _monomial_exponents(factor: se.Basic, exponents: Dict[str, int]) -> None:
    if isinstance(factor, se.Symbol):
        exponents[str(factor)] = exponents.get(str(factor), 0) + 1
        return
    if isinstance(factor, se.Pow):
        base, exp = factor.args
        if isinstance(base, se.Symbol) and isinstance(exp, se.Integer) and int(exp) > 0:
            exponents[str(base)] = exponents.get(str(base), 0) + int(exp)
            return
    raise ValueError(f"Expression factor {factor} is not a monomial with positive integer exponent")


def symengine_to_terms(expr: se.Basic) -> List[Term]:
    """
    Expand a polynomial expression into canonical ``(key, coefficient)`` terms.

    Parameters
    ----------
    expr : symengine.Basic
        Polynomial with numeric coefficients and non-negative integer
        exponents.

    Returns
    -------
    list of tuple
        One term per monomial of the expanded expression; the zero
        expression gives an empty list.

    Raises
    ------
    ValueError
        If the expression is not such a polynomial.
    """
    expanded = se.expand(se.sympify(expr))
    if expanded == 0:
        return []
    addends = expanded.args if isinstance(expanded, se.Add) else (expanded,)

    terms: List[Term] = []
    for addend in addends:
        coefficient = 1.0
        exponents: Dict[str, int] = {}
        factors = addend.args if isinstance(addend, se.Mul) else (addend,)
        for factor in factors:
            if isinstance(factor, se.Number):
                coefficient *= float(factor)
            else:
                _monomial_exponents(factor, exponents)
        terms.append((encode(exponents), coefficient))
    return terms
