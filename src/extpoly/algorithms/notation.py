"""
extpoly.algorithms.notation
===========================

Text forms of terms and polynomials.

Three formats are handled here:

* the term-store line ``<key>=<coefficient>`` used by file backed stores and
  by ordered output files;
* the human input grammar, e.g. ``"1*x^2 + -3*y"``;
* the human output string, e.g. ``"1.0*x^2 + -3.0*y"``.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Tuple

from extpoly.algorithms.monomial import FACTOR_SEP, canonical
from extpoly.utils.exceptions import MalformedKey, MalformedTerm

Term = Tuple[str, float]

TERM_SEP = "="
"""Separator between key and coefficient in a term line."""

_SIGN_SPLIT = re.compile(r"(?=[+-])")

# A token that stops inside the exponent of a float literal (1e-5).
_OPEN_EXPONENT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)[eE]")

# Decimal literal accepted as a coefficient; signs are handled by the splitter.
_DECIMAL = re.compile(r"(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def format_coefficient(coefficient: float) -> str:
    """Shortest text that reads back as exactly the same float."""
    return repr(float(coefficient))


def format_line(key: str, coefficient: float) -> str:
    """Serialise one term as a store line (without the newline)."""
    return f"{key}{TERM_SEP}{format_coefficient(coefficient)}"


def parse_line(line: str, validate: bool = True) -> Term:
    """
    Parse one store line.

    Parameters
    ----------
    line : str
        ``<key>=<coefficient>``, optionally followed by a line break.
    validate : bool, default True
        Check that the key is a well formed monomial in canonical form
        (factors sorted by variable, each variable once, no ``^1``).

    Returns
    -------
    tuple
        ``(key, coefficient)``.

    Raises
    ------
    MalformedTerm
        If the separator is missing, the coefficient is not numeric, or the
        key is malformed or not canonical.
    """
    text = line.rstrip("\r\n")
    key, sep, coefficient_text = text.partition(TERM_SEP)
    if not sep:
        raise MalformedTerm(f"Missing '{TERM_SEP}' in term line {text!r}")
    try:
        coefficient = float(coefficient_text)
    except ValueError as exc:
        raise MalformedTerm(f"Non-numeric coefficient in term line {text!r}") from exc
    if validate:
        try:
            canonical_key = canonical(key)
        except MalformedKey as exc:
            raise MalformedKey(f"Invalid monomial in term line {text!r}: {exc}") from exc
        if canonical_key != key:
            raise MalformedKey(
                f"Monomial {key!r} in term line {text!r} is not in canonical form {canonical_key!r}"
            )
    return key, coefficient


def _sign_tokens(text: str) -> List[str]:
    """Split before every sign, then glue back the signs of float exponents."""
    tokens: List[str] = []
    for token in _SIGN_SPLIT.split(text):
        if not token:
            continue
        if tokens and _OPEN_EXPONENT.fullmatch(tokens[-1]):
            tokens[-1] += token
        else:
            tokens.append(token)
    return tokens


def _split_terms(text: str) -> Iterator[Tuple[bool, str]]:
    """Yield ``(negative, body)`` per term, folding bare signs into the next term."""
    negative = False
    dangling = False
    for token in _sign_tokens(text):
        if token[0] in "+-":
            if token[0] == "-":
                negative = not negative
            token = token[1:]
            if not token:
                dangling = True
                continue
        yield negative, token
        negative = False
        dangling = False
    if dangling:
        raise MalformedTerm(f"Dangling sign at the end of polynomial {text!r}")


def _is_number(text: str) -> bool:
    return _DECIMAL.fullmatch(text) is not None


def parse_polynomial(text: str) -> Iterator[Term]:
    """
    Parse a human polynomial string into canonical terms.

    Whitespace is ignored. The string is split before every ``+`` or ``-``;
    each term is ``coefficient*key``, a bare ``coefficient`` (constant), or a
    bare ``key`` meaning a unit coefficient.

    Parameters
    ----------
    text : str
        Polynomial such as ``"1*x^2 + -3*y"`` or ``"1 + x^50"``.

    Yields
    ------
    tuple
        ``(key, coefficient)`` with the key in canonical form.

    Raises
    ------
    MalformedTerm
        If a term has neither a numeric coefficient nor a valid monomial.

    Examples
    --------
    >>> list(parse_polynomial("1*x^2 + -3*y"))
    [('x^2', 1.0), ('y', -3.0)]
    """
    compact = "".join(text.split())
    for negative, body in _split_terms(compact):
        head, sep, key = body.partition(FACTOR_SEP)
        if _is_number(head):
            coefficient = float(head)
            if sep and not key:
                raise MalformedTerm(f"Missing monomial after '*' in term {body!r}")
        else:
            # No numeric coefficient: the whole body is the monomial.
            coefficient, key = 1.0, body
        if negative:
            coefficient = -coefficient
        yield canonical(key), coefficient


def format_terms(terms: Iterable[Term]) -> str:
    """
    Render terms as ``coefficient`` or ``coefficient*key`` joined by ``" + "``.

    Terms whose coefficient is exactly zero are skipped, so a polynomial with
    no nonzero term renders as the empty string.
    """
    parts = []
    for key, coefficient in terms:
        if coefficient == 0:
            continue
        text = format_coefficient(coefficient)
        parts.append(text if key == "" else f"{text}{FACTOR_SEP}{key}")
    return " + ".join(parts)
