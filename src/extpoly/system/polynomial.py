"""User-facing polynomial backed by an external term store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

import symengine as se

from extpoly.algorithms import engine
from extpoly.algorithms.builder import mixing_terms
from extpoly.algorithms.config import EngineConfig
from extpoly.algorithms.conversion import (symengine_to_terms,
                                           terms_to_symengine)
from extpoly.algorithms.monomial import canonical
from extpoly.algorithms.notation import Term, format_terms, parse_polynomial
from extpoly.algorithms.store import TermStore
from extpoly.utils.timing import timed


class Polynomial:
    """Sparse multivariate polynomial stored as a sequence of terms.

    The polynomial exclusively owns its store; :meth:`close` (or leaving a
    ``with`` block) releases it. Multiplication returns a new polynomial
    holding the raw cross product, and :meth:`simplify` merges like terms
    in place when the caller asks for it.

    Parameters
    ----------
    store : :class:`~extpoly.algorithms.store.TermStore`, optional
        Store to take ownership of. A new empty store is allocated from
        *config* when omitted.
    config : :class:`~extpoly.algorithms.config.EngineConfig`, optional
        Engine settings shared with every polynomial derived from this one.

    Examples
    --------
    >>> with Polynomial.from_string("1 + x^50") as p, Polynomial.from_string("1 + y^100") as q:
    ...     with p * q as r:
    ...         print(r.simplify())
    1.0 + 1.0*y^100 + 1.0*x^50 + 1.0*x^50*y^100
    """

    def __init__(self, store: Optional[TermStore] = None, config: Optional[EngineConfig] = None) -> None:
        self._config: EngineConfig = config or EngineConfig()
        self._store: TermStore = store if store is not None else self._config.create_store()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(store={self._store!r})"

    def __str__(self) -> str:
        return format_terms(self.terms())

    def __len__(self) -> int:
        return engine.count_terms(self._store)

    def __iter__(self) -> Iterator[Term]:
        return self.terms()

    def __mul__(self, other: "Polynomial") -> "Polynomial":
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.multiply(other)

    def __enter__(self) -> "Polynomial":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def store(self) -> TermStore:
        return self._store

    @property
    def config(self) -> EngineConfig:
        return self._config

    @classmethod
    def from_terms(cls, terms: Iterable[Term], config: Optional[EngineConfig] = None) -> "Polynomial":
        """Build a polynomial from ``(key, coefficient)`` pairs, canonicalising keys."""
        poly = cls(config=config)
        try:
            with poly._store.appender() as write:
                for key, coefficient in terms:
                    write(canonical(key), float(coefficient))
        except BaseException:
            poly.close()
            raise
        return poly

    @classmethod
    def from_string(cls, text: str, config: Optional[EngineConfig] = None) -> "Polynomial":
        """Parse a human polynomial string such as ``"1*x^2 + -3*y"``."""
        return cls.from_terms(parse_polynomial(text), config)

    @classmethod
    def mixing(cls, n: int, k: int, variable: str, config: Optional[EngineConfig] = None) -> "Polynomial":
        """Mixing polynomial ``1 + v^k + ... + v^(nk)``."""
        return cls.from_terms(mixing_terms(n, k, variable), config)

    @classmethod
    def from_symengine(cls, expr: se.Basic, config: Optional[EngineConfig] = None) -> "Polynomial":
        return cls.from_terms(symengine_to_terms(expr), config)

    def to_symengine(self) -> se.Basic:
        return terms_to_symengine(self.terms())

    def add_term(self, key: str, coefficient: float) -> None:
        """Append one term; *key* is validated and put in canonical form."""
        self._store.append(canonical(key), float(coefficient))

    def terms(self) -> Iterator[Term]:
        """Scan the terms in storage order."""
        return self._store.scan()

    @timed
    def multiply(self, other: "Polynomial") -> "Polynomial":
        """Return the unsimplified product ``self * other`` as a new polynomial."""
        return Polynomial(engine.multiply(self._store, other._store, self._config), self._config)

    @timed
    def simplify(self) -> "Polynomial":
        """Merge like terms and drop zero coefficients in place."""
        engine.simplify(self._store, self._config)
        return self

    def ordered_by_degree(self) -> List[Term]:
        return engine.ordered_by_degree(self._store)

    def print_ordered_by_degree(self, level: int = logging.DEBUG) -> None:
        engine.log_ordered_by_degree(self._store, level)

    @timed
    def save_ordered_by_degree(self, file_path: Union[str, Path]) -> Path:
        return engine.save_ordered_by_degree(self._store, file_path)

    def close(self) -> None:
        self._store.close()
