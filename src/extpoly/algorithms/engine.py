"""
extpoly.algorithms.engine
=========================

Cross products, simplification and degree ordering over term stores.

The multiplication keeps at most a couple of terms in memory: it walks the
left operand once and re-opens a full scan of the right operand for every
left term, writing each product term straight to the result store. The
result is the raw cross product; duplicated monomials are only merged by an
explicit call to :func:`simplify`.
"""

from __future__ import annotations

import logging
from contextlib import closing
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import numpy as np

from extpoly.algorithms.config import EngineConfig
from extpoly.algorithms.monomial import combine, degree
from extpoly.algorithms.notation import Term, format_line
from extpoly.algorithms.progress import ProgressMonitor
from extpoly.algorithms.store import TermStore
from extpoly.utils.exceptions import IOFailure
from extpoly.utils.log_config import logger
from extpoly.utils.precision import high_precision_accumulate

_DEFAULT_CONFIG = EngineConfig()


def multiply(a: TermStore, b: TermStore, config: Optional[EngineConfig] = None) -> TermStore:
    """
    Compute the unsimplified cross product of two term stores.

    Parameters
    ----------
    a, b : :class:`~extpoly.algorithms.store.TermStore`
        Operands. Both are only read; ``a`` is scanned once and ``b`` once
        per term of ``a``.
    config : :class:`~extpoly.algorithms.config.EngineConfig`, optional
        Backing of the result and progress reporting settings.

    Returns
    -------
    :class:`~extpoly.algorithms.store.TermStore`
        Fresh store holding exactly ``len(a) * len(b)`` terms, in the order
        outer ``a`` / inner ``b``. Duplicate keys and zero coefficients are
        kept.

    Raises
    ------
    IOFailure
        If reading an operand or writing the result fails.
    MalformedTerm
        If an operand holds an unreadable term.

    Notes
    -----
    On failure the partially written result store is closed and discarded
    before the exception propagates. The progress monitor is stopped on
    every exit path.
    """
    config = config or _DEFAULT_CONFIG
    result = config.create_store()
    monitor = None
    if config.monitor:
        monitor = ProgressMonitor(result, config.progress_interval, config.progress_sink)
    try:
        try:
            if monitor is not None:
                monitor.start()
            written = _cross_product(a, b, result)
        finally:
            if monitor is not None:
                monitor.stop()
    except BaseException:
        result.close()
        raise

    logger.debug("Cross product finished: %d terms, final store size %d", written, result.size())
    return result


def _cross_product(a: TermStore, b: TermStore, result: TermStore) -> int:
    written = 0
    trace = logger.isEnabledFor(logging.DEBUG)
    with result.appender() as write, closing(a.scan()) as outer:
        for key1, coefficient1 in outer:
            if trace:
                logger.debug("outer term: %s", format_line(key1, coefficient1))
            # Rewind b: a new, independent scan for every term of a.
            with closing(b.scan()) as inner:
                for key2, coefficient2 in inner:
                    write(combine(key1, key2), coefficient1 * coefficient2)
                    written += 1
    return written


def _is_void(coefficient: float, zero_tol: float) -> bool:
    if zero_tol == 0.0:
        return coefficient == 0.0
    return abs(coefficient) <= zero_tol


def collect(terms: Iterable[Term], config: Optional[EngineConfig] = None) -> Dict[str, float]:
    """Sum coefficients per key, in first-appearance order of the keys."""
    config = config or _DEFAULT_CONFIG
    if config.use_arbitrary_precision:
        return high_precision_accumulate(terms, config.mpmath_dps)
    sums: Dict[str, float] = {}
    for key, coefficient in terms:
        sums[key] = sums.get(key, 0.0) + coefficient
    return sums


def simplify(store: TermStore, config: Optional[EngineConfig] = None) -> int:
    """
    Merge like terms of *store* in place and drop zero coefficients.

    Parameters
    ----------
    store : :class:`~extpoly.algorithms.store.TermStore`
        Store to rewrite.
    config : :class:`~extpoly.algorithms.config.EngineConfig`, optional
        ``zero_tol`` and the arbitrary precision switches are honoured. The
        defaults keep the exact ``sum == 0.0`` test, so a cancellation that
        leaves rounding noise behind is kept as a term.

    Returns
    -------
    int
        Number of terms left in the store.

    Notes
    -----
    After simplification the terms follow the first appearance of each key
    in the previous content. Callers must not rely on that order; use
    :func:`ordered_by_degree` when an order is needed.
    """
    config = config or _DEFAULT_CONFIG
    with closing(store.scan()) as terms:
        sums = collect(terms, config)
    kept = [(key, value) for key, value in sums.items() if not _is_void(value, config.zero_tol)]
    store.rewrite(kept)
    logger.debug("Simplified %d distinct monomials to %d terms", len(sums), len(kept))
    return len(kept)


def ordered_by_degree(store: TermStore) -> List[Term]:
    """
    Return the terms of *store* sorted by ascending total degree.

    The sort is stable: terms of equal degree keep the order in which they
    were read from the store. No secondary key is applied, so consumers that
    need a fully deterministic order among equal degrees must add their own.
    """
    with closing(store.scan()) as scan:
        terms = list(scan)
    degrees = np.fromiter((degree(key) for key, _ in terms), dtype=np.int64, count=len(terms))
    order = np.argsort(degrees, kind="stable")
    return [terms[i] for i in order]


def log_ordered_by_degree(store: TermStore, level: int = logging.DEBUG) -> None:
    """Log every term as ``key = coefficient`` in ascending degree order."""
    for key, coefficient in ordered_by_degree(store):
        logger.log(level, "%s = %r", key, coefficient)


def save_ordered_by_degree(store: TermStore, file_path: Union[str, Path]) -> Path:
    """
    Write the terms of *store* to *file_path* in ascending degree order.

    Parameters
    ----------
    store : :class:`~extpoly.algorithms.store.TermStore`
        Source store.
    file_path : str or Path
        Output file, overwritten. One ``key=coefficient`` line per term.

    Returns
    -------
    Path
        The path written.
    """
    path = Path(file_path)
    terms = ordered_by_degree(store)
    try:
        with open(path, "w", encoding="utf-8") as fh:
            for key, coefficient in terms:
                fh.write(format_line(key, coefficient))
                fh.write("\n")
    except OSError as exc:
        raise IOFailure(f"Failed to save ordered polynomial to {path}: {exc}") from exc
    logger.debug("Saved %d terms ordered by degree to %s", len(terms), path)
    return path


def count_terms(store: TermStore) -> int:
    """Number of terms currently held by *store*."""
    return store.count()
