"""Multiplication of sparse multivariate polynomials held in external term stores.

Usage: python -m extpoly --help
"""

from extpoly.algorithms.config import EngineConfig
from extpoly.algorithms.engine import (multiply, ordered_by_degree,
                                       save_ordered_by_degree, simplify)
from extpoly.algorithms.monomial import combine, decode, degree, encode
from extpoly.algorithms.progress import ProgressMonitor
from extpoly.algorithms.store import FileTermStore, MemoryTermStore, TermStore
from extpoly.system.polynomial import Polynomial
from extpoly.utils.exceptions import (ExtPolyError, IOFailure, MalformedKey,
                                      MalformedTerm)

__all__ = [
    "Polynomial",
    "EngineConfig",
    "TermStore",
    "FileTermStore",
    "MemoryTermStore",
    "ProgressMonitor",
    "multiply",
    "simplify",
    "ordered_by_degree",
    "save_ordered_by_degree",
    "combine",
    "decode",
    "encode",
    "degree",
    "ExtPolyError",
    "IOFailure",
    "MalformedKey",
    "MalformedTerm",
]
