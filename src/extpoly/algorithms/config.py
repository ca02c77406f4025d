"""Provide the configuration class for the term engine.

Defaults come from the module level constants in :mod:`extpoly.config`.
"""

from dataclasses import dataclass
from typing import Literal, Optional

from extpoly.algorithms.progress import ProgressSink
from extpoly.algorithms.store import TermStore, new_store
from extpoly.config import (MPMATH_DPS, PROGRESS_INTERVAL, STORE_BACKEND,
                            TEMP_DIR, USE_ARBITRARY_PRECISION, ZERO_TOL)


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for multiply and simplify.

    Parameters
    ----------
    backend : {'file', 'memory'}, default=STORE_BACKEND
        Backing of the stores allocated by the engine:

        - 'file': temporary term files, bounded memory
        - 'memory': Python lists, for small inputs

    temp_dir : str or None, default=TEMP_DIR
        Directory for temporary term files. None uses the platform default.
    monitor : bool, default=True
        Attach a :class:`~extpoly.algorithms.progress.ProgressMonitor` to the
        result store while multiplying.
    progress_interval : float, default=PROGRESS_INTERVAL
        Seconds between two progress reports.
    progress_sink : callable or None, default=None
        Receiver of ``(timestamp, size)`` reports. None logs them at debug
        level.
    zero_tol : float, default=ZERO_TOL
        Simplification drops a summed coefficient ``c`` when ``c == 0`` if
        this is 0.0, or when ``abs(c) <= zero_tol`` otherwise.
    use_arbitrary_precision : bool, default=USE_ARBITRARY_PRECISION
        Accumulate coefficient sums with mpmath during simplification.
    mpmath_dps : int, default=MPMATH_DPS
        Decimal places used when ``use_arbitrary_precision`` is set.
    """
    backend: Literal["file", "memory"] = STORE_BACKEND
    temp_dir: Optional[str] = TEMP_DIR
    monitor: bool = True
    progress_interval: float = PROGRESS_INTERVAL
    progress_sink: Optional[ProgressSink] = None
    zero_tol: float = ZERO_TOL
    use_arbitrary_precision: bool = USE_ARBITRARY_PRECISION
    mpmath_dps: int = MPMATH_DPS

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Validate the configuration."""
        if self.backend not in ["file", "memory"]:
            raise ValueError(
                f"Invalid backend: {self.backend}. "
                "Must be 'file' or 'memory'."
            )
        if self.progress_interval <= 0:
            raise ValueError(f"progress_interval must be positive, got {self.progress_interval}")
        if self.zero_tol < 0:
            raise ValueError(f"zero_tol must be non-negative, got {self.zero_tol}")
        if self.mpmath_dps < 1:
            raise ValueError(f"mpmath_dps must be at least 1, got {self.mpmath_dps}")

    def create_store(self) -> TermStore:
        """Allocate an empty store with the configured backing."""
        return new_store(self.backend, self.temp_dir)
