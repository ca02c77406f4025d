"""
extpoly.algorithms.store
========================

Append-only term stores.

A term store is the ordered sequence of ``(key, coefficient)`` terms that
represents one polynomial. Two backings share the :class:`TermStore`
interface:

* :class:`FileTermStore` keeps one ``key=coefficient`` line per term in a
  file, so a product far larger than memory can be built and re-read;
* :class:`MemoryTermStore` keeps the terms in a list, for small inputs and
  tests.

The multiplication algorithm only relies on :meth:`TermStore.scan`,
:meth:`TermStore.appender` and :meth:`TermStore.size`, and does not care which
backing it is given.
"""

from __future__ import annotations

import os
import tempfile
import weakref
from abc import ABC, abstractmethod
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Literal, Optional, Union

from extpoly.algorithms.notation import Term, format_line, parse_line
from extpoly.config import (DELETE_ON_EXIT, STORE_BACKEND, TEMP_DIR,
                            TEMP_PREFIX, TEMP_SUFFIX)
from extpoly.utils.exceptions import IOFailure
from extpoly.utils.log_config import logger

Appender = Callable[[str, float], None]


class TermStore(ABC):
    """Abstract append-only sequence of terms.

    Scans are independent: every call to :meth:`scan` starts a new traversal
    from the first term, and several traversals may be open at the same time.
    """

    def __init__(self) -> None:
        self._closed = False

    @abstractmethod
    def append(self, key: str, coefficient: float) -> None:
        """Append one term. It is visible to every scan started afterwards."""
        ...

    @abstractmethod
    def appender(self):
        """Context manager yielding a callable ``write(key, coefficient)``.

        The underlying handle is held for the duration of the ``with`` block
        and released on every exit path. Use it for bulk appends.
        """
        ...

    @abstractmethod
    def scan(self) -> Iterator[Term]:
        """Lazily yield the terms in append order."""
        ...

    @abstractmethod
    def size(self) -> int:
        """Current size of the store, safe to query while a write runs."""
        ...

    @abstractmethod
    def rewrite(self, terms: Iterable[Term]) -> None:
        """Replace the whole content of the store with *terms*."""
        ...

    @abstractmethod
    def _release(self) -> None:
        ...

    def count(self) -> int:
        """Number of terms in the store."""
        return sum(1 for _ in self.scan())

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the backing storage. Calling it twice is harmless."""
        if not self._closed:
            self._closed = True
            self._release()

    def _check_open(self) -> None:
        if self._closed:
            raise IOFailure(f"{self!r} is closed")

    def __iter__(self) -> Iterator[Term]:
        return self.scan()

    def __enter__(self) -> "TermStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@contextmanager
def _io_guard(action: str, path: Path):
    """Translate :class:`OSError` raised inside the block into :class:`IOFailure`."""
    try:
        yield
    except OSError as exc:
        raise IOFailure(f"Failed to {action} term file {path}: {exc}") from exc


def _discard(path: str) -> None:
    with suppress(FileNotFoundError):
        os.remove(path)


class FileTermStore(TermStore):
    """Term store backed by a sequential text file.

    Parameters
    ----------
    path : str or Path, optional
        Existing (or to be created) term file to wrap. When omitted a fresh
        temporary file is created.
    temp_dir : str, optional
        Directory for the temporary file. Defaults to ``TEMP_DIR`` from
        config.
    delete : bool, optional
        Remove the file when the store is closed, garbage collected, or at
        interpreter exit at the latest. Defaults to ``DELETE_ON_EXIT`` for
        temporary files and to ``False`` for wrapped files.
    """

    def __init__(self, path: Union[str, Path, None] = None, *, temp_dir: Optional[str] = TEMP_DIR,
                 delete: Optional[bool] = None) -> None:
        super().__init__()
        if path is None:
            with _io_guard("create", Path(temp_dir or tempfile.gettempdir())):
                fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=temp_dir)
                os.close(fd)
            self._path = Path(name)
            if delete is None:
                delete = DELETE_ON_EXIT
            logger.debug("Temporary file created: %s", self._path)
        else:
            self._path = Path(path)
            with _io_guard("open", self._path):
                self._path.touch(exist_ok=True)
            if delete is None:
                delete = False

        self._finalizer = weakref.finalize(self, _discard, str(self._path)) if delete else None
        if delete:
            logger.debug("The file %s will be deleted when the store is released.", self._path)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path='{self._path}')"

    @property
    def path(self) -> Path:
        return self._path

    def append(self, key: str, coefficient: float) -> None:
        with self.appender() as write:
            write(key, coefficient)

    @contextmanager
    def appender(self) -> Iterator[Appender]:
        self._check_open()
        with _io_guard("append to", self._path), open(self._path, "a", encoding="utf-8") as fh:
            def write(key: str, coefficient: float) -> None:
                fh.write(format_line(key, coefficient))
                fh.write("\n")

            yield write

    def scan(self) -> Iterator[Term]:
        self._check_open()
        return self._scan()

    def _scan(self) -> Iterator[Term]:
        with _io_guard("read", self._path), open(self._path, "r", encoding="utf-8") as fh:
            for line in fh:
                yield parse_line(line)

    def size(self) -> int:
        """Size of the term file in bytes."""
        with _io_guard("stat", self._path):
            return os.path.getsize(self._path)

    def rewrite(self, terms: Iterable[Term]) -> None:
        self._check_open()
        with _io_guard("rewrite", self._path):
            fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    for key, coefficient in terms:
                        fh.write(format_line(key, coefficient))
                        fh.write("\n")
                os.replace(tmp_name, self._path)
            except BaseException:
                _discard(tmp_name)
                raise

    def _release(self) -> None:
        if self._finalizer is not None:
            self._finalizer()
            logger.debug("Temporary file removed: %s", self._path)


class MemoryTermStore(TermStore):
    """Term store backed by a Python list.

    :meth:`size` reports the number of terms.
    """

    def __init__(self, terms: Iterable[Term] = ()) -> None:
        super().__init__()
        self._terms = [(key, float(coefficient)) for key, coefficient in terms]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(terms={len(self._terms)})"

    def append(self, key: str, coefficient: float) -> None:
        self._check_open()
        self._terms.append((key, float(coefficient)))

    @contextmanager
    def appender(self) -> Iterator[Appender]:
        self._check_open()
        yield self.append

    def scan(self) -> Iterator[Term]:
        self._check_open()
        # The list and its length are fixed when the scan is created.
        return self._scan(self._terms, len(self._terms))

    @staticmethod
    def _scan(terms: List[Term], length: int) -> Iterator[Term]:
        for index in range(length):
            yield terms[index]

    def size(self) -> int:
        return len(self._terms)

    def count(self) -> int:
        self._check_open()
        return len(self._terms)

    def rewrite(self, terms: Iterable[Term]) -> None:
        self._check_open()
        self._terms = [(key, float(coefficient)) for key, coefficient in terms]

    def _release(self) -> None:
        self._terms = []


def new_store(backend: Literal["file", "memory"] = STORE_BACKEND, temp_dir: Optional[str] = TEMP_DIR) -> TermStore:
    """Create an empty, independently owned term store."""
    if backend == "file":
        return FileTermStore(temp_dir=temp_dir)
    if backend == "memory":
        return MemoryTermStore()
    raise ValueError(f"Unknown store backend: {backend!r}. Must be 'file' or 'memory'.")
