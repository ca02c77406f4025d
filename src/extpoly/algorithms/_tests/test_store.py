import gc
import os

import pytest

from extpoly.algorithms.store import (FileTermStore, MemoryTermStore,
                                      new_store)
from extpoly.utils.exceptions import IOFailure, MalformedKey, MalformedTerm

TERMS = [("x^2", 3.0), ("y", 2.0), ("", 5.0), ("x^2", -1.0)]


@pytest.fixture(params=["file", "memory"])
def store(request, tmp_path):
    if request.param == "file":
        s = FileTermStore(temp_dir=str(tmp_path))
    else:
        s = MemoryTermStore()
    yield s
    s.close()


def _fill(store, terms=TERMS):
    for key, coefficient in terms:
        store.append(key, coefficient)


def test_scan_preserves_append_order(store):
    _fill(store)
    assert list(store.scan()) == TERMS
    assert store.count() == len(TERMS)


def test_scan_is_restartable(store):
    _fill(store)
    first = store.scan()
    next(first)
    # A partially consumed scan does not affect a new one.
    assert list(store.scan()) == TERMS
    assert list(first) == TERMS[1:]


def test_concurrent_scans_are_independent(store):
    _fill(store)
    a = store.scan()
    b = store.scan()
    assert next(a) == TERMS[0]
    assert next(a) == TERMS[1]
    assert next(b) == TERMS[0]
    assert list(a) == TERMS[2:]
    assert list(b) == TERMS[1:]


def test_append_visible_to_later_scans(store):
    store.append("x", 1.0)
    assert list(store.scan()) == [("x", 1.0)]
    store.append("y", 2.0)
    assert list(store.scan()) == [("x", 1.0), ("y", 2.0)]


def test_appender_bulk_write(store):
    with store.appender() as write:
        for key, coefficient in TERMS:
            write(key, coefficient)
    assert list(store.scan()) == TERMS


def test_rewrite_replaces_content(store):
    _fill(store)
    store.rewrite([("z", 7.0)])
    assert list(store.scan()) == [("z", 7.0)]


def test_empty_store(store):
    assert list(store.scan()) == []
    assert store.count() == 0


def test_closed_store_rejects_access(store):
    store.close()
    assert store.closed
    with pytest.raises(IOFailure):
        store.append("x", 1.0)
    with pytest.raises(IOFailure):
        store.scan()
    store.close()


def test_memory_size_counts_terms():
    store = MemoryTermStore(TERMS)
    assert store.size() == len(TERMS)


def test_file_size_in_bytes(tmp_path):
    with FileTermStore(temp_dir=str(tmp_path)) as store:
        assert store.size() == 0
        store.append("x", 1.0)
        assert store.size() == len("x=1.0\n")


def test_file_store_persists_lines(tmp_path):
    with FileTermStore(temp_dir=str(tmp_path)) as store:
        _fill(store)
        with open(store.path, encoding="utf-8") as fh:
            assert fh.read() == "x^2=3.0\ny=2.0\n=5.0\nx^2=-1.0\n"


def test_temporary_file_removed_on_close(tmp_path):
    store = FileTermStore(temp_dir=str(tmp_path))
    path = store.path
    assert path.exists()
    store.close()
    assert not path.exists()


def test_temporary_file_removed_on_garbage_collection(tmp_path):
    store = FileTermStore(temp_dir=str(tmp_path))
    path = store.path
    del store
    gc.collect()
    assert not path.exists()


def test_wrapped_file_is_kept(tmp_path):
    path = tmp_path / "terms.txt"
    path.write_text("x=1.0\n", encoding="utf-8")
    store = FileTermStore(path)
    assert list(store.scan()) == [("x", 1.0)]
    store.close()
    assert path.exists()


def test_malformed_line_raises(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("x=1.0\nnot a term\n", encoding="utf-8")
    with FileTermStore(path) as store:
        scan = store.scan()
        assert next(scan) == ("x", 1.0)
        with pytest.raises(MalformedTerm):
            next(scan)


def test_missing_file_raises_io_failure(tmp_path):
    store = FileTermStore(temp_dir=str(tmp_path))
    os.remove(store.path)
    with pytest.raises(IOFailure):
        list(store.scan())
    with pytest.raises(IOFailure):
        store.size()
    store.close()


def test_unwritable_directory_raises_io_failure(tmp_path):
    with pytest.raises(IOFailure):
        FileTermStore(temp_dir=str(tmp_path / "does" / "not" / "exist"))


def test_new_store_backends(tmp_path):
    with new_store("file", str(tmp_path)) as s:
        assert isinstance(s, FileTermStore)
    with new_store("memory") as s:
        assert isinstance(s, MemoryTermStore)
    with pytest.raises(ValueError):
        new_store("tape")


def test_memory_scan_fixed_at_creation():
    store = MemoryTermStore([("x", 1.0)])
    scan = store.scan()
    store.append("y", 2.0)
    assert list(scan) == [("x", 1.0)]
    assert list(store.scan()) == [("x", 1.0), ("y", 2.0)]


def test_wrapped_file_with_non_canonical_key(tmp_path):
    path = tmp_path / "terms.txt"
    path.write_text("x*y=2.0\ny*x=1.0\n", encoding="utf-8")
    with FileTermStore(path) as store:
        with pytest.raises(MalformedKey):
            list(store.scan())
