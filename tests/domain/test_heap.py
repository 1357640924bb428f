# tests/domain/test_heap.py
import numpy as np
import pytest

from osm_route.domain.heap import MinHeap


def test_extracts_in_priority_order():
    rng = np.random.default_rng(7)
    prios = rng.random(200).tolist()
    h: MinHeap[int] = MinHeap()
    for i, p in enumerate(prios):
        h.insert(i, p)
    assert len(h) == 200

    out = []
    while not h.is_empty():
        _, p = h.extract_min()
        out.append(p)
    assert out == sorted(prios)


def test_equal_priorities_are_fifo():
    h = MinHeap()
    for name in ("a", "b", "c"):
        h.insert(name, 1.0)
    h.insert("z", 0.0)
    assert [h.extract_min()[0] for _ in range(4)] == ["z", "a", "b", "c"]


def test_duplicate_elements_are_kept():
    # lazy deletion relies on the same element appearing more than once
    h = MinHeap()
    h.insert("n", 5.0)
    h.insert("n", 2.0)
    assert h.extract_min() == ("n", 2.0)
    assert h.extract_min() == ("n", 5.0)
    assert h.is_empty()


def test_extract_from_empty_raises():
    with pytest.raises(IndexError):
        MinHeap().extract_min()
