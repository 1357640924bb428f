# domain/heap.py
import heapq
from typing import Generic, TypeVar

T = TypeVar("T")


class MinHeap(Generic[T]):
    """
    Binary min-heap of (element, priority) pairs.

    No decrease-key: callers insert a fresh entry and skip stale pops.
    Equal priorities come out in insertion order.
    """

    def __init__(self):
        self._q: list[tuple[float, int, T]] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._q)

    def is_empty(self) -> bool:
        return not self._q

    def insert(self, element: T, priority: float) -> None:
        self._seq += 1
        heapq.heappush(self._q, (priority, self._seq, element))

    def extract_min(self) -> tuple[T, float]:
        if not self._q:
            raise IndexError("extract_min from an empty heap")
        priority, _, element = heapq.heappop(self._q)
        return element, priority
