from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from osm_route.domain.entities.records import NodeId


@dataclass(frozen=True)
class Edge:
    to: NodeId
    weight: float  # km, >= 0


class Graph:
    """
    Undirected weighted road graph stored as an adjacency mapping.

    Built wholesale by the graph builder and treated as read-only afterwards,
    so concurrent searches may share one instance.
    """

    def __init__(self, adjacency: dict[NodeId, list[Edge]] | None = None):
        self._adj: dict[NodeId, list[Edge]] = adjacency if adjacency is not None else {}

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[NodeId, NodeId, float]]) -> "Graph":
        """Build from (a, b, weight) triples, adding both directions."""
        adj: dict[NodeId, list[Edge]] = {}
        for a, b, w in edges:
            adj.setdefault(a, []).append(Edge(b, float(w)))
            adj.setdefault(b, []).append(Edge(a, float(w)))
        return cls(adj)

    def __contains__(self, node: object) -> bool:
        return node in self._adj

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._adj)

    def __len__(self) -> int:
        return len(self._adj)

    def neighbors(self, node: NodeId) -> Sequence[Edge]:
        return self._adj.get(node, ())

    def degree(self, node: NodeId) -> int:
        return len(self._adj.get(node, ()))

    @property
    def edge_count(self) -> int:
        """Directed edge count (each road segment counts twice)."""
        return sum(len(edges) for edges in self._adj.values())

    def path_length(self, path: Sequence[NodeId]) -> float | None:
        """Sum of the cheapest edge weights along path; None if a hop has no edge."""
        total = 0.0
        for a, b in zip(path[:-1], path[1:]):
            weights = [e.weight for e in self._adj.get(a, ()) if e.to == b]
            if not weights:
                return None
            total += min(weights)
        return total
