from collections.abc import Sequence

from osm_route.config.models import TraceModel
from osm_route.domain.entities.graph import Edge
from osm_route.domain.entities.records import NodeId
from osm_route.domain.entities.search import ExploredNode, FrontierEdge, Relaxation


class SearchTrace:
    """
    Bounded record of a search for animation.

    Frontier snapshots sample a node's edges at a rate that grows with its
    degree once the dense threshold is reached; nothing is added past the cap.
    Sampling depends only on degree, edge order and counts, so a repeated
    query yields the same trace.
    """

    def __init__(self, cfg: TraceModel | None = None):
        self.cfg = cfg or TraceModel()
        self.explored: list[ExploredNode] = []
        self.relaxations: list[Relaxation] = []
        self.frontier: list[FrontierEdge] = []

    def explore(self, node: NodeId, distance: float, iteration: int, edges: Sequence[Edge]) -> None:
        if len(self.explored) < self.cfg.max_trace_events:
            self.explored.append(ExploredNode(node, distance, iteration))
        self._snapshot(node, distance, iteration, edges)

    def relax(self, from_node: NodeId, to_node: NodeId, distance: float, iteration: int) -> None:
        if len(self.relaxations) < self.cfg.max_trace_events:
            self.relaxations.append(Relaxation(from_node, to_node, distance, iteration))

    def _snapshot(self, node: NodeId, distance: float, iteration: int, edges: Sequence[Edge]) -> None:
        cap = self.cfg.max_trace_edges
        if not edges or len(self.frontier) >= cap:
            return
        rate = max(1, len(edges) // self.cfg.degree_divisor)
        for i, edge in enumerate(edges):
            if len(self.frontier) >= cap:
                break
            if i % rate == 0 or len(self.frontier) < self.cfg.dense_edge_threshold:
                self.frontier.append(FrontierEdge(node, edge.to, distance + edge.weight, iteration))
