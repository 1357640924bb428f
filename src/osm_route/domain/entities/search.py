import math
from dataclasses import dataclass

from osm_route.domain.entities.records import NodeId


# Instrumentation trace items (visualization only; never affect the result)
@dataclass(frozen=True)
class ExploredNode:
    node: NodeId
    distance: float
    iteration: int


@dataclass(frozen=True)
class Relaxation:
    from_node: NodeId
    to_node: NodeId
    distance: float
    iteration: int


@dataclass(frozen=True)
class FrontierEdge:
    from_node: NodeId
    to_node: NodeId
    distance: float  # tentative distance through this edge
    iteration: int


@dataclass
class SearchResult:
    path: tuple[NodeId, ...] | None
    distance: float = math.inf  # km
    iterations: int = 0  # heap pops
    explored: list[ExploredNode] | None = None
    relaxations: list[Relaxation] | None = None
    frontier: list[FrontierEdge] | None = None

    @property
    def found(self) -> bool:
        return self.path is not None
