# osm_route/app/session.py
import threading
from dataclasses import dataclass

from osm_route.app.protocols import RecordSource
from osm_route.config.models import RouterModel
from osm_route.domain.entities.graph import Edge, Graph
from osm_route.domain.entities.records import Dataset, NodeId, NodeRecord
from osm_route.domain.errors import IngestInProgress, MapNotLoaded, NodeNotFound
from osm_route.domain.geo import Bounds, CoordinateIndex
from osm_route.io.events import MapLoaded, RouteComputed, RouteNotFound
from osm_route.ingest.record_filter import RecordFilter
from osm_route.routing.dijkstra import find_path
from osm_route.routing.graph_builder import build_graph
from osm_route.runtime.hooks import NoopHooks, SessionHooks


@dataclass(frozen=True)
class LoadSummary:
    node_count: int
    way_count: int
    graph_nodes: int
    graph_edges: int
    bounds: Bounds | None


@dataclass(frozen=True)
class MapInfo:
    node_count: int
    way_count: int
    loaded: bool


@dataclass(frozen=True)
class ExploredPoint:
    node: NodeRecord
    distance: float
    iteration: int


@dataclass(frozen=True)
class TraceSegment:
    from_node: NodeRecord
    to_node: NodeRecord
    distance: float
    iteration: int


@dataclass
class RouteResponse:
    found: bool
    path: tuple[NodeId, ...] | None
    path_coords: list[NodeRecord]
    distance: float
    iterations: int
    explored: list[ExploredPoint]
    relaxations: list[TraceSegment]
    frontier: list[TraceSegment]


@dataclass(frozen=True)
class WayCoords:
    id: int
    coords: list[tuple[float, float]]  # (lat, lon)


@dataclass(frozen=True)
class NodeInfo:
    node: NodeRecord
    degree: int
    neighbors: list[Edge]


@dataclass(frozen=True)
class _MapState:
    dataset: Dataset
    graph: Graph
    index: CoordinateIndex


class MapSession:
    """
    Holds the currently published map and answers queries against it.

    Only one load may run at a time; a concurrent load raises IngestInProgress.
    A load publishes its dataset, graph and index together, and only when the
    whole ingest + build succeeded. Queries read whatever state was published
    when they started.
    """

    def __init__(self, cfg: RouterModel | None = None, *, hooks: SessionHooks | None = None):
        self.cfg = cfg or RouterModel()
        self._hooks = hooks or NoopHooks()
        self._ingest_lock = threading.Lock()
        self._state: _MapState | None = None

    # ------------------- Loading -----------------------

    @property
    def loaded(self) -> bool:
        return self._state is not None

    def load(self, source: RecordSource) -> LoadSummary:
        if not self._ingest_lock.acquire(blocking=False):
            raise IngestInProgress("a map load is already running")
        try:
            ing = self.cfg.ingest
            dataset = RecordFilter(
                self._hooks,
                progress_every_ways=ing.progress_every_ways,
                progress_every_nodes=ing.progress_every_nodes,
            ).ingest(source)
            graph = build_graph(
                dataset.nodes, dataset.ways, hooks=self._hooks, progress_every=ing.progress_every_graph
            )
            index = CoordinateIndex.from_nodes(dataset.nodes, routable=graph)
            self._state = _MapState(dataset, graph, index)
        finally:
            self._ingest_lock.release()

        self._hooks.event(
            MapLoaded(
                run_id=self.cfg.run_id,
                name="map_loaded",
                nodes=len(dataset.nodes),
                ways=len(dataset.ways),
                graph_nodes=len(graph),
                graph_edges=graph.edge_count,
                nodes_scanned=dataset.nodes_scanned,
                ways_scanned=dataset.ways_scanned,
            )
        )
        return LoadSummary(
            node_count=len(dataset.nodes),
            way_count=len(dataset.ways),
            graph_nodes=len(graph),
            graph_edges=graph.edge_count,
            bounds=index.bounds(),
        )

    def _require(self) -> _MapState:
        state = self._state
        if state is None:
            raise MapNotLoaded("no map loaded")
        return state

    # ------------------- Routing -----------------------

    def route(self, start: NodeId, end: NodeId, animate: bool = False) -> RouteResponse:
        state = self._require()
        nodes = state.dataset.nodes
        res = find_path(
            state.graph, start, end, animate, trace_cfg=self.cfg.trace, hooks=self._hooks
        )

        if res.path is None:
            self._hooks.event(
                RouteNotFound(
                    run_id=self.cfg.run_id,
                    name="route_not_found",
                    start=start,
                    end=end,
                    iterations=res.iterations,
                )
            )
            return RouteResponse(False, None, [], res.distance, res.iterations, [], [], [])

        lim = self.cfg.session
        explored = [
            ExploredPoint(nodes[e.node], e.distance, e.iteration)
            for e in (res.explored or [])[: lim.explored_limit]
            if e.node in nodes
        ]
        frontier = _segments(res.frontier or [], nodes, limit=lim.frontier_limit)
        relaxations = _segments(res.relaxations or [], nodes)

        self._hooks.event(
            RouteComputed(
                run_id=self.cfg.run_id,
                name="route_computed",
                start=start,
                end=end,
                distance_km=res.distance,
                hops=len(res.path) - 1,
                iterations=res.iterations,
                animated=animate,
            )
        )
        return RouteResponse(
            found=True,
            path=res.path,
            path_coords=[nodes[n] for n in res.path],
            distance=res.distance,
            iterations=res.iterations,
            explored=explored,
            relaxations=relaxations,
            frontier=frontier,
        )

    # ------------------- Inspection --------------------

    def map_info(self) -> MapInfo:
        state = self._state
        if state is None:
            return MapInfo(0, 0, False)
        return MapInfo(
            node_count=len(state.dataset.nodes),
            way_count=len(state.dataset.ways),
            loaded=bool(state.dataset.nodes),
        )

    def bounds(self) -> Bounds | None:
        return self._require().index.bounds()

    def ways(self, limit: int | None = None) -> list[WayCoords]:
        """Ways with their stored vertex coordinates; ways left with < 2 vertices are dropped."""
        state = self._require()
        nodes = state.dataset.nodes
        out = []
        for way in state.dataset.ways[: limit or self.cfg.session.ways_limit]:
            coords = [(nodes[r].lat, nodes[r].lon) for r in way.refs if r in nodes]
            if len(coords) >= 2:
                out.append(WayCoords(way.id, coords))
        return out

    def nodes(self, limit: int | None = None) -> list[NodeRecord]:
        state = self._require()
        n = limit or self.cfg.session.nodes_limit
        return [state.dataset.nodes[i] for i in state.index.ids[:n]]

    def node(self, node_id: NodeId) -> NodeInfo:
        state = self._require()
        rec = state.dataset.nodes.get(node_id)
        if rec is None:
            raise NodeNotFound(node_id)
        edges = state.graph.neighbors(node_id)
        return NodeInfo(rec, len(edges), list(edges[: self.cfg.session.neighbor_limit]))

    def search_nodes(self, box: Bounds, limit: int | None = None) -> list[NodeRecord]:
        state = self._require()
        ids = state.index.within(box, limit or self.cfg.session.search_limit)
        return [state.dataset.nodes[i] for i in ids]

    def nearest_node(self, lat: float, lon: float) -> NodeId | None:
        """Closest node that has at least one edge, or None for an empty graph."""
        return self._require().index.nearest(lat, lon, routable_only=True)


def _segments(items, nodes: dict[NodeId, NodeRecord], limit: int | None = None) -> list[TraceSegment]:
    out = []
    for it in items if limit is None else items[:limit]:
        a, b = nodes.get(it.from_node), nodes.get(it.to_node)
        if a is not None and b is not None:
            out.append(TraceSegment(a, b, it.distance, it.iteration))
    return out
