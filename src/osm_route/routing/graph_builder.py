import time
from collections.abc import Mapping, Sequence
from itertools import pairwise

from osm_route.domain.entities.graph import Edge, Graph
from osm_route.domain.entities.records import NodeId, NodeRecord, WayRecord
from osm_route.domain.geo import haversine_km
from osm_route.runtime.hooks import GraphHooks, NoopHooks


def build_graph(
    nodes: Mapping[NodeId, NodeRecord],
    ways: Sequence[WayRecord],
    *,
    hooks: GraphHooks | None = None,
    progress_every: int = 10_000,
) -> Graph:
    """
    Turn the filtered dataset into an undirected graph weighted in km.

    Each consecutive ref pair of a way becomes a->b and b->a. A pair whose
    endpoint has no coordinates is dropped on both sides.
    """
    hooks = hooks or NoopHooks()
    progress_every = max(1, progress_every)
    t0 = time.perf_counter()
    adj: dict[NodeId, list[Edge]] = {}
    edges = 0

    for idx, way in enumerate(ways):
        if idx and idx % progress_every == 0:
            hooks.graph_progress(ways_done=idx, ways_total=len(ways))
        for a, b in pairwise(way.refs):
            na, nb = nodes.get(a), nodes.get(b)
            if na is None or nb is None or not (na.has_coords and nb.has_coords):
                continue
            d = haversine_km(na.lat, na.lon, nb.lat, nb.lon)
            adj.setdefault(a, []).append(Edge(b, d))
            adj.setdefault(b, []).append(Edge(a, d))
            edges += 2

    hooks.graph_built(nodes=len(adj), edges=edges, wall_ms=(time.perf_counter() - t0) * 1000)
    return Graph(adj)
