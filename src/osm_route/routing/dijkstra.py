# routing/dijkstra.py
import math
import time

from osm_route.config.models import TraceModel
from osm_route.domain.entities.graph import Graph
from osm_route.domain.entities.records import NodeId
from osm_route.domain.entities.search import SearchResult
from osm_route.domain.heap import MinHeap
from osm_route.routing.trace import SearchTrace
from osm_route.runtime.hooks import NoopHooks, SearchHooks


def find_path(
    graph: Graph,
    start: NodeId,
    end: NodeId,
    instrumented: bool = False,
    *,
    trace_cfg: TraceModel | None = None,
    hooks: SearchHooks | None = None,
) -> SearchResult:
    """
    Single-source, single-target Dijkstra with a lazy-deletion heap.

    Unknown endpoints, an empty graph or a disconnected target all give a
    result with ``path=None``; none of them raise.

    A plain search stops as soon as the target is finalized. An instrumented
    one keeps popping until ``trace_cfg.exploration_budget`` more iterations
    have passed, so the trace shows exploration around the route. The path
    and distance are fixed at the target's first finalization either way.
    """
    hooks = hooks or NoopHooks()
    cfg = trace_cfg or TraceModel()
    trace = SearchTrace(cfg) if instrumented else None
    t0 = time.perf_counter()

    if start not in graph or end not in graph:
        result = _result(None, math.inf, 0, trace)
        hooks.search_end(
            start=start,
            end=end,
            found=False,
            iterations=0,
            distance=math.inf,
            wall_ms=0.0,
            reason="unknown_node",
        )
        return result

    dist: dict[NodeId, float] = dict.fromkeys(graph, math.inf)
    prev: dict[NodeId, NodeId] = {}
    visited: set[NodeId] = set()
    dist[start] = 0.0

    heap: MinHeap[NodeId] = MinHeap()
    heap.insert(start, 0.0)

    iterations = 0
    found_at: int | None = None
    budget = cfg.exploration_budget

    while not heap.is_empty():
        current, _ = heap.extract_min()
        iterations += 1
        if current in visited:
            continue  # stale entry
        visited.add(current)
        edges = graph.neighbors(current)
        d_cur = dist[current]

        if trace is not None:
            trace.explore(current, d_cur, iterations, edges)

        if current == end and found_at is None:
            found_at = iterations
            hooks.destination_found(node=end, iteration=iterations, distance=d_cur)
        if found_at is not None and (trace is None or iterations > found_at + budget):
            break

        for edge in edges:
            alt = d_cur + edge.weight
            if alt < dist.get(edge.to, math.inf):
                dist[edge.to] = alt
                prev[edge.to] = current
                heap.insert(edge.to, alt)
                if trace is not None:
                    trace.relax(current, edge.to, alt, iterations)

    path = _reconstruct(prev, end) if dist[end] != math.inf else None
    if path is not None and len(path) <= 1:
        path = None

    hooks.search_end(
        start=start,
        end=end,
        found=path is not None,
        iterations=iterations,
        distance=dist[end],
        wall_ms=(time.perf_counter() - t0) * 1000,
        found_at=found_at,
    )
    return _result(path, dist[end], iterations, trace)


def _reconstruct(prev: dict[NodeId, NodeId], end: NodeId) -> tuple[NodeId, ...]:
    path = [end]
    node = end
    while node in prev:
        node = prev[node]
        path.append(node)
    path.reverse()
    return tuple(path)


def _result(path, distance: float, iterations: int, trace: SearchTrace | None) -> SearchResult:
    if trace is None:
        return SearchResult(path=path, distance=distance, iterations=iterations)
    return SearchResult(
        path=path,
        distance=distance,
        iterations=iterations,
        explored=trace.explored,
        relaxations=trace.relaxations,
        frontier=trace.frontier,
    )
