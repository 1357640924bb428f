# osm_route/io/events.py

from dataclasses import dataclass


# Base type for analytics events emitted by the map session
@dataclass
class RouterEvent:
    run_id: str
    name: str  # stable event name


@dataclass
class MapLoaded(RouterEvent):
    nodes: int
    ways: int
    graph_nodes: int
    graph_edges: int
    nodes_scanned: int
    ways_scanned: int


@dataclass
class RouteComputed(RouterEvent):
    start: int
    end: int
    distance_km: float
    hops: int
    iterations: int
    animated: bool = False


@dataclass
class RouteNotFound(RouterEvent):
    start: int
    end: int
    iterations: int
