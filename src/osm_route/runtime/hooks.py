# runtime/hooks.py
from typing import Protocol


class IngestHooks(Protocol):
    def ingest_start(self, *, source): ...
    def ways_scanned(self, *, scanned, retained, referenced, done): ...
    def nodes_scanned(self, *, scanned, stored, done): ...
    def record_skipped(self, *, reason: str, record): ...
    def ingest_end(self, *, nodes, ways, nodes_scanned, ways_scanned, skipped, wall_ms): ...


class GraphHooks(Protocol):
    def graph_progress(self, *, ways_done, ways_total): ...
    def graph_built(self, *, nodes, edges, wall_ms): ...


class SearchHooks(Protocol):
    def destination_found(self, *, node, iteration, distance): ...
    def search_end(self, *, start, end, found, iterations, distance, wall_ms, **kw): ...


class SessionHooks(IngestHooks, GraphHooks, SearchHooks, Protocol):
    def event(self, ev): ...


class NoopHooks:
    def ingest_start(self, **_):
        pass

    def ways_scanned(self, **_):
        pass

    def nodes_scanned(self, **_):
        pass

    def record_skipped(self, **_):
        pass

    def ingest_end(self, **_):
        pass

    def graph_progress(self, **_):
        pass

    def graph_built(self, **_):
        pass

    def destination_found(self, **_):
        pass

    def search_end(self, **_):
        pass

    def event(self, *_):
        pass
