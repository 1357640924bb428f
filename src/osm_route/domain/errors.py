# osm_route/domain/errors.py


class RouterError(Exception):
    """Base class for everything the router raises on purpose."""


class SourceError(RouterError):
    """The record source failed to produce records (fatal for an ingest run)."""


class StreamNotReplayable(SourceError):
    """The record source cannot be iterated from the beginning a second time."""


class MapNotLoaded(RouterError):
    pass


class IngestInProgress(RouterError):
    pass


class NodeNotFound(RouterError, KeyError):
    def __init__(self, node_id):
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"node {self.node_id!r} not found"
