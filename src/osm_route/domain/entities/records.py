from collections.abc import Mapping
from dataclasses import dataclass, field

# Node ids are plain Python ints: arbitrary precision, so 64-bit OSM ids are safe.
NodeId = int


@dataclass(frozen=True)
class NodeRecord:
    id: NodeId
    lat: float | None = None  # degrees
    lon: float | None = None

    @property
    def has_coords(self) -> bool:
        return self.lat is not None and self.lon is not None


@dataclass(frozen=True)
class WayRecord:
    id: int
    refs: tuple[NodeId, ...]  # ordered polyline vertices


Record = NodeRecord | WayRecord


@dataclass
class Dataset:
    """Minimal node/way data left after filtering."""

    nodes: dict[NodeId, NodeRecord] = field(default_factory=dict)
    ways: list[WayRecord] = field(default_factory=list)
    nodes_scanned: int = 0
    ways_scanned: int = 0
    skipped: dict[str, int] = field(default_factory=dict)


def _opt_float(v) -> float | None:
    return None if v is None else float(v)


def coerce_record(item) -> Record | None:
    """
    Normalize one source item into a NodeRecord/WayRecord.

    Accepts record instances as-is, or mappings tagged with ``type`` ("node" or
    "way") as produced by stream decoders. Returns None for anything malformed.
    """
    if isinstance(item, (NodeRecord, WayRecord)):
        return item
    if not isinstance(item, Mapping):
        return None
    try:
        kind = item["type"]
        if kind == "node":
            return NodeRecord(
                id=int(item["id"]),
                lat=_opt_float(item.get("lat")),
                lon=_opt_float(item.get("lon")),
            )
        if kind == "way":
            return WayRecord(id=int(item["id"]), refs=tuple(int(r) for r in item["refs"]))
    except (KeyError, TypeError, ValueError):
        return None
    return None
