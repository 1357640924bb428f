import math
from collections.abc import Container, Mapping
from dataclasses import dataclass

import numpy as np

from osm_route.domain.entities.records import NodeId, NodeRecord

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres between two lat/lon pairs."""
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dp = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    # clamp: rounding can push a past 1.0 for near-antipodal points
    a = min(1.0, math.sin(dp / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_km_np(lat: float, lon: float, lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    """Vectorized haversine from one point to many."""
    p1, p2 = np.radians(lat), np.radians(lats)
    dp = p2 - p1
    dl = np.radians(lons - lon)
    a = np.minimum(1.0, np.sin(dp / 2) ** 2 + np.cos(p1) * np.cos(p2) * np.sin(dl / 2) ** 2)
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


@dataclass(frozen=True)
class Bounds:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def center_lat(self) -> float:
        return (self.min_lat + self.max_lat) / 2

    @property
    def center_lon(self) -> float:
        return (self.min_lon + self.max_lon) / 2

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


class CoordinateIndex:
    """
    Column arrays over the stored nodes, for bounds, box and nearest-node queries.
    Ids stay a Python list (no int64 truncation); coordinates go to numpy.
    """

    def __init__(self, ids: list[NodeId], lats: np.ndarray, lons: np.ndarray, routable: np.ndarray):
        self.ids, self.lats, self.lons, self.routable = ids, lats, lons, routable

    @classmethod
    def from_nodes(
        cls, nodes: Mapping[NodeId, NodeRecord], routable: Container[NodeId] = ()
    ) -> "CoordinateIndex":
        n = len(nodes)
        ids = list(nodes)
        lats = np.fromiter((nodes[i].lat for i in ids), dtype=float, count=n)
        lons = np.fromiter((nodes[i].lon for i in ids), dtype=float, count=n)
        mask = np.fromiter((i in routable for i in ids), dtype=bool, count=n)
        return cls(ids, lats, lons, mask)

    def __len__(self) -> int:
        return len(self.ids)

    def bounds(self) -> Bounds | None:
        if not self.ids:
            return None
        return Bounds(
            min_lat=float(self.lats.min()),
            max_lat=float(self.lats.max()),
            min_lon=float(self.lons.min()),
            max_lon=float(self.lons.max()),
        )

    def within(self, box: Bounds, limit: int | None = None) -> list[NodeId]:
        mask = (
            (self.lats >= box.min_lat)
            & (self.lats <= box.max_lat)
            & (self.lons >= box.min_lon)
            & (self.lons <= box.max_lon)
        )
        hits = np.flatnonzero(mask)
        if limit is not None:
            hits = hits[:limit]
        return [self.ids[int(i)] for i in hits]

    def nearest(self, lat: float, lon: float, *, routable_only: bool = True) -> NodeId | None:
        if routable_only:
            candidates = np.flatnonzero(self.routable)
        else:
            candidates = np.arange(len(self.ids))
        if candidates.size == 0:
            return None
        d = haversine_km_np(lat, lon, self.lats[candidates], self.lons[candidates])
        return self.ids[int(candidates[int(np.argmin(d))])]
