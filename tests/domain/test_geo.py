import math

import numpy as np
import pytest

from osm_route.domain.entities.records import NodeRecord
from osm_route.domain.geo import Bounds, CoordinateIndex, haversine_km, haversine_km_np

ONE_DEG_EQUATOR_KM = 6371.0 * math.pi / 180  # ~111.195


def test_one_degree_of_longitude_at_equator():
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(ONE_DEG_EQUATOR_KM, rel=1e-12)
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(111.19, abs=0.01)


def test_zero_and_symmetric():
    assert haversine_km(51.5, -0.12, 51.5, -0.12) == 0.0
    d1 = haversine_km(51.5, -0.12, 48.85, 2.35)
    d2 = haversine_km(48.85, 2.35, 51.5, -0.12)
    assert d1 == pytest.approx(d2)
    assert 330 < d1 < 350  # London-Paris


def test_antipodal_points_are_half_the_circumference():
    half = math.pi * 6371.0
    assert haversine_km(2.5, 0.0, -2.5, 180.0) == pytest.approx(half)
    for lat in np.arange(0.1, 90.0, 0.1):
        assert haversine_km(lat, 0.0, -lat, 180.0) == pytest.approx(half)

    lats = -np.arange(0.1, 90.0, 0.1)
    d = haversine_km_np(2.5, 0.0, lats, np.full(lats.shape, 180.0))
    assert np.isfinite(d).all()
    assert d.max() == pytest.approx(half)


def test_nearest_ignores_antipodal_rounding():
    nodes = {1: NodeRecord(1, -2.5, 180.0), 2: NodeRecord(2, -2.6, 180.0), 3: NodeRecord(3, 2.4, 0.1)}
    idx = CoordinateIndex.from_nodes(nodes, routable=nodes)
    assert idx.nearest(2.5, 0.0) == 3


def test_vectorized_matches_scalar():
    lats = np.array([0.0, 10.0, -33.9])
    lons = np.array([1.0, 20.0, 151.2])
    d = haversine_km_np(0.0, 0.0, lats, lons)
    for i in range(3):
        assert d[i] == pytest.approx(haversine_km(0.0, 0.0, lats[i], lons[i]))


@pytest.fixture
def index():
    nodes = {
        1: NodeRecord(1, 0.0, 0.0),
        2: NodeRecord(2, 0.5, 0.5),
        3: NodeRecord(3, 1.0, 1.0),
        2**62: NodeRecord(2**62, 2.0, -1.0),
    }
    return CoordinateIndex.from_nodes(nodes, routable={1, 3, 2**62})


def test_bounds_and_center(index):
    b = index.bounds()
    assert b == Bounds(0.0, 2.0, -1.0, 1.0)
    assert b.center_lat == 1.0
    assert b.center_lon == 0.0


def test_empty_index_has_no_bounds():
    idx = CoordinateIndex.from_nodes({})
    assert idx.bounds() is None
    assert idx.nearest(0.0, 0.0) is None


def test_within_box_and_limit(index):
    box = Bounds(0.0, 1.0, 0.0, 1.0)
    assert index.within(box) == [1, 2, 3]
    assert index.within(box, limit=2) == [1, 2]


def test_nearest_respects_routable_mask(index):
    assert index.nearest(0.45, 0.45, routable_only=False) == 2
    assert index.nearest(0.45, 0.45) == 1
    # large ids survive the round-trip untouched
    assert index.nearest(2.0, -1.0) == 2**62
