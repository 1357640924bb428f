# tests/ingest/test_record_filter.py
import pytest

from osm_route.domain.entities.records import NodeRecord, WayRecord
from osm_route.domain.errors import SourceError, StreamNotReplayable
from osm_route.ingest.record_filter import RecordFilter, ingest
from osm_route.ingest.sources import MemorySource, OneShotSource
from osm_route.runtime.hooks import NoopHooks


@pytest.fixture
def records():
    return [
        NodeRecord(1, 0.0, 0.0),
        NodeRecord(2, 0.0, 1.0),
        NodeRecord(3, 0.0, 2.0),
        NodeRecord(4, 5.0, 5.0),  # not referenced by any way
        NodeRecord(5),  # referenced but no coordinates
        NodeRecord(6, 1.0, 1.0),  # only referenced by a 1-ref way
        WayRecord(100, (1, 2, 3)),
        WayRecord(101, (6,)),
        WayRecord(102, (3, 5)),
        {"type": "way", "id": 103},  # malformed
    ]


class RecordingHooks(NoopHooks):
    def __init__(self):
        self.calls = []

    def ways_scanned(self, **kw):
        self.calls.append(("ways", kw))

    def nodes_scanned(self, **kw):
        self.calls.append(("nodes", kw))

    def record_skipped(self, **kw):
        self.calls.append(("skip", kw))


def test_filters_short_ways_and_unreferenced_nodes(records):
    ds = ingest(MemorySource(records))
    assert [w.id for w in ds.ways] == [100, 102]
    assert set(ds.nodes) == {1, 2, 3}
    assert ds.nodes[2] == NodeRecord(2, 0.0, 1.0)
    assert ds.ways_scanned == 3  # malformed item is not a way
    assert ds.nodes_scanned == 6
    assert ds.skipped == {"malformed": 1, "short_way": 1, "missing_coords": 1}


def test_every_stored_node_is_referenced(records):
    ds = ingest(MemorySource(records))
    refs = {r for w in ds.ways for r in w.refs}
    assert set(ds.nodes) <= refs
    assert all(len(w.refs) >= 2 for w in ds.ways)


def test_single_ref_way_node_is_dropped(records):
    ds = ingest(MemorySource(records))
    assert 6 not in ds.nodes


def test_ingest_is_idempotent(records):
    src = MemorySource(records)
    assert ingest(src) == ingest(src)


def test_order_of_records_does_not_matter(records):
    # ways after nodes, nodes after ways: both passes read the whole source
    a = ingest(MemorySource(records))
    b = ingest(MemorySource(list(reversed(records))))
    assert a.nodes == b.nodes
    assert {w.id for w in a.ways} == {w.id for w in b.ways}


def test_dict_records_are_accepted():
    src = MemorySource(
        [
            {"type": "node", "id": "10", "lat": 1.0, "lon": 2.0},
            {"type": "node", "id": "11", "lat": 1.0, "lon": 2.1},
            {"type": "way", "id": "7", "refs": ["10", "11"]},
        ]
    )
    ds = ingest(src)
    assert set(ds.nodes) == {10, 11}
    assert ds.ways == [WayRecord(7, (10, 11))]


def test_generator_source_is_not_replayable(records):
    with pytest.raises(StreamNotReplayable):
        ingest(r for r in records)


def test_one_shot_source_fails_on_second_pass(records):
    with pytest.raises(StreamNotReplayable):
        ingest(OneShotSource(records))


def test_io_failure_becomes_source_error():
    class Broken:
        def __iter__(self):
            yield WayRecord(1, (1, 2))
            raise OSError("disk gone")

    with pytest.raises(SourceError) as ei:
        ingest(Broken())
    assert isinstance(ei.value.__cause__, OSError)


def test_progress_and_skip_hooks(records):
    hooks = RecordingHooks()
    RecordFilter(hooks, progress_every_ways=2, progress_every_nodes=4).ingest(MemorySource(records))

    ways = [kw for k, kw in hooks.calls if k == "ways"]
    assert [w["done"] for w in ways] == [False, True]
    assert ways[-1] == {"scanned": 3, "retained": 2, "referenced": 4, "done": True}

    nodes = [kw for k, kw in hooks.calls if k == "nodes"]
    assert nodes[-1] == {"scanned": 6, "stored": 3, "done": True}

    reasons = sorted(kw["reason"] for k, kw in hooks.calls if k == "skip")
    assert reasons == ["malformed", "missing_coords", "short_way"]
