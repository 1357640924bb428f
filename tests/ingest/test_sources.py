import pytest

from osm_route.app.protocols import RecordSource
from osm_route.domain.errors import SourceError, StreamNotReplayable
from osm_route.ingest.record_filter import ingest
from osm_route.ingest.sources import MemorySource, OneShotSource, OsmXmlSource

OSM = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <node id="1" lat="0.0" lon="0.0"/>
  <node id="2" lat="0.0" lon="1.0">
    <tag k="highway" v="crossing"/>
  </node>
  <node id="3" lat="0.0" lon="2.0"/>
  <node id="4" lat="9.0" lon="9.0"/>
  <node id="5"/>
  <way id="10">
    <nd ref="1"/>
    <nd ref="2"/>
    <nd ref="3"/>
    <tag k="highway" v="residential"/>
  </way>
  <way id="11">
    <nd ref="4"/>
  </way>
  <way id="12">
    <nd ref="3"/>
    <nd ref="5"/>
  </way>
  <relation id="99">
    <member type="way" ref="10" role=""/>
  </relation>
</osm>
"""


@pytest.fixture
def osm_file(tmp_path):
    p = tmp_path / "tiny.osm"
    p.write_text(OSM, encoding="utf-8")
    return p


def test_xml_source_yields_nodes_and_ways(osm_file):
    items = list(OsmXmlSource(osm_file))
    kinds = [it["type"] for it in items]
    assert kinds.count("node") == 5
    assert kinds.count("way") == 3
    way = next(it for it in items if it["type"] == "way" and it["id"] == "10")
    assert way["refs"] == ["1", "2", "3"]


def test_xml_source_is_replayable(osm_file):
    src = OsmXmlSource(osm_file)
    assert list(src) == list(src)
    assert isinstance(src, RecordSource)


def test_xml_source_feeds_ingest(osm_file):
    ds = ingest(OsmXmlSource(osm_file))
    assert [w.id for w in ds.ways] == [10, 12]
    assert set(ds.nodes) == {1, 2, 3}


def test_missing_file_is_source_error(tmp_path):
    with pytest.raises(SourceError):
        ingest(OsmXmlSource(tmp_path / "nope.osm"))


def test_broken_xml_is_source_error(tmp_path):
    p = tmp_path / "bad.osm"
    p.write_text('<osm><node id="1" lat="0" lon="0"><way>', encoding="utf-8")
    with pytest.raises(SourceError):
        list(OsmXmlSource(p))


def test_memory_and_one_shot_sources():
    mem = MemorySource([1, 2, 3])
    assert len(mem) == 3
    assert list(mem) == list(mem) == [1, 2, 3]

    once = OneShotSource([1, 2])
    assert list(once) == [1, 2]
    with pytest.raises(StreamNotReplayable):
        iter(once)
