import xml.etree.ElementTree as ET
from collections.abc import Iterable, Iterator
from pathlib import Path

from osm_route.domain.errors import SourceError, StreamNotReplayable


class MemorySource:
    """Replayable source over records that are already decoded."""

    def __init__(self, records: Iterable):
        self._records = tuple(records)

    def __iter__(self) -> Iterator:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)


class OneShotSource:
    """Wraps a single-pass iterable; a second iteration raises StreamNotReplayable."""

    def __init__(self, records: Iterable):
        self._it = iter(records)
        self._used = False

    def __iter__(self) -> Iterator:
        if self._used:
            raise StreamNotReplayable("one-shot source was already consumed")
        self._used = True
        return self._it


class OsmXmlSource:
    """
    Streams <node>/<way> elements of an .osm XML file.

    Every iteration re-opens the file, so the source is replayable. Elements
    are cleared as soon as they are yielded to keep memory flat.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"OsmXmlSource({str(self.path)!r})"

    def __iter__(self) -> Iterator[dict]:
        return self._iter_records()

    def _iter_records(self) -> Iterator[dict]:
        try:
            for _, elem in ET.iterparse(str(self.path), events=("end",)):
                if elem.tag == "node":
                    yield {
                        "type": "node",
                        "id": elem.attrib.get("id"),
                        "lat": elem.attrib.get("lat"),
                        "lon": elem.attrib.get("lon"),
                    }
                    elem.clear()
                elif elem.tag == "way":
                    yield {
                        "type": "way",
                        "id": elem.attrib.get("id"),
                        "refs": [nd.attrib.get("ref") for nd in elem.iter("nd")],
                    }
                    elem.clear()
        except ET.ParseError as exc:
            raise SourceError(f"cannot parse {self.path}: {exc}") from exc
        except OSError as exc:
            raise SourceError(f"cannot read {self.path}: {exc}") from exc
