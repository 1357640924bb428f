from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from osm_route.domain.entities.records import Record


@runtime_checkable
class RecordSource(Protocol):
    """
    Responsibilities:
      • Yield node/way records (instances or {"type": ...} mappings).
      • Support iteration from the beginning more than once, producing the
        same records in the same order every time.
      • Raise SourceError (or OSError) when the backing data cannot be read.
    """

    def __iter__(self) -> Iterator[Record | dict]: ...
