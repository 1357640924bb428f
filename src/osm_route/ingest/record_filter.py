# ingest/record_filter.py
import time
from collections import Counter
from collections.abc import Iterator

from osm_route.app.protocols import RecordSource
from osm_route.domain.entities.records import (
    Dataset,
    NodeId,
    NodeRecord,
    WayRecord,
    coerce_record,
)
from osm_route.domain.errors import SourceError, StreamNotReplayable
from osm_route.runtime.hooks import IngestHooks, NoopHooks


class RecordFilter:
    """
    Two-pass reduction of a record stream to the minimal routing dataset.

    Pass 1 keeps ways with >= 2 refs and collects the ids they reference.
    Pass 2 keeps only referenced nodes that carry both coordinates.
    Peak memory follows the number of nodes used, not the number present.
    """

    def __init__(
        self,
        hooks: IngestHooks | None = None,
        *,
        progress_every_ways: int = 10_000,
        progress_every_nodes: int = 100_000,
    ):
        self._hooks = hooks or NoopHooks()
        self.progress_every_ways = max(1, progress_every_ways)
        self.progress_every_nodes = max(1, progress_every_nodes)

    def ingest(self, source: RecordSource) -> Dataset:
        t0 = time.perf_counter()
        self._hooks.ingest_start(source=repr(source))
        skipped: Counter[str] = Counter()

        ways, referenced, ways_scanned = self._scan_ways(source, skipped)
        nodes, nodes_scanned = self._scan_nodes(source, referenced, skipped)
        referenced.clear()

        self._hooks.ingest_end(
            nodes=len(nodes),
            ways=len(ways),
            nodes_scanned=nodes_scanned,
            ways_scanned=ways_scanned,
            skipped=dict(skipped),
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return Dataset(
            nodes=nodes,
            ways=ways,
            nodes_scanned=nodes_scanned,
            ways_scanned=ways_scanned,
            skipped=dict(skipped),
        )

    # --------------- passes -----------------------------

    def _scan_ways(
        self, source: RecordSource, skipped: Counter
    ) -> tuple[list[WayRecord], set[NodeId], int]:
        ways: list[WayRecord] = []
        referenced: set[NodeId] = set()
        scanned = 0
        for item in self._records(source, phase="way scan"):
            rec = coerce_record(item)
            if rec is None:
                skipped["malformed"] += 1
                self._hooks.record_skipped(reason="malformed", record=item)
                continue
            if not isinstance(rec, WayRecord):
                continue
            scanned += 1
            if scanned % self.progress_every_ways == 0:
                self._hooks.ways_scanned(
                    scanned=scanned, retained=len(ways), referenced=len(referenced), done=False
                )
            if len(rec.refs) < 2:
                skipped["short_way"] += 1
                self._hooks.record_skipped(reason="short_way", record=rec.id)
                continue
            referenced.update(rec.refs)
            ways.append(rec)
        self._hooks.ways_scanned(
            scanned=scanned, retained=len(ways), referenced=len(referenced), done=True
        )
        return ways, referenced, scanned

    def _scan_nodes(
        self, source: RecordSource, referenced: set[NodeId], skipped: Counter
    ) -> tuple[dict[NodeId, NodeRecord], int]:
        nodes: dict[NodeId, NodeRecord] = {}
        scanned = 0
        for item in self._records(source, phase="node scan"):
            rec = coerce_record(item)
            if not isinstance(rec, NodeRecord):
                continue  # ways, and malformed items already counted in pass 1
            scanned += 1
            if scanned % self.progress_every_nodes == 0:
                self._hooks.nodes_scanned(scanned=scanned, stored=len(nodes), done=False)
            if rec.id not in referenced:
                continue
            if not rec.has_coords:
                skipped["missing_coords"] += 1
                self._hooks.record_skipped(reason="missing_coords", record=rec.id)
                continue
            nodes[rec.id] = rec
        self._hooks.nodes_scanned(scanned=scanned, stored=len(nodes), done=True)
        return nodes, scanned

    # --------------- source access ----------------------

    @staticmethod
    def _records(source: RecordSource, *, phase: str) -> Iterator:
        try:
            it = iter(source)
        except OSError as exc:
            raise SourceError(f"cannot open record source for {phase}: {exc}") from exc
        if it is source:
            # an iterator is its own iterable: a second pass would see nothing
            raise StreamNotReplayable(f"record source is a one-pass iterator ({phase})")
        try:
            yield from it
        except OSError as exc:
            raise SourceError(f"record source failed during {phase}: {exc}") from exc


def ingest(source: RecordSource, hooks: IngestHooks | None = None, **kw) -> Dataset:
    return RecordFilter(hooks, **kw).ingest(source)
