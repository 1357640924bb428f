# io/router_logging.py
import json
import logging
import math
import sys

from osm_route.io.recorder import Recorder
from osm_route.runtime.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload)


def _default_json_logger(name="osm_route", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


def _km(d: float) -> float | None:
    return None if math.isinf(d) else round(d, 6)


class RouterLogging(NoopHooks):
    """
    One place to shape and emit structured logs for ingest, graph build and search.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)
        self._skipped = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # --------------- Ingest ------------------------------

    def ingest_start(self, *, source):
        self._skipped = 0
        self._emit("INFO", "ingest_start", source=source)

    def ways_scanned(self, *, scanned, retained, referenced, done):
        msg = "way_scan_done" if done else "ways_scanned"
        self._emit("INFO", msg, scanned=scanned, retained=retained, referenced=referenced)

    def nodes_scanned(self, *, scanned, stored, done):
        msg = "node_scan_done" if done else "nodes_scanned"
        self._emit("INFO", msg, scanned=scanned, stored=stored)

    def record_skipped(self, *, reason, record):
        self._skipped += 1
        if self.debug and (self._skipped % self.sample_every) == 0:
            self._emit("DEBUG", "record_skipped", reason=reason, record=repr(record))

    def ingest_end(self, *, nodes, ways, nodes_scanned, ways_scanned, skipped, wall_ms):
        self._emit(
            "INFO",
            "ingest_end",
            nodes=nodes,
            ways=ways,
            nodes_scanned=nodes_scanned,
            ways_scanned=ways_scanned,
            skipped=skipped,
            wall_ms=round(wall_ms, 1),
        )

    # --------------- Graph -------------------------------

    def graph_progress(self, *, ways_done, ways_total):
        self._emit("INFO", "graph_progress", ways_done=ways_done, ways_total=ways_total)

    def graph_built(self, *, nodes, edges, wall_ms):
        self._emit("INFO", "graph_built", nodes=nodes, edges=edges, wall_ms=round(wall_ms, 1))

    # --------------- Search ------------------------------

    def destination_found(self, *, node, iteration, distance):
        self._emit("INFO", "destination_found", node=node, iteration=iteration, distance_km=_km(distance))

    def search_end(self, *, start, end, found, iterations, distance, wall_ms, **extra):
        self._emit(
            "INFO",
            "search_end",
            start=start,
            end=end,
            found=found,
            iterations=iterations,
            distance_km=_km(distance),
            wall_ms=round(wall_ms, 2),
            **extra,
        )

    # ------------- Event Reporting --------------------------

    def event(self, ev):
        if self.recorder:
            self.recorder.emit(ev)
