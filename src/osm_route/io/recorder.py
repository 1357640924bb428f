# io/recorder.py
import json
import math
import sys
from dataclasses import asdict
from typing import Protocol

from osm_route.io.events import RouterEvent


class Sink(Protocol):
    def write(self, ev: RouterEvent) -> None: ...


def _plain(value):
    # JSON has no Infinity/NaN: unreachable distances become null
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class JsonlSink:
    """One strict JSON object per event per line."""

    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, ev: RouterEvent) -> None:
        self.fp.write(json.dumps(_plain(asdict(ev)), allow_nan=False) + "\n")


class MemorySink:
    """Keeps events in order; ``by_name`` filters for assertions and reports."""

    def __init__(self):
        self.events: list[RouterEvent] = []

    def write(self, ev: RouterEvent) -> None:
        self.events.append(ev)

    def by_name(self, name: str) -> list[RouterEvent]:
        return [ev for ev in self.events if ev.name == name]


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def emit(self, ev: RouterEvent) -> None:
        for s in self.sinks:
            s.write(ev)
