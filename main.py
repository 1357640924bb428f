# main.py
import argparse
import json
import sys

from osm_route.app.build import build
from osm_route.ingest.sources import OsmXmlSource


def run(osm_file: str, start: int, end: int, *, animate: bool = False, level: str = "INFO") -> int:
    app = build({"log": {"level": level}})
    app.session.load(OsmXmlSource(osm_file))
    res = app.session.route(start, end, animate=animate)
    if not res.found:
        print(json.dumps({"error": "No path found"}))
        return 1
    print(
        json.dumps(
            {
                "path": list(res.path),
                "distance_km": res.distance,
                "iterations": res.iterations,
                "explored": len(res.explored),
                "frontier": len(res.frontier),
            }
        )
    )
    return 0


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Shortest path between two OSM node ids.")
    ap.add_argument("osm_file")
    ap.add_argument("start", type=int)
    ap.add_argument("end", type=int)
    ap.add_argument("--animate", action="store_true")
    ap.add_argument("--log-level", default="INFO")
    args = ap.parse_args()
    sys.exit(run(args.osm_file, args.start, args.end, animate=args.animate, level=args.log_level))
