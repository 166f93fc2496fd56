"""GPX file parsing into territory paths."""

import gpxpy

from earthlord_scout.models import Coordinate


def parse_gpx_path(filepath: str) -> dict:
    """Parse a GPX file into a single ordered path of raw coordinates.

    Track segment points are concatenated in file order. Files without
    tracks fall back to their route points.
    """
    with open(filepath, "r") as f:
        gpx = gpxpy.parse(f)

    path = []
    for track in gpx.tracks:
        for segment in track.segments:
            for point in segment.points:
                path.append(Coordinate(lat=point.latitude, lon=point.longitude))

    source = "tracks"
    if not path:
        source = "routes"
        for route in gpx.routes:
            for point in route.points:
                path.append(Coordinate(lat=point.latitude, lon=point.longitude))

    started_at = None
    time_bounds = gpx.get_time_bounds()
    if time_bounds and time_bounds.start_time:
        started_at = time_bounds.start_time.isoformat()

    return {
        "path": path,
        "source": source if path else None,
        "started_at": started_at,
        "metadata": {
            "name": gpx.name,
            "description": gpx.description,
        },
    }
