"""Territory tools: path recording, polygon building, validation and collisions."""

import json
import logging
from datetime import datetime, timezone

from gpxpy.gpx import GPXException
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import state
from ..core.datum import correction_for
from ..core.gpx import parse_gpx_path
from ..core.models import InsufficientPoints
from ..core.path import PathRecorder
from ..core.territory import (
    build_polygon, check_path_collision, check_point_collision, validate_territory,
)
from ..models import Coordinate, Territory
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def _new_recorder() -> PathRecorder:
    rp = state.recorder_params
    return PathRecorder(min_interval_s=rp.min_interval_s, min_distance_m=rp.min_distance_m)


def register_territory_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def start_path() -> str:
        """Start recording a new territory path, discarding any previous one.

        **Next:** record_point for each GPS fix, then build_territory.
        """
        state.recorder = _new_recorder()
        state.recorder.start()
        state.speed_monitor.reset()
        state.path_started_at = datetime.now(timezone.utc).isoformat()
        state.clear_territory()
        return (
            "Path recording started "
            f"(min {state.recorder.min_interval_s:g}s / {state.recorder.min_distance_m:g}m between points)."
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def record_point(lat: float, lon: float, timestamp: str | None = None) -> str:
        """Offer a GPS fix to the path recorder.

        Fixes too close in time or distance to the last kept point are skipped.
        Also reports a warning when the implied speed is too high.

        Args:
            lat: Latitude in degrees (WGS-84).
            lon: Longitude in degrees (WGS-84).
            timestamp: ISO-8601 time of the fix. Default: now.
        """
        try:
            coordinate = Coordinate(lat=lat, lon=lon)
            when = datetime.fromisoformat(timestamp) if timestamp else datetime.now(timezone.utc)
        except (ValidationError, ValueError) as e:
            return f"Error: Invalid fix: {e}"
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)

        if state.path_started_at is None:
            state.path_started_at = when.isoformat()

        kept = state.recorder.offer(coordinate, when)
        reading = state.speed_monitor.update(coordinate, when)
        message = (
            f"Point #{len(state.recorder)} recorded." if kept
            else f"Point skipped (too close to the last one). {len(state.recorder)} point(s) so far."
        )
        if reading and reading.warning:
            message += f" Warning: {reading.warning}."
        return message

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def load_path_from_gpx(file_path: str) -> str:
        """Load a recorded walk from a GPX file as the current territory path.

        All track points are used in file order, without time/distance throttling.
        **Next:** build_territory.

        Args:
            file_path: Absolute path to a .gpx file.
        """
        try:
            gpx_data = parse_gpx_path(file_path)
        except OSError as e:
            return f"Error: Cannot read GPX file: {e}"
        except (GPXException, ValidationError) as e:
            return f"Error: Invalid GPX file: {e}"

        if not gpx_data["path"]:
            return "Error: GPX file has no track or route points."

        # GPX points are already a finished recording; keep all of them
        recorder = PathRecorder(min_interval_s=0.0, min_distance_m=0.0)
        recorder.start()
        recorder.extend(gpx_data["path"])
        state.recorder = recorder
        state.speed_monitor.reset()
        state.path_started_at = gpx_data["started_at"]
        state.clear_territory()
        return f"GPX loaded: {len(recorder)} point(s) from {gpx_data['source']}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def build_territory() -> str:
        """Close the recorded path into a territory polygon and measure its area.

        The render ring is converted to the session display datum (GCJ-02 by
        default); the area is measured on the raw GPS coordinates.
        **Requires:** a path with at least 3 points (record_point or load_path_from_gpx).
        **Next:** validate_current_territory, check_collision, export_territory.
        """
        params = state.params
        result = build_polygon(
            state.recorder.coordinates,
            correction=correction_for(params.display_datum),
            closure_epsilon=params.closure_epsilon,
        )
        if isinstance(result, InsufficientPoints):
            state.clear_territory()
            return f"Error: {result.reason}."

        state.territory = result
        state.validation = None
        logger.info("Territory built: %.2f m² from %d points", result.area, result.point_count)
        return (
            f"Territory built: {result.area:.0f} m² from {result.point_count} point(s), "
            f"{len(result.render_coordinates)}-point ring in {params.display_datum}."
        )

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def validate_current_territory() -> str:
        """Check the built territory against the claim rules.

        Rules: area within the session limits (100 m² to 10 km² by default)
        and no self-crossing path.
        **Requires:** build_territory first.
        """
        try:
            require_state(state, territory=True)
        except ValueError as e:
            return f"Error: {e}"

        params = state.params
        validation = validate_territory(
            state.territory, min_area=params.min_area_m2, max_area=params.max_area_m2,
            closure_epsilon=params.closure_epsilon,
        )
        state.validation = validation
        if validation.passed:
            return f"Territory is valid ({validation.area:.0f} m²)."
        return "Territory is invalid: " + " | ".join(validation.issues)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_territories(file_path: str) -> str:
        """Load other players' territories from a JSON file for collision checks.

        The file holds a list of objects with id, user_id and path
        ([{"lat": .., "lon": ..}, ...]), as stored by the territory backend.

        Args:
            file_path: Path to the JSON file.
        """
        try:
            with open(file_path) as f:
                data = json.load(f)
        except OSError as e:
            return f"Error: Cannot read territories file: {e}"
        except json.JSONDecodeError as e:
            return f"Error: Invalid territories file: {e}"

        try:
            territories = [Territory(**t) for t in data]
        except (TypeError, ValidationError) as e:
            return f"Error: Invalid territory record: {e}"

        state.territories = [t for t in territories if t.is_active]
        return f"Loaded {len(state.territories)} active territor{'y' if len(state.territories) == 1 else 'ies'}."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True))
    def check_collision() -> str:
        """Check the recorded path against other players' territories.

        Fails if the path starts inside, enters, or crosses another player's
        territory. Territories owned by EARTHLORD_USER_ID are ignored.
        **Requires:** a recorded path and load_territories.
        """
        path = state.recorder.coordinates
        if not path:
            return "Error: No path recorded. Use record_point or load_path_from_gpx first."

        user_id = state.backend.user_id or ""
        result = check_point_collision(path[0], state.territories, user_id)
        if not result.has_collision:
            result = check_path_collision(path, state.territories, user_id)
        if result.has_collision:
            return f"Collision ({result.collision_type}) with territory {result.territory_id}: {result.message}."
        return "No collision with other territories."
