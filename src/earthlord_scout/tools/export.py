"""Export tools: export_territory, export_territory_geojson."""

import logging
import os
from pathlib import Path
from mcp.server.fastmcp import FastMCP

from ..state import state
from ..exporters.geojson import export_geojson
from ..exporters.record import export_record
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def _validate_output_path(output_path: str) -> None:
    """Raise ValueError if output_path resolves outside the user's home directory."""
    resolved = Path(output_path).resolve()
    home = Path.home().resolve()
    try:
        resolved.relative_to(home)
    except ValueError:
        raise ValueError(
            f"Output path {output_path!r} is outside the home directory. "
            "Use a path within your home directory."
        )


def register_export_tools(mcp: FastMCP):

    @mcp.tool()
    def export_territory(output_path: str) -> str:
        """Export the built territory as the JSON record the territory backend stores.

        The record holds the raw path ([{"lat", "lon"}]), a PostGIS polygon
        (SRID=4326 WKT), the bounding box, area and point count.

        Args:
            output_path: Where to save the .json file (absolute path)
        """
        try:
            require_state(state, territory=True)
            _validate_output_path(output_path)
        except ValueError as e:
            return f"Error: {e}"

        if state.validation is not None and not state.validation.passed:
            logger.warning("Exporting a territory that failed validation: %s", state.validation.issues)

        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        record = export_record(
            state.territory, output_path,
            user_id=state.backend.user_id, started_at=state.path_started_at,
        )
        return f"Territory record exported to {output_path} ({record['point_count']} points, {record['area']:.0f} m²)"

    @mcp.tool()
    def export_territory_geojson(output_path: str, ring: str = "render") -> str:
        """Export the territory ring as GeoJSON for a map layer.

        Args:
            output_path: Where to save the .geojson file (absolute path)
            ring: 'render' for the display datum ring (default) or 'raw' for GPS coordinates.
        """
        if ring not in ("render", "raw"):
            return "Error: ring must be 'render' or 'raw'."
        try:
            require_state(state, territory=True)
            _validate_output_path(output_path)
        except ValueError as e:
            return f"Error: {e}"

        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        result = export_geojson(state.territory, output_path, ring=ring)
        return f"GeoJSON exported to {output_path} ({result['points']} points, {result['datum']})"
