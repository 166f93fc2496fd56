"""Location tools: set_location, set_peer_count, load_nearby_players, fetch_nearby_density."""

import json
import logging

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from ..state import state
from ..core.density import classify, recommended_count
from ..core.nearby import NearbyPlayerError, count_nearby, fetch_nearby_player_count
from ..models import Coordinate, PlayerLocation
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def _describe_density(count: int) -> str:
    tier = classify(count)
    low, high = tier.poi_count_range
    return (
        f"{count} nearby player(s) -> {tier.label} ({tier.description}). "
        f"Shows {low}-{high} POI(s), recommended {recommended_count(tier)}."
    )


def register_location_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_location(lat: float, lon: float) -> str:
        """Set the player's current GPS position (WGS-84).

        Clears the previous exploration since the neighbourhood changed.
        **Next:** fetch_nearby_density or set_peer_count, then load POIs and explore.

        Args:
            lat: Latitude in degrees.
            lon: Longitude in degrees.
        """
        try:
            location = Coordinate(lat=lat, lon=lon)
        except ValidationError as e:
            return f"Error: Invalid coordinate ({e.error_count()} problem(s)): lat={lat}, lon={lon}"

        state.location = location
        state.exploration = None
        return f"Location set: {lat:.6f}, {lon:.6f}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_peer_count(count: int) -> str:
        """Supply the number of other active players nearby directly.

        Use this when the location backend is unavailable. Negative counts
        are treated as zero.
        **Next:** explore.

        Args:
            count: Number of other active players within the search radius.
        """
        count = max(0, count)
        state.peer_count = count
        return _describe_density(count)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_nearby_players(file_path: str, radius_m: float | None = None) -> str:
        """Count nearby players from a JSON export of player positions.

        The file holds a list of objects with user_id, lat, lon and optionally
        is_online, as stored by the location backend. Offline players and
        EARTHLORD_USER_ID are not counted.
        **Requires:** set_location first.
        **Next:** explore.

        Args:
            file_path: Path to the JSON file.
            radius_m: Search radius in meters (default: session search radius).
        """
        try:
            require_state(state, location=True)
        except ValueError as e:
            return f"Error: {e}"

        try:
            with open(file_path) as f:
                data = json.load(f)
        except OSError as e:
            return f"Error: Cannot read players file: {e}"
        except json.JSONDecodeError as e:
            return f"Error: Invalid players file: {e}"

        try:
            players = [PlayerLocation(**p) for p in data]
        except (TypeError, ValidationError) as e:
            return f"Error: Invalid player record: {e}"

        radius = radius_m if radius_m is not None else state.params.search_radius_m
        count = count_nearby(
            state.location, players, radius_m=radius, exclude_user_id=state.backend.user_id,
        )
        state.peer_count = count
        logger.info("Counted %d of %d player(s) within %.0fm", count, len(players), radius)
        return _describe_density(count)

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def fetch_nearby_density(radius_m: int | None = None) -> str:
        """Query the location backend for active players near the current location.

        Counts players online in the last five minutes, excluding yourself.
        **Requires:** set_location first, and EARTHLORD_SUPABASE_URL / EARTHLORD_SUPABASE_KEY.
        **Next:** load POIs (fetch_pois or load_sample_pois), then explore.

        Args:
            radius_m: Search radius in meters (default: session search radius).
        """
        try:
            require_state(state, location=True)
        except ValueError as e:
            return f"Error: {e}"

        radius = radius_m if radius_m is not None else int(state.params.search_radius_m)
        try:
            count = await fetch_nearby_player_count(state.location, state.backend, radius_m=radius)
        except NearbyPlayerError as e:
            return f"Error: {e}. Use set_peer_count to continue offline."

        state.peer_count = count
        logger.info("Nearby density: %d player(s) within %dm", count, radius)
        return _describe_density(count)
