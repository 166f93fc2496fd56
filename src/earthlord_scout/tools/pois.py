"""POI tools: load_sample_pois, fetch_pois, set_poi_status, explore."""

import logging
import random

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..core.catalog import sample_catalog
from ..core.osm import fetch_osm_pois
from ..core.selection import explore as explore_pois
from ..models import POIStatus
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def register_poi_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_sample_pois() -> str:
        """Load the built-in catalog of five sample POIs around central Beijing.

        Replaces the current catalog. One of the five is already looted.
        **Next:** explore.
        """
        state.pois = sample_catalog()
        state.poi_source = "sample"
        state.exploration = None
        return f"Loaded {len(state.pois)} sample POIs."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True))
    async def fetch_pois(radius_m: float | None = None) -> str:
        """Fetch lootable places (shops, pharmacies, hospitals...) from OpenStreetMap.

        **Requires:** set_location first.
        **Next:** explore.

        Args:
            radius_m: Search radius in meters (default: session search radius).
        """
        try:
            require_state(state, location=True)
        except ValueError as e:
            return f"Error: {e}"

        radius = radius_m if radius_m is not None else state.params.search_radius_m
        pois = await fetch_osm_pois(state.location, radius_m=radius)
        state.pois = pois
        state.poi_source = "osm"
        state.exploration = None

        if not pois:
            logger.debug("fetch_pois returned zero POIs within %.0fm", radius)
            return f"No POIs found within {radius:.0f}m (check server logs if unexpected)."
        counts: dict[str, int] = {}
        for poi in pois:
            counts[poi.type.value] = counts.get(poi.type.value, 0) + 1
        return f"Fetched {len(pois)} POI(s) within {radius:.0f}m: {counts}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def set_poi_status(poi_id: str, status: str) -> str:
        """Record a gameplay change to a POI, e.g. after looting it.

        Looted POIs are never offered by explore again.

        Args:
            poi_id: Id of a POI in the current catalog.
            status: One of 'undiscovered', 'discovered', 'looted'.
        """
        try:
            new_status = POIStatus(status)
        except ValueError:
            options = ", ".join(s.value for s in POIStatus)
            return f"Error: Unknown status '{status}'. Choose one of: {options}."

        for i, poi in enumerate(state.pois):
            if poi.id == poi_id:
                state.pois[i] = poi.model_copy(update={"status": new_status})
                return f"POI '{poi.name}' is now {new_status.value}."
        return f"Error: No POI with id '{poi_id}' in the current catalog."

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def explore(seed: int | None = None) -> str:
        """Pick the POIs to show the player based on how crowded the area is.

        Density tier comes from the last peer count (0 if none was fetched).
        The POI count is random within the tier's range; the nearest
        non-looted POIs are chosen.
        **Requires:** set_location and a POI catalog.

        Args:
            seed: Optional seed for a reproducible POI count.
        """
        try:
            require_state(state, location=True, pois=True)
        except ValueError as e:
            return f"Error: {e}"

        rng = random.Random(seed) if seed is not None else None
        peer_count = state.peer_count if state.peer_count is not None else 0
        selection = explore_pois(state.location, state.pois, peer_count, rng=rng)
        state.exploration = selection

        lines = [
            f"Density: {selection.tier.label} ({selection.peer_count} nearby). "
            f"Showing {len(selection.pois)} of {selection.requested_count} requested POI(s):"
        ]
        for i, entry in enumerate(selection.pois, 1):
            lines.append(
                f"{i}. {entry.poi.name} [{entry.poi.type.value}, {entry.poi.status.value}] "
                f"{entry.distance_m:.0f}m"
            )
        return "\n".join(lines)
