"""Session persistence tools: save_session, load_session."""

import json
import logging
from pathlib import Path
from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import NonNegativeInt, TypeAdapter, ValidationError

from ..state import state, ExplorationParams, RecorderParams
from ..core.path import PathRecorder
from ..models import Coordinate, PointOfInterest

logger = logging.getLogger(__name__)

_peer_count = TypeAdapter(Optional[NonNegativeInt])


def _default_path() -> Path:
    return Path.home() / ".cache" / "earthlord-scout" / "session.json"


def register_session_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def save_session(path: str | None = None) -> str:
        """Save the current session to a JSON file for later resumption.

        Saves location, peer count, POI catalog (with statuses), the recorded
        path and parameters. Does NOT save the built territory or exploration
        (rebuild after loading).
        **Next:** load_session in a future session to restore this configuration.

        Args:
            path: Where to save. Default: ~/.cache/earthlord-scout/session.json
        """
        save_path = Path(path) if path else _default_path()
        save_path.parent.mkdir(parents=True, exist_ok=True)

        data: dict = {
            "location": state.location.as_dict() if state.location else None,
            "peer_count": state.peer_count,
            "pois": [p.model_dump(mode="json") for p in state.pois],
            "poi_source": state.poi_source,
            "path": [c.as_dict() for c in state.recorder.coordinates],
            "path_started_at": state.path_started_at,
            "params": state.params.model_dump(),
            "recorder_params": state.recorder_params.model_dump(),
        }

        with open(save_path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info("Session saved to %s", save_path)
        return f"Session saved to {save_path}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_session(path: str | None = None) -> str:
        """Load a previously saved session from a JSON file.

        Restores location, peer count, POI catalog, recorded path and parameters.
        Clears the exploration and territory; re-run explore and build_territory.

        Args:
            path: Path to load from. Default: ~/.cache/earthlord-scout/session.json
        """
        load_path = Path(path) if path else _default_path()

        if not load_path.exists():
            return f"Error: Session file not found at {load_path}"

        try:
            with open(load_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            return f"Error: Invalid session file: {e}"

        try:
            location = Coordinate(**data["location"]) if data.get("location") else None
            peer_count = _peer_count.validate_python(data.get("peer_count"))
            pois = [PointOfInterest(**p) for p in data.get("pois", [])]
            path_points = [Coordinate(**c) for c in data.get("path", [])]
            params = ExplorationParams(**data["params"]) if data.get("params") else ExplorationParams()
            recorder_params = (
                RecorderParams(**data["recorder_params"]) if data.get("recorder_params")
                else RecorderParams()
            )
        except (TypeError, ValidationError) as e:
            return f"Error: Invalid session file: {e}"

        state.location = location
        state.peer_count = peer_count
        state.pois = pois
        state.poi_source = data.get("poi_source", "")
        state.params = params
        state.recorder_params = recorder_params
        recorder = PathRecorder(
            min_interval_s=recorder_params.min_interval_s,
            min_distance_m=recorder_params.min_distance_m,
        )
        recorder.extend(path_points)
        state.recorder = recorder
        state.speed_monitor.reset()
        state.path_started_at = data.get("path_started_at")

        # Clear things that need regeneration
        state.exploration = None
        state.clear_territory()

        restored = ["params"]
        if state.location:
            restored.append("location")
        if state.pois:
            restored.append(f"{len(state.pois)} POI(s)")
        if path_points:
            restored.append(f"{len(path_points)} path point(s)")

        return (
            f"Session restored from {load_path}. "
            f"Restored: {', '.join(restored)}. "
            "Still needed: explore and/or build_territory."
        )
