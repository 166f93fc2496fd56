"""Prerequisite checking helpers for MCP tools."""


def require_state(
    state, *, location: bool = False, pois: bool = False, territory: bool = False,
) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, location=True, pois=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if location and state.location is None:
        raise ValueError(
            "Set the player location first with set_location."
        )
    if pois and not state.pois:
        raise ValueError(
            "Load a POI catalog first with fetch_pois or load_sample_pois."
        )
    if territory and state.territory is None:
        raise ValueError(
            "Build a territory first with build_territory."
        )
