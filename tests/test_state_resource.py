"""Tests for state://session MCP resource."""
import json


def test_state_resource_is_registered():
    from earthlord_scout.server import mcp

    resources = {str(r.uri): r for r in mcp._resource_manager._resources.values()}
    assert "state://session" in resources, (
        f"state://session not registered. Registered: {list(resources.keys())}"
    )


def test_state_resource_content_matches_summary():
    """Resource content should return valid JSON with expected keys."""
    from earthlord_scout.server import mcp
    from earthlord_scout.state import state
    from earthlord_scout.models import Coordinate

    state.location = Coordinate(lat=39.9042, lon=116.4074)
    state.peer_count = 4

    resources = {str(r.uri): r for r in mcp._resource_manager._resources.values()}
    resource = resources.get("state://session")
    assert resource is not None

    parsed = json.loads(resource.fn())
    expected = state.summary()
    assert parsed.keys() == expected.keys()
    assert parsed["location"]["lat"] == 39.9042
    assert parsed["density"]["peer_count"] == 4
