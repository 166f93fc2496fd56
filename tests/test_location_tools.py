"""Tests for set_location, set_peer_count and fetch_nearby_density tools."""
import json

import pytest
from unittest.mock import MagicMock, AsyncMock, patch


def _get_location_tools():
    from earthlord_scout.tools.location import register_location_tools
    tools = {}
    mock_mcp = MagicMock()
    def capture(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn
        return decorator
    mock_mcp.tool = capture
    register_location_tools(mock_mcp)
    return tools


def test_set_location_updates_state():
    from earthlord_scout.state import state
    tools = _get_location_tools()
    result = tools["set_location"](lat=39.9042, lon=116.4074)
    assert "Location set" in result
    assert state.location.lat == 39.9042


def test_set_location_rejects_out_of_range():
    from earthlord_scout.state import state
    tools = _get_location_tools()
    result = tools["set_location"](lat=95.0, lon=116.4)
    assert result.startswith("Error:")
    assert state.location is None


@pytest.mark.parametrize("count,label", [(0, "Solitary"), (3, "Low"), (12, "Medium"), (50, "High")])
def test_set_peer_count_reports_tier(count, label):
    tools = _get_location_tools()
    assert label in tools["set_peer_count"](count=count)


def test_set_peer_count_clamps_negative():
    from earthlord_scout.state import state
    tools = _get_location_tools()
    result = tools["set_peer_count"](count=-4)
    assert state.peer_count == 0
    assert "Solitary" in result


@pytest.mark.anyio
async def test_fetch_nearby_density_requires_location():
    tools = _get_location_tools()
    result = await tools["fetch_nearby_density"]()
    assert "set_location" in result


@pytest.mark.anyio
async def test_fetch_nearby_density_stores_count():
    from earthlord_scout.state import state
    tools = _get_location_tools()
    tools["set_location"](lat=39.9042, lon=116.4074)

    with patch(
        "earthlord_scout.tools.location.fetch_nearby_player_count", new_callable=AsyncMock
    ) as mock_fetch:
        mock_fetch.return_value = 8
        result = await tools["fetch_nearby_density"](radius_m=500)

    assert state.peer_count == 8
    assert "Medium" in result
    assert mock_fetch.call_args.kwargs["radius_m"] == 500


@pytest.mark.anyio
async def test_fetch_nearby_density_unconfigured_suggests_offline():
    from earthlord_scout.state import state
    tools = _get_location_tools()
    tools["set_location"](lat=39.9042, lon=116.4074)
    result = await tools["fetch_nearby_density"]()
    assert result.startswith("Error:")
    assert "set_peer_count" in result
    assert state.peer_count is None


def _write_players(tmp_path, players):
    p = tmp_path / "players.json"
    p.write_text(json.dumps(players))
    return str(p)


def test_load_nearby_players_counts_within_radius(tmp_path):
    from earthlord_scout.state import state
    tools = _get_location_tools()
    tools["set_location"](lat=39.9042, lon=116.4074)
    state.backend.user_id = "me"
    path = _write_players(tmp_path, [
        {"user_id": "me", "lat": 39.9042, "lon": 116.4074},
        {"user_id": "a", "lat": 39.9045, "lon": 116.4074},
        {"user_id": "b", "lat": 39.9050, "lon": 116.4080},
        {"user_id": "c", "lat": 39.9042, "lon": 116.4074, "is_online": False},
        {"user_id": "d", "lat": 40.0000, "lon": 116.4074},
    ])
    result = tools["load_nearby_players"](file_path=path)
    assert state.peer_count == 2
    assert "Low density" in result


def test_load_nearby_players_radius_override(tmp_path):
    from earthlord_scout.state import state
    tools = _get_location_tools()
    tools["set_location"](lat=39.9042, lon=116.4074)
    path = _write_players(tmp_path, [{"user_id": "a", "lat": 39.9142, "lon": 116.4074}])  # ~1.1 km
    tools["load_nearby_players"](file_path=path)
    assert state.peer_count == 0
    tools["load_nearby_players"](file_path=path, radius_m=2000)
    assert state.peer_count == 1


def test_load_nearby_players_requires_location(tmp_path):
    tools = _get_location_tools()
    result = tools["load_nearby_players"](file_path=_write_players(tmp_path, []))
    assert "set_location" in result


def test_load_nearby_players_invalid_record(tmp_path):
    from earthlord_scout.state import state
    tools = _get_location_tools()
    tools["set_location"](lat=39.9042, lon=116.4074)
    path = _write_players(tmp_path, [{"user_id": "a", "lat": 123.0, "lon": 0.0}])
    assert tools["load_nearby_players"](file_path=path).startswith("Error:")
    assert state.peer_count is None


def test_load_nearby_players_missing_file(tmp_path):
    tools = _get_location_tools()
    tools["set_location"](lat=39.9042, lon=116.4074)
    assert tools["load_nearby_players"](file_path=str(tmp_path / "none.json")).startswith("Error:")
