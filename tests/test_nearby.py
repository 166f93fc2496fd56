import logging
import pytest
from unittest.mock import patch, AsyncMock, MagicMock
import httpx

from earthlord_scout.core.nearby import (
    BackendConfig, NearbyPlayerError, count_nearby, fetch_nearby_player_count,
)
from earthlord_scout.models import Coordinate, PlayerLocation

ORIGIN = Coordinate(lat=39.9042, lon=116.4074)
CONFIG = BackendConfig(supabase_url="https://example.supabase.co", api_key="anon", user_id="me")


def _mock_client(post):
    mock_client = AsyncMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client.post = post
    return mock_client


def _json_response(value):
    mock_resp = MagicMock()
    mock_resp.raise_for_status = MagicMock()
    mock_resp.json = MagicMock(return_value=value)
    return mock_resp


class TestBackendConfig:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("EARTHLORD_SUPABASE_URL", "https://x.supabase.co/")
        monkeypatch.setenv("EARTHLORD_SUPABASE_KEY", "anon")
        monkeypatch.setenv("EARTHLORD_USER_ID", "user-1")
        cfg = BackendConfig.from_env()
        assert cfg.supabase_url == "https://x.supabase.co"
        assert cfg.is_configured
        assert cfg.user_id == "user-1"
        assert cfg.access_token is None

    def test_unconfigured_by_default(self):
        assert not BackendConfig.from_env().is_configured

    def test_headers_prefer_access_token(self):
        cfg = BackendConfig(supabase_url="u", api_key="anon", access_token="jwt")
        assert cfg.headers()["Authorization"] == "Bearer jwt"
        assert cfg.headers()["apikey"] == "anon"

    def test_headers_fall_back_to_key(self):
        assert CONFIG.headers()["Authorization"] == "Bearer anon"


class TestCountNearby:
    def test_counts_online_within_radius(self):
        players = [
            PlayerLocation(user_id="a", lat=39.9042, lon=116.4074),
            PlayerLocation(user_id="b", lat=39.9050, lon=116.4074),  # ~90 m
            PlayerLocation(user_id="c", lat=39.9500, lon=116.4074),  # ~5 km
            PlayerLocation(user_id="d", lat=39.9042, lon=116.4074, is_online=False),
        ]
        assert count_nearby(ORIGIN, players, radius_m=1000) == 2

    def test_excludes_self(self):
        players = [PlayerLocation(user_id="me", lat=39.9042, lon=116.4074)]
        assert count_nearby(ORIGIN, players, exclude_user_id="me") == 0

    def test_no_players(self):
        assert count_nearby(ORIGIN, []) == 0


@pytest.mark.anyio
async def test_fetch_posts_rpc_payload():
    post = AsyncMock(return_value=_json_response(7))
    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client_cls.return_value = _mock_client(post)
        count = await fetch_nearby_player_count(ORIGIN, CONFIG, radius_m=800)

    assert count == 7
    url = post.call_args.args[0]
    assert url == "https://example.supabase.co/rest/v1/rpc/get_nearby_player_count"
    assert post.call_args.kwargs["json"] == {
        "p_latitude": ORIGIN.lat,
        "p_longitude": ORIGIN.lon,
        "p_radius_meters": 800,
        "p_exclude_user_id": "me",
    }


@pytest.mark.anyio
async def test_fetch_requires_configuration():
    with pytest.raises(NearbyPlayerError, match="not configured"):
        await fetch_nearby_player_count(ORIGIN, BackendConfig())


@pytest.mark.anyio
async def test_fetch_http_error_logs_and_raises(caplog):
    response = MagicMock()
    response.status_code = 401

    async def mock_post(url, **kwargs):
        mock_resp = MagicMock()
        mock_resp.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("401", request=MagicMock(), response=response)
        )
        return mock_resp

    with caplog.at_level(logging.WARNING, logger="earthlord_scout.core.nearby"):
        with patch("httpx.AsyncClient") as mock_client_cls:
            mock_client_cls.return_value = _mock_client(mock_post)
            with pytest.raises(NearbyPlayerError, match="401"):
                await fetch_nearby_player_count(ORIGIN, CONFIG)

    assert any("401" in r.message for r in caplog.records)


@pytest.mark.anyio
async def test_fetch_timeout_raises():
    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client_cls.return_value = _mock_client(
            AsyncMock(side_effect=httpx.TimeoutException("timeout"))
        )
        with pytest.raises(NearbyPlayerError, match="timed out"):
            await fetch_nearby_player_count(ORIGIN, CONFIG)


@pytest.mark.anyio
@pytest.mark.parametrize("payload", [-1, "3", None, True])
async def test_fetch_rejects_non_count(payload):
    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client_cls.return_value = _mock_client(AsyncMock(return_value=_json_response(payload)))
        with pytest.raises(NearbyPlayerError, match="Unexpected"):
            await fetch_nearby_player_count(ORIGIN, CONFIG)
