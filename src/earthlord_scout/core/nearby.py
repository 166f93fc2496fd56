"""Nearby active player counts from the location backend."""

import logging
import os
from typing import Sequence

import httpx
from pydantic import BaseModel, Field

from .selection import haversine_distances
from earthlord_scout.models import Coordinate, PlayerLocation

logger = logging.getLogger(__name__)

NEARBY_COUNT_RPC = "get_nearby_player_count"


class NearbyPlayerError(Exception):
    """The location backend could not be reached or returned garbage."""


class BackendConfig(BaseModel):
    supabase_url: str = ""
    api_key: str = ""
    access_token: str | None = None
    user_id: str | None = None
    timeout_s: float = Field(default=10.0, gt=0)

    @property
    def is_configured(self) -> bool:
        return bool(self.supabase_url and self.api_key)

    @classmethod
    def from_env(cls) -> "BackendConfig":
        return cls(
            supabase_url=os.environ.get("EARTHLORD_SUPABASE_URL", "").rstrip("/"),
            api_key=os.environ.get("EARTHLORD_SUPABASE_KEY", ""),
            access_token=os.environ.get("EARTHLORD_ACCESS_TOKEN") or None,
            user_id=os.environ.get("EARTHLORD_USER_ID") or None,
        )

    def headers(self) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": "application/json",
        }


def count_nearby(
    origin: Coordinate, players: Sequence[PlayerLocation], radius_m: float = 1000.0,
    exclude_user_id: str | None = None,
) -> int:
    """Count online players within radius_m of origin, excluding one user."""
    candidates = [
        p for p in players
        if p.is_online and (exclude_user_id is None or p.user_id != exclude_user_id)
    ]
    if not candidates:
        return 0
    distances = haversine_distances(origin, [Coordinate(lat=p.lat, lon=p.lon) for p in candidates])
    return int((distances <= radius_m).sum())


async def fetch_nearby_player_count(
    origin: Coordinate, config: BackendConfig, radius_m: int = 1000,
) -> int:
    """Ask the backend how many other players were active near origin recently.

    Raises:
        NearbyPlayerError: backend not configured, unreachable, or the
            response is not a non-negative integer.
    """
    if not config.is_configured:
        raise NearbyPlayerError(
            "Location backend not configured. Set EARTHLORD_SUPABASE_URL and EARTHLORD_SUPABASE_KEY."
        )
    url = f"{config.supabase_url}/rest/v1/rpc/{NEARBY_COUNT_RPC}"
    payload = {
        "p_latitude": origin.lat,
        "p_longitude": origin.lon,
        "p_radius_meters": radius_m,
        "p_exclude_user_id": config.user_id,
    }
    async with httpx.AsyncClient(timeout=config.timeout_s, headers=config.headers()) as client:
        try:
            response = await client.post(url, json=payload)
            response.raise_for_status()
            count = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("Nearby player query timed out: %s", exc)
            raise NearbyPlayerError("Location backend timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning("Nearby player query returned HTTP %s", exc.response.status_code)
            raise NearbyPlayerError(
                f"Location backend returned HTTP {exc.response.status_code}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Nearby player query failed: %s", exc)
            raise NearbyPlayerError(f"Location backend request failed: {exc}") from exc

    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
        raise NearbyPlayerError(f"Unexpected nearby player count: {count!r}")
    logger.debug("%d player(s) within %dm of (%.6f, %.6f)", count, radius_m, origin.lat, origin.lon)
    return count
