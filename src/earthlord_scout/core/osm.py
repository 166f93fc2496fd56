"""Nearby POI catalog from OpenStreetMap via the Overpass API."""

import logging

import httpx

from .selection import haversine_distances
from earthlord_scout.models import Coordinate, PointOfInterest, POIStatus, POIType

logger = logging.getLogger(__name__)

OVERPASS_SERVERS = [
    "https://overpass.kumi.systems/api/interpreter",
    "https://overpass-api.de/api/interpreter",
    "https://overpass.openstreetmap.ru/api/interpreter",
]

# (tag key, tag value) -> POI type; first match wins
TAG_TYPES = [
    (("amenity", "hospital"), POIType.HOSPITAL),
    (("amenity", "clinic"), POIType.HOSPITAL),
    (("amenity", "pharmacy"), POIType.PHARMACY),
    (("shop", "chemist"), POIType.PHARMACY),
    (("amenity", "fuel"), POIType.GAS_STATION),
    (("shop", "supermarket"), POIType.SUPERMARKET),
    (("shop", "mall"), POIType.MALL),
    (("shop", "department_store"), POIType.MALL),
    (("shop", "convenience"), POIType.CONVENIENCE),
    (("amenity", "restaurant"), POIType.RESTAURANT),
    (("amenity", "fast_food"), POIType.RESTAURANT),
    (("amenity", "cafe"), POIType.CAFE),
    (("amenity", "school"), POIType.SCHOOL),
    (("building", "warehouse"), POIType.WAREHOUSE),
    (("landuse", "industrial"), POIType.FACTORY),
    (("man_made", "works"), POIType.FACTORY),
]

MAX_POIS = 100


async def _query_overpass(query: str) -> list[dict]:
    """Execute an Overpass API query with server fallback."""
    async with httpx.AsyncClient(timeout=45.0, headers={"User-Agent": "earthlord-scout/1.0"}) as client:
        for server in OVERPASS_SERVERS:
            try:
                response = await client.post(server, data={"data": query})
                response.raise_for_status()
                data = response.json()
                return data.get("elements", [])
            except httpx.TimeoutException as exc:
                logger.warning("Overpass server %s timed out: %s", server, exc)
                continue
            except httpx.HTTPStatusError as exc:
                logger.warning(
                    "Overpass server %s returned HTTP %s", server, exc.response.status_code
                )
                continue
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Overpass server %s failed: %s", server, exc)
                continue
    logger.warning("All Overpass servers failed for query")
    return []


def _poi_type(tags: dict) -> POIType | None:
    for (key, value), poi_type in TAG_TYPES:
        if tags.get(key) == value:
            return poi_type
    if "shop" in tags:
        return POIType.STORE
    return None


def _element_coordinate(element: dict) -> Coordinate | None:
    """Node position, or the center Overpass reports for ways and relations."""
    if "lat" in element and "lon" in element:
        return Coordinate(lat=element["lat"], lon=element["lon"])
    center = element.get("center")
    if center:
        return Coordinate(lat=center["lat"], lon=center["lon"])
    return None


def _parse_pois(elements: list[dict]) -> list[PointOfInterest]:
    pois = []
    seen = set()
    for elem in elements:
        tags = elem.get("tags", {})
        poi_type = _poi_type(tags)
        coordinate = _element_coordinate(elem)
        if poi_type is None or coordinate is None:
            continue
        poi_id = f"osm-{elem.get('type', 'node')}-{elem.get('id', 0)}"
        if poi_id in seen:
            continue
        seen.add(poi_id)
        name = tags.get("name", f"Abandoned {poi_type.value.replace('_', ' ')}")
        pois.append(PointOfInterest(
            id=poi_id,
            name=name,
            type=poi_type,
            coordinate=coordinate,
            status=POIStatus.UNDISCOVERED,
            has_resources=True,
            description=tags.get("description", ""),
        ))
    return pois


def build_poi_query(origin: Coordinate, radius_m: float) -> str:
    around = f"around:{radius_m:.0f},{origin.lat},{origin.lon}"
    return (
        f'[out:json][timeout:30];('
        f'nwr["amenity"~"^(hospital|clinic|pharmacy|fuel|restaurant|fast_food|cafe|school)$"]({around});'
        f'nwr["shop"]({around});'
        f'nwr["building"="warehouse"]({around});'
        f'nwr["landuse"="industrial"]({around});'
        f'nwr["man_made"="works"]({around});'
        f');out center tags;'
    )


async def fetch_osm_pois(origin: Coordinate, radius_m: float = 1000.0) -> list[PointOfInterest]:
    """Fetch lootable places within radius_m of origin.

    Returns at most MAX_POIS POIs, all undiscovered. An empty list means
    nothing was found or every Overpass server failed.
    """
    radius_m = max(1.0, radius_m)
    elements = await _query_overpass(build_poi_query(origin, radius_m))
    pois = _parse_pois(elements)
    if len(pois) > MAX_POIS:
        # keep the nearest
        distances = haversine_distances(origin, [p.coordinate for p in pois])
        pois = [pois[i] for i in distances.argsort(kind="mergesort")[:MAX_POIS]]
    logger.debug("Overpass returned %d element(s), %d POI(s)", len(elements), len(pois))
    return pois
