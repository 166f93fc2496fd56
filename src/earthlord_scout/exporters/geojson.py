"""GeoJSON export of territory rings for map layers."""

import json

from ..core.models import TerritoryPolygon


def territory_feature(polygon: TerritoryPolygon, ring: str = "render") -> dict:
    """GeoJSON Feature for the render (display datum) or raw ring."""
    coords = polygon.render_coordinates if ring == "render" else polygon.raw_coordinates
    positions = [[c.lon, c.lat] for c in coords]
    # GeoJSON linear rings must end exactly where they start
    if positions[0] != positions[-1]:
        positions.append(positions[0])
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [positions]},
        "properties": {
            "area_m2": polygon.area,
            "point_count": polygon.point_count,
            "datum": coords[0].datum,
        },
    }


def export_geojson(polygon: TerritoryPolygon, output_path: str, ring: str = "render") -> dict:
    feature = territory_feature(polygon, ring=ring)
    collection = {"type": "FeatureCollection", "features": [feature]}
    with open(output_path, "w") as f:
        json.dump(collection, f, indent=2)
    return {"points": len(feature["geometry"]["coordinates"][0]), "datum": feature["properties"]["datum"]}
