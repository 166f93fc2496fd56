"""Built-in sample POI catalog around central Beijing."""

from earthlord_scout.models import Coordinate, PointOfInterest, POIStatus, POIType

SAMPLE_ORIGIN = Coordinate(lat=39.9042, lon=116.4074)


def sample_catalog() -> list[PointOfInterest]:
    """Five fixture POIs in varying states. Returns fresh copies on every call."""
    return [
        PointOfInterest(
            id="poi-001",
            name="Abandoned Supermarket",
            type=POIType.SUPERMARKET,
            coordinate=Coordinate(lat=39.9042, lon=116.4074),
            status=POIStatus.DISCOVERED,
            has_resources=True,
            description="Collapsed shelves, but food and water may remain.",
        ),
        PointOfInterest(
            id="poi-002",
            name="Hospital Ruins",
            type=POIType.HOSPITAL,
            coordinate=Coordinate(lat=39.9052, lon=116.4084),
            status=POIStatus.LOOTED,
            has_resources=False,
            description="Stripped bare; the medical supplies are gone.",
        ),
        PointOfInterest(
            id="poi-003",
            name="Abandoned Gas Station",
            type=POIType.GAS_STATION,
            coordinate=Coordinate(lat=39.9062, lon=116.4094),
            status=POIStatus.UNDISCOVERED,
            has_resources=True,
            description="May still hold fuel and tools.",
        ),
        PointOfInterest(
            id="poi-004",
            name="Pharmacy Ruins",
            type=POIType.PHARMACY,
            coordinate=Coordinate(lat=39.9032, lon=116.4064),
            status=POIStatus.DISCOVERED,
            has_resources=True,
            description="A small pharmacy with some medicine left.",
        ),
        PointOfInterest(
            id="poi-005",
            name="Factory Ruins",
            type=POIType.FACTORY,
            coordinate=Coordinate(lat=39.9072, lon=116.4104),
            status=POIStatus.UNDISCOVERED,
            has_resources=True,
            description="Scrap metal and tools, if you can get in.",
        ),
    ]
