"""Tests for domain Pydantic models."""
import pytest
from pydantic import ValidationError


class TestCoordinate:
    def test_valid_coordinate(self):
        from earthlord_scout.models import Coordinate
        c = Coordinate(lat=39.9, lon=116.4)
        assert c.lat == 39.9
        assert c.datum == "wgs84"

    def test_lat_out_of_range(self):
        from earthlord_scout.models import Coordinate
        with pytest.raises(ValidationError):
            Coordinate(lat=91.0, lon=0.0)

    def test_lon_out_of_range(self):
        from earthlord_scout.models import Coordinate
        with pytest.raises(ValidationError):
            Coordinate(lat=0.0, lon=-181.0)

    def test_unknown_datum_rejected(self):
        from earthlord_scout.models import Coordinate
        with pytest.raises(ValidationError):
            Coordinate(lat=0.0, lon=0.0, datum="bd09")

    def test_is_frozen(self):
        from earthlord_scout.models import Coordinate
        c = Coordinate(lat=1.0, lon=2.0)
        with pytest.raises(ValidationError):
            c.lat = 5.0

    def test_equality_by_value(self):
        from earthlord_scout.models import Coordinate
        assert Coordinate(lat=1.0, lon=2.0) == Coordinate(lat=1.0, lon=2.0)

    def test_is_close_within_epsilon(self):
        from earthlord_scout.models import Coordinate
        a = Coordinate(lat=39.9, lon=116.4)
        b = Coordinate(lat=39.9 + 5e-7, lon=116.4)
        assert a.is_close(b)
        assert not a.is_close(Coordinate(lat=39.9 + 5e-6, lon=116.4))

    def test_as_dict(self):
        from earthlord_scout.models import Coordinate
        assert Coordinate(lat=1.5, lon=2.5).as_dict() == {"lat": 1.5, "lon": 2.5}


class TestPointOfInterest:
    def test_defaults(self):
        from earthlord_scout.models import PointOfInterest, Coordinate, POIStatus, POIType
        poi = PointOfInterest(id="p1", name="Shed", coordinate=Coordinate(lat=0, lon=0))
        assert poi.status == POIStatus.UNDISCOVERED
        assert poi.type == POIType.RUIN
        assert poi.has_resources is True
        assert not poi.is_looted

    def test_looted(self):
        from earthlord_scout.models import PointOfInterest, Coordinate
        poi = PointOfInterest(id="p1", name="Shed", coordinate=Coordinate(lat=0, lon=0), status="looted")
        assert poi.is_looted

    def test_invalid_status(self):
        from earthlord_scout.models import PointOfInterest, Coordinate
        with pytest.raises(ValidationError):
            PointOfInterest(id="p1", name="Shed", coordinate=Coordinate(lat=0, lon=0), status="burned")


class TestPOIType:
    def test_every_type_has_danger_level(self):
        from earthlord_scout.models import POIType
        for poi_type in POIType:
            assert 1 <= poi_type.danger_level <= 5

    def test_hospital_more_dangerous_than_cafe(self):
        from earthlord_scout.models import POIType
        assert POIType.HOSPITAL.danger_level > POIType.CAFE.danger_level


class TestTerritory:
    def test_requires_three_points(self):
        from earthlord_scout.models import Territory, Coordinate
        with pytest.raises(ValidationError):
            Territory(id="t1", user_id="u1", path=[Coordinate(lat=0, lon=0), Coordinate(lat=1, lon=1)])

    def test_path_from_dicts(self):
        from earthlord_scout.models import Territory
        t = Territory(
            id="t1", user_id="u1",
            path=[{"lat": 0, "lon": 0}, {"lat": 0, "lon": 1}, {"lat": 1, "lon": 1}],
        )
        assert len(t.path) == 3
        assert t.is_active


class TestPlayerLocation:
    def test_negative_accuracy_rejected(self):
        from earthlord_scout.models import PlayerLocation
        with pytest.raises(ValidationError):
            PlayerLocation(user_id="u", lat=0, lon=0, accuracy=-1)
