"""
Unit tests for great-circle distance, GeoPoint and distance labels
"""

import math

import pytest

from eventdesk.platform.exception.exceptions import DomainError
from eventdesk.service.proximity.domain.geo import (
    EARTH_RADIUS_KM,
    GeoPoint,
    format_distance,
    haversine_distance_km,
)
from test.shared.utils import DELHI, MUMBAI


@pytest.mark.unit
class TestHaversine:
    def test_same_point_is_zero(self) -> None:
        assert haversine_distance_km(*MUMBAI, *MUMBAI) == 0

    def test_mumbai_to_delhi(self) -> None:
        assert 1100 < haversine_distance_km(*MUMBAI, *DELHI) < 1200

    def test_symmetric(self) -> None:
        assert haversine_distance_km(*MUMBAI, *DELHI) == pytest.approx(
            haversine_distance_km(*DELHI, *MUMBAI)
        )

    def test_one_degree_of_latitude(self) -> None:
        assert haversine_distance_km(0, 0, 1, 0) == pytest.approx(
            EARTH_RADIUS_KM * math.pi / 180
        )

    def test_antipodes_are_half_the_circumference(self) -> None:
        assert haversine_distance_km(0, 0, 0, 180) == pytest.approx(EARTH_RADIUS_KM * math.pi)

    @pytest.mark.parametrize('latitude', [2.5, 5.5, 8.0, 45.0, 89.9])
    def test_near_antipodal_points(self, latitude: float) -> None:
        distance = haversine_distance_km(latitude, 10.0, -latitude, -170.0)

        assert distance == pytest.approx(EARTH_RADIUS_KM * math.pi)

    def test_crossing_the_antimeridian(self) -> None:
        assert haversine_distance_km(0, 179.5, 0, -179.5) == pytest.approx(
            EARTH_RADIUS_KM * math.pi / 180
        )


@pytest.mark.unit
class TestGeoPoint:
    def test_distance_km(self) -> None:
        mumbai = GeoPoint(*MUMBAI)
        delhi = GeoPoint(*DELHI)

        assert mumbai.distance_km(delhi) == pytest.approx(haversine_distance_km(*MUMBAI, *DELHI))

    def test_accepts_numeric_strings(self) -> None:
        assert GeoPoint('19.5', '72') == GeoPoint(19.5, 72.0)

    @pytest.mark.parametrize('latitude,longitude', [(90.01, 0), (-91, 0), (0, 180.5), (0, -181)])
    def test_rejects_out_of_range(self, latitude: float, longitude: float) -> None:
        with pytest.raises(DomainError):
            GeoPoint(latitude, longitude)

    def test_poles_and_antimeridian_are_valid(self) -> None:
        GeoPoint(90, 180)
        GeoPoint(-90, -180)


@pytest.mark.unit
class TestFormatDistance:
    @pytest.mark.parametrize(
        'distance_km,label',
        [(0, '0 m'), (0.25, '250 m'), (1, '1.0 km'), (5.234, '5.2 km'), (12.6, '13 km')],
    )
    def test_labels(self, distance_km: float, label: str) -> None:
        assert format_distance(distance_km) == label
