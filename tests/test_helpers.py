import math
import pytest
from errors import InvalidFormat
from services.helpers import haversine, km_to_miles, distance_miles, validate_coordinates, decode_polyline


def test_haversine_is_zero_for_identical_points():
    assert haversine(40.0, -74.0, 40.0, -74.0) == 0


@pytest.mark.parametrize("a, b", [
    ((40.0, -74.0), (40.5, -74.0)),
    ((51.5074, -0.1278), (48.8566, 2.3522)),
    ((-33.8688, 151.2093), (35.6762, 139.6503)),
])
def test_haversine_is_symmetric(a, b):
    assert haversine(*a, *b) == pytest.approx(haversine(*b, *a))


def test_haversine_london_to_paris():
    assert haversine(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(343.5, abs=1)


def test_km_to_miles():
    assert km_to_miles(100) == pytest.approx(62.1371)


def test_distances_from_rider_location():
    rider = (40.0, -74.0)
    assert distance_miles(rider, (40.5, -74.0)) == pytest.approx(34.55, abs=0.05)
    assert distance_miles(rider, (40.01, -74.0)) == pytest.approx(0.69, abs=0.01)


def test_validate_coordinates_accepts_pairs_and_absence():
    assert validate_coordinates(None, None) is None
    assert validate_coordinates(40.0, -74.0) == (40.0, -74.0)


@pytest.mark.parametrize("lat, lng", [
    (91.0, 0.0),
    (-90.5, 0.0),
    (0.0, 180.5),
    (math.nan, 0.0),
    (40.0, None),
])
def test_validate_coordinates_rejects_bad_input(lat, lng):
    with pytest.raises(InvalidFormat):
        validate_coordinates(lat, lng)


def test_decode_polyline():
    points = decode_polyline("_p~iF~ps|U_ulLnnqC_mqNvxq`@")
    assert points == [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]
    assert decode_polyline("") == []
