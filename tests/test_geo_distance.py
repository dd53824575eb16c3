import math

import pytest

from geoproximity.core.geo import EARTH_RADIUS_M, GeoPoint, distance_m, haversine_m

KITCHENER_COLLEGE = GeoPoint(lat=43.39681577710739, lon=-80.40618896484375)
WATERLOO_UNIVERSITY = GeoPoint(lat=43.473274576043096, lon=-80.54450511932373)

POINTS = [
    GeoPoint(lat=0.0, lon=0.0),
    GeoPoint(lat=90.0, lon=0.0),
    GeoPoint(lat=-90.0, lon=180.0),
    GeoPoint(lat=43.4, lon=-80.4),
    GeoPoint(lat=-33.8688, lon=151.2093),
    GeoPoint(lat=51.5074, lon=-0.1278),
    GeoPoint(lat=0.0, lon=-180.0),
]


def _reference_haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    # Independent asin-form haversine used as an oracle.
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    h = math.sin((lat2 - lat1) / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(
        math.radians(b.lon - a.lon) / 2
    ) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, h)))


def test_one_degree_of_longitude_at_equator():
    assert distance_m(GeoPoint(0, 0), GeoPoint(0, 1)) == 111_319


def test_kitchener_pair_matches_reference_haversine():
    d = distance_m(KITCHENER_COLLEGE, WATERLOO_UNIVERSITY)
    expected = _reference_haversine_m(KITCHENER_COLLEGE, WATERLOO_UNIVERSITY)
    assert abs(d - math.floor(expected)) <= 1
    # ~8.5 km north/south and ~11.2 km east/west.
    assert 13_900 < d < 14_200


def test_distance_is_floored_haversine():
    d = haversine_m(KITCHENER_COLLEGE, WATERLOO_UNIVERSITY)
    assert distance_m(KITCHENER_COLLEGE, WATERLOO_UNIVERSITY) == math.floor(d)
    assert isinstance(distance_m(KITCHENER_COLLEGE, WATERLOO_UNIVERSITY), int)


@pytest.mark.parametrize("a", POINTS)
@pytest.mark.parametrize("b", POINTS)
def test_symmetric_non_negative_and_finite(a, b):
    d_ab = distance_m(a, b)
    assert d_ab == distance_m(b, a)
    assert d_ab >= 0
    assert math.isfinite(haversine_m(a, b))


@pytest.mark.parametrize("p", POINTS)
def test_identity_is_zero(p):
    assert distance_m(p, p) == 0
    assert haversine_m(p, p) == 0.0


@pytest.mark.parametrize(
    "a, b",
    [
        (GeoPoint(0, 0), GeoPoint(0, 180)),
        (GeoPoint(10, 20), GeoPoint(-10, -160)),
        (GeoPoint(43.39681577710739, -80.40618896484375), GeoPoint(-43.39681577710739, 99.59381103515625)),
        (GeoPoint(90, 0), GeoPoint(-90, 0)),
    ],
)
def test_antipodal_points_give_half_circumference(a, b):
    d = haversine_m(a, b)
    assert not math.isnan(d)
    assert d == pytest.approx(math.pi * EARTH_RADIUS_M, abs=5.0)
    assert abs(distance_m(a, b) - math.floor(math.pi * EARTH_RADIUS_M)) <= 5
