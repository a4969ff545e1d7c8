import math
import random

import pytest

from waygen.classes.markers import MarkerInstance, MarkerType
from waygen.misc.math_utils import haversine_distance
from waygen.procedural.altitude_policy import AltitudePolicy
from waygen.procedural.synthesizers import (
    place_at_static_location,
    place_near,
    place_random_uniform,
    surface_acceptance,
)
from waygen.terrain import environment as environment_module


def make_marker(marker_type=MarkerType.FIXED, **kwargs):
    kwargs.setdefault("body_name", "Terra")
    return MarkerInstance(index=0, marker_type=marker_type, **kwargs)


def test_surface_acceptance_polarity(terra, luna, jove):
    underwater = surface_acceptance(terra, underwater=True, water_allowed=True)
    assert underwater(0.0, -90.0)
    assert not underwater(0.0, 90.0)

    land_only = surface_acceptance(terra, underwater=False, water_allowed=False)
    assert land_only(0.0, 90.0)
    assert not land_only(0.0, -90.0)

    assert surface_acceptance(terra, underwater=False, water_allowed=True)(0.0, -90.0)
    assert surface_acceptance(luna, underwater=True, water_allowed=False)(0.0, 0.0)
    assert surface_acceptance(jove, underwater=False, water_allowed=False)(0.0, 0.0)


def test_underwater_uniform_draws_are_below_sea_level(terra, environment):
    for seed in range(25):
        marker = make_marker(MarkerType.RANDOM_UNIFORM, underwater=True)
        lat, lon = place_random_uniform(marker, terra, environment, random.Random(seed))
        assert terra.surface_elevation(lat, lon) < 0.0
        assert (marker.latitude, marker.longitude) == (lat, lon)


def test_land_only_uniform_draws_are_above_sea_level(terra, environment):
    for seed in range(25):
        marker = make_marker(MarkerType.RANDOM_UNIFORM, water_allowed=False)
        lat, lon = place_random_uniform(marker, terra, environment, random.Random(seed))
        assert terra.surface_elevation(lat, lon) > 0.0


def test_force_equatorial_band(terra, environment):
    for seed in range(25):
        marker = make_marker(MarkerType.RANDOM_UNIFORM, force_equatorial=True)
        lat, _ = place_random_uniform(marker, terra, environment, random.Random(seed))
        assert abs(lat) <= environment_module.EQUATORIAL_BAND_DEGREES + 1e-9


def test_place_near_underwater(terra):
    marker = make_marker(MarkerType.RANDOM_NEAR, underwater=True, min_distance=1000.0, max_distance=2000.0)
    sample = place_near(marker, terra, 0.0, 0.0, random.Random(2))
    assert sample.accepted
    assert terra.surface_elevation(marker.latitude, marker.longitude) < 0.0
    d = haversine_distance(0.0, 0.0, marker.latitude, marker.longitude, terra.radius)
    assert 1000.0 - 1e-3 <= d <= 2000.0 + 1e-3


def test_static_city_without_offset(terra, capital):
    marker = make_marker(MarkerType.STATIC_CITY, static_location_name="Capital")
    lat, lon = place_at_static_location(marker, terra, capital)
    assert lat == pytest.approx(10.0)
    assert lon == pytest.approx(20.0)


def test_static_launch_site_without_offset(terra, launch_pad):
    marker = make_marker(MarkerType.STATIC_LAUNCH_SITE, static_location_name="Pad A")
    assert place_at_static_location(marker, terra, launch_pad) == (-0.1, -74.5)


def test_static_up_offset_keeps_position(terra, capital):
    marker = make_marker(MarkerType.STATIC_CITY, static_offset=(0.0, 0.0, 500.0))
    lat, lon = place_at_static_location(marker, terra, capital)
    assert lat == pytest.approx(10.0)
    assert lon == pytest.approx(20.0)


def test_static_forward_offset_moves_north(terra, launch_pad):
    # Launch pad frame has no heading: forward is north
    marker = make_marker(MarkerType.STATIC_LAUNCH_SITE, static_offset=(0.0, 1000.0, 0.0))
    lat, lon = place_at_static_location(marker, terra, launch_pad)
    expected = -0.1 + math.degrees(math.atan(1000.0 / (terra.radius + 70.0)))
    assert lat == pytest.approx(expected, rel=1e-6)
    assert lon == pytest.approx(-74.5)


def test_static_heading_rotates_offset(terra, capital):
    # Capital is rotated 30 degrees clockwise, so forward points north-east
    marker = make_marker(MarkerType.STATIC_CITY, static_offset=(0.0, 1000.0, 0.0))
    lat, lon = place_at_static_location(marker, terra, capital)
    assert lat > 10.0
    assert lon > 20.0


def test_random_altitude_underwater_between_floor_and_sea_level(terra):
    floor = terra.surface_elevation(0.0, -90.0)
    for seed in range(20):
        marker = make_marker(latitude=0.0, longitude=-90.0, random_altitude=True, underwater=True)
        altitude = AltitudePolicy(random.Random(seed)).assign(marker, terra)
        assert floor <= altitude <= 0.0


def test_random_altitude_in_atmosphere(terra, jove):
    for seed in range(20):
        marker = make_marker(latitude=0.0, longitude=45.0, random_altitude=True)
        assert 0.0 <= AltitudePolicy(random.Random(seed)).assign(marker, terra) <= terra.atmosphere_depth
        marker = make_marker(body_name="Jove", random_altitude=True)
        assert 0.0 <= AltitudePolicy(random.Random(seed)).assign(marker, jove) <= jove.atmosphere_depth


def test_random_altitude_airless_body_is_surface(luna):
    marker = make_marker(body_name="Luna", random_altitude=True, altitude=123.0)
    assert AltitudePolicy(random.Random(0)).assign(marker, luna) == 0.0


def test_fixed_underwater_altitude_clamped_to_floor(terra):
    deep = make_marker(latitude=0.0, longitude=-90.0, altitude=-5000.0, underwater=True)
    assert AltitudePolicy().assign(deep, terra) == pytest.approx(-2000.0)

    shallow = make_marker(latitude=0.0, longitude=-90.0, altitude=-500.0, underwater=True)
    assert AltitudePolicy().assign(shallow, terra) == -500.0


def test_fixed_altitude_unchanged(terra):
    marker = make_marker(latitude=0.0, longitude=-90.0, altitude=-5000.0)
    assert AltitudePolicy().assign(marker, terra) == -5000.0
