import math
import random

import numpy as np
import pytest
from scipy.spatial.transform import Rotation as R

from waygen.misc.math_utils import (
    basis_determinant,
    destination_point,
    haversine_distance,
    local_offset_to_world,
    normalize_longitude,
    widening_factor,
)
from waygen.procedural.synthesizers import MAX_NEAR_ATTEMPTS, sample_near_point

RADIUS = 600000.0


def test_normalize_longitude():
    assert normalize_longitude(190.0) == pytest.approx(-170.0)
    assert normalize_longitude(-190.0) == pytest.approx(170.0)
    assert normalize_longitude(45.0) == pytest.approx(45.0)


def test_haversine_quarter_circle():
    assert haversine_distance(0, 0, 0, 90, RADIUS) == pytest.approx(math.pi / 2 * RADIUS)
    assert haversine_distance(12.5, 40.0, 12.5, 40.0, RADIUS) == 0.0


def test_destination_point_travels_requested_distance():
    lat, lon = destination_point(20.0, 30.0, math.radians(45.0), 5000.0 / RADIUS)
    assert haversine_distance(20.0, 30.0, lat, lon, RADIUS) == pytest.approx(5000.0, rel=1e-6)


def test_destination_point_due_north():
    lat, lon = destination_point(0.0, 10.0, 0.0, math.radians(5.0))
    assert lat == pytest.approx(5.0)
    assert lon == pytest.approx(10.0)


def test_widening_factor():
    assert widening_factor(0) == 1
    assert widening_factor(99) == 1
    assert widening_factor(100) == pytest.approx(1.01)
    assert widening_factor(199) == pytest.approx(101.0)


def test_near_sampler_distance_in_range_at_equator():
    rng = random.Random(7)
    for _ in range(200):
        sample = sample_near_point(rng, 0.0, 0.0, RADIUS, 1000.0, 2000.0)
        assert sample.accepted
        assert sample.attempts == 1
        d = haversine_distance(0.0, 0.0, sample.latitude, sample.longitude, RADIUS)
        assert 1000.0 - 1e-3 <= d <= 2000.0 + 1e-3


@pytest.mark.parametrize("anchor, min_distance, max_distance", [
    ((62.0, -135.0), 500000.0, math.pi * RADIUS),
    ((-48.5, 170.0), 0.0, 0.5 * math.pi * RADIUS),
    ((30.0, 45.0), 0.9 * math.pi * RADIUS, math.pi * RADIUS),
])
def test_near_sampler_distance_in_range_off_equator(anchor, min_distance, max_distance):
    rng = random.Random(21)
    lat0, lon0 = anchor
    for _ in range(200):
        sample = sample_near_point(rng, lat0, lon0, RADIUS, min_distance, max_distance)
        assert sample.accepted
        d = haversine_distance(lat0, lon0, sample.latitude, sample.longitude, RADIUS)
        assert min_distance - 1.0 <= d <= max_distance + 1.0
        assert -90.0 <= sample.latitude <= 90.0
        assert -180.0 <= sample.longitude <= 180.0


def test_near_sampler_pole_holds_longitude():
    rng = random.Random(3)
    for _ in range(50):
        sample = sample_near_point(rng, 90.0, 37.0, RADIUS, 1000.0, 2000.0)
        assert sample.longitude == pytest.approx(37.0)
        assert sample.latitude < 90.0


def test_near_sampler_terminates_with_last_sample():
    rng = random.Random(11)
    sample = sample_near_point(rng, 45.0, -60.0, RADIUS, 1000.0, 2000.0, accept=lambda lat, lon: False)
    assert not sample.accepted
    assert sample.attempts == MAX_NEAR_ATTEMPTS
    assert math.isfinite(sample.latitude)
    assert math.isfinite(sample.longitude)
    assert -90.0 <= sample.latitude <= 90.0


def test_near_sampler_widens_after_fixed_window():
    rng = random.Random(5)
    calls = []

    def accept(lat, lon):
        calls.append((lat, lon))
        return len(calls) > 150

    sample = sample_near_point(rng, 0.0, 0.0, RADIUS, 1000.0, 2000.0, accept=accept)
    assert sample.accepted
    assert sample.attempts == 151
    # Attempt 150 may land up to 2000 * 1.01 * 51 m away
    assert sample.distance <= 2000.0 * 1.01 * 51 + 1e-6


def test_local_offset_matches_numpy_inverse_for_rotated_frame():
    rows = R.from_euler("zyx", [30.0, 20.0, 10.0], degrees=True).as_matrix()
    i, j, k = rows
    offset = np.array([120.0, -45.0, 8.0])

    world = local_offset_to_world(i, j, k, offset)

    np.testing.assert_allclose(world, np.linalg.inv(np.array([i, j, k])) @ offset, atol=1e-9)
    # For an orthonormal frame that is just the weighted sum of the basis vectors
    np.testing.assert_allclose(world, offset[0] * i + offset[1] * j + offset[2] * k, atol=1e-9)


def test_local_offset_matches_numpy_inverse_for_general_basis():
    i = np.array([2.0, 0.5, -1.0])
    j = np.array([0.3, 1.5, 0.2])
    k = np.array([-0.4, 0.1, 3.0])
    offset = np.array([1.0, 2.0, 3.0])

    expected = np.linalg.inv(np.array([i, j, k])) @ offset
    np.testing.assert_allclose(local_offset_to_world(i, j, k, offset), expected, atol=1e-9)
    assert basis_determinant(i, j, k) == pytest.approx(np.linalg.det(np.array([i, j, k])))


def test_local_offset_singular_basis():
    with pytest.raises(ValueError):
        local_offset_to_world([1, 0, 0], [2, 0, 0], [0, 0, 1], [1, 1, 1])
