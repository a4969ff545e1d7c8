"""
Mathematical utility functions for the waygen library.

Spherical geodesy on a body of radius R (latitudes and longitudes in
degrees, distances in meters) and the small amount of linear algebra needed
to turn a static location's local offset into a world-space offset.
"""
import math
import numpy as np
from typing import Tuple, Sequence

# Type definitions for positions
GeoPoint = Tuple[float, float]
Vector3 = Sequence[float]

# Below this |cos(latitude)| the anchor is treated as sitting on a pole
POLE_EPSILON = 1e-4


def normalize_longitude(longitude: float) -> float:
    """
    Wrap a longitude into the [-180, 180) range.

    Examples:
        >>> normalize_longitude(190.0)
        -170.0
        >>> normalize_longitude(-180.0)
        -180.0
    """
    return ((longitude + 180.0) % 360.0) - 180.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float, radius: float) -> float:
    """
    Great-circle distance between two points using the haversine formula.

    Args:
        lat1, lon1: First point (degrees)
        lat2, lon2: Second point (degrees)
        radius: Sphere radius (meters)

    Returns:
        Distance along the surface in meters

    Examples:
        >>> round(haversine_distance(0, 0, 0, 90, 1.0), 6)
        1.570796
    """
    rlat1, rlat2 = math.radians(lat1), math.radians(lat2)
    dlat = rlat2 - rlat1
    dlon = math.radians(lon2 - lon1)
    h = math.sin(dlat / 2.0) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlon / 2.0) ** 2
    h = min(1.0, max(0.0, h))
    return 2.0 * radius * math.asin(math.sqrt(h))


def destination_point(latitude: float, longitude: float, bearing: float, angular_distance: float) -> GeoPoint:
    """
    Point reached by travelling a given angle along a great circle.

    Latitude comes from the spherical law of cosines, longitude from the
    forward-azimuth formula. When the start sits on a pole the longitude is
    held at the start longitude.

    Args:
        latitude: Start latitude (degrees)
        longitude: Start longitude (degrees)
        bearing: Initial bearing, clockwise from north (radians)
        angular_distance: Central angle travelled (radians), i.e. d / R

    Returns:
        (latitude, longitude) of the destination in degrees
    """
    rlat1 = math.radians(latitude)
    rlon1 = math.radians(longitude)
    a = angular_distance

    sin_lat2 = math.sin(rlat1) * math.cos(a) + math.cos(rlat1) * math.sin(a) * math.cos(bearing)
    rlat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))

    if abs(math.cos(rlat1)) < POLE_EPSILON:
        rlon2 = rlon1
    else:
        rlon2 = rlon1 + math.atan2(
            math.sin(bearing) * math.sin(a) * math.cos(rlat1),
            math.cos(a) - math.sin(rlat1) * math.sin(rlat2),
        )

    return math.degrees(rlat2), normalize_longitude(math.degrees(rlon2))


def radial_vector(latitude: float, longitude: float) -> np.ndarray:
    """
    Unit vector from a body's center through (latitude, longitude).

    Body frame: +Z through the north pole, +X through (0, 0), +Y through (0, 90).
    """
    rlat = math.radians(latitude)
    rlon = math.radians(longitude)
    return np.array([
        math.cos(rlat) * math.cos(rlon),
        math.cos(rlat) * math.sin(rlon),
        math.sin(rlat),
    ])


def vector_to_geo(position: Vector3) -> GeoPoint:
    """Latitude/longitude (degrees) of a body-frame position vector."""
    x, y, z = (float(c) for c in position)
    norm = math.sqrt(x * x + y * y + z * z)
    if norm == 0.0:
        return 0.0, 0.0
    latitude = math.degrees(math.asin(max(-1.0, min(1.0, z / norm))))
    longitude = math.degrees(math.atan2(y, x))
    return latitude, longitude


def basis_determinant(i: Vector3, j: Vector3, k: Vector3) -> float:
    """Determinant of the 3x3 basis matrix built from i, j, k (same for rows or columns)."""
    return (i[0] * j[1] * k[2]) + (i[1] * j[2] * k[0]) + (i[2] * j[0] * k[1]) \
        - (i[2] * j[1] * k[0]) - (i[1] * j[0] * k[2]) - (i[0] * j[2] * k[1])


def local_offset_to_world(i: Vector3, j: Vector3, k: Vector3, offset: Vector3) -> np.ndarray:
    """
    Apply the inverse of the basis matrix [i j k] (one basis vector per row) to a local offset.

    Closed-form cofactor expansion: every output component is a sum of 2x2
    cofactor products of i, j, k weighted by the offset components, scaled
    by 1/det.

    Args:
        i: Right unit vector of the local frame
        j: Forward unit vector of the local frame
        k: Up unit vector of the local frame
        offset: Offset expressed in the local frame (right, forward, up)

    Returns:
        World-space offset vector

    Raises:
        ValueError: If the basis is singular
    """
    det = basis_determinant(i, j, k)
    if abs(det) < 1e-12:
        raise ValueError("Local frame basis is singular")

    vx, vy, vz = offset
    world = np.array([
        (j[1] * k[2] - j[2] * k[1]) * vx + (i[2] * k[1] - i[1] * k[2]) * vy + (i[1] * j[2] - i[2] * j[1]) * vz,
        (j[2] * k[0] - j[0] * k[2]) * vx + (i[0] * k[2] - i[2] * k[0]) * vy + (i[2] * j[0] - i[0] * j[2]) * vz,
        (j[0] * k[1] - j[1] * k[0]) * vx + (i[1] * k[0] - i[0] * k[1]) * vy + (i[0] * j[1] - i[1] * j[0]) * vz,
    ])
    return world / det


def widening_factor(attempt: int, fixed_attempts: int = 100) -> float:
    """
    Search-window multiplier for the near-point sampler.

    1 for the first `fixed_attempts` attempts, then 1.01 * (attempt - fixed_attempts + 1).

    Examples:
        >>> widening_factor(99)
        1
        >>> widening_factor(100)
        1.01
    """
    if attempt < fixed_attempts:
        return 1
    return 1.01 * (attempt - fixed_attempts + 1)
