"""
Coordinate synthesis for each marker placement type.

Each function takes a pending marker plus the pieces of the physical model
it needs and writes latitude/longitude onto the marker. Altitude is left to
the altitude policy.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from ..classes.bodies import CelestialBody, StaticLocation, StaticLocationKind
from ..classes.markers import MarkerInstance
from ..misc.math_utils import destination_point, local_offset_to_world, widening_factor
from ..terrain.environment import PlanetaryEnvironment

MAX_NEAR_ATTEMPTS = 10000
FIXED_WINDOW_ATTEMPTS = 100

AcceptFunction = Callable[[float, float], bool]


@dataclass
class NearPointSample:
    """Outcome of the near-point sampler."""
    latitude: float
    longitude: float
    distance: float
    attempts: int
    accepted: bool


def sample_near_point(rng: random.Random,
                      latitude: float,
                      longitude: float,
                      radius: float,
                      min_distance: float,
                      max_distance: float,
                      accept: Optional[AcceptFunction] = None,
                      max_attempts: int = MAX_NEAR_ATTEMPTS) -> NearPointSample:
    """
    Draw a point at a random distance and bearing from an anchor.

    For the first 100 attempts the distance lies in [min_distance,
    max_distance]. After that the window widens every attempt (max grows,
    min shrinks) so that a point is reachable even when the configured
    range is not. If nothing is accepted within `max_attempts`, the last
    drawn point is returned with `accepted=False`.

    Args:
        rng: Generator to draw from
        latitude, longitude: Anchor (degrees)
        radius: Body radius (meters)
        min_distance, max_distance: Target surface distance range (meters)
        accept: Predicate on (latitude, longitude); None accepts the first draw
        max_attempts: Attempt budget

    Returns:
        NearPointSample with the chosen point
    """
    sample = NearPointSample(latitude, longitude, 0.0, 0, False)

    for attempt in range(max_attempts):
        window = widening_factor(attempt, FIXED_WINDOW_ATTEMPTS)
        upper = max_distance * window
        lower = min_distance / window

        distance = lower + rng.random() * (upper - lower)
        bearing = rng.random() * 2.0 * math.pi

        lat2, lon2 = destination_point(latitude, longitude, bearing, distance / radius)
        sample = NearPointSample(lat2, lon2, distance, attempt + 1, False)

        if accept is None or accept(lat2, lon2):
            sample.accepted = True
            break

    return sample


def surface_acceptance(body: CelestialBody, underwater: bool, water_allowed: bool) -> AcceptFunction:
    """
    Water/land polarity check for a candidate point.

    Anything goes on bodies without a solid surface or without an ocean.
    Otherwise underwater markers need elevation < 0, and land markers need
    elevation > 0 unless water is allowed.
    """
    if not body.has_solid_surface:
        water_allowed = True

    def accept(lat: float, lon: float) -> bool:
        if not body.has_solid_surface or not body.ocean:
            return True
        if water_allowed and not underwater:
            return True
        elevation = body.surface_elevation(lat, lon)
        if underwater:
            return elevation < 0.0
        return elevation > 0.0

    return accept


def place_fixed(marker: MarkerInstance) -> Tuple[float, float]:
    """Fixed markers carry their coordinates from the definition."""
    return marker.latitude, marker.longitude


def place_random_uniform(marker: MarkerInstance,
                         body: CelestialBody,
                         environment: PlanetaryEnvironment,
                         rng: random.Random) -> Tuple[float, float]:
    """
    Uniformly random surface point.

    Underwater markers on an ocean body are redrawn until the point lies
    below sea level. The retry is unbounded: an ocean body with no sea
    floor anywhere never returns.
    """
    while True:
        lat, lon = environment.choose_random_position(body, rng, marker.water_allowed, marker.force_equatorial)
        if marker.underwater and body.ocean and body.surface_elevation(lat, lon) >= 0.0:
            continue
        break

    marker.latitude, marker.longitude = lat, lon
    return lat, lon


def place_near(marker: MarkerInstance,
               body: CelestialBody,
               anchor_latitude: float,
               anchor_longitude: float,
               rng: random.Random) -> NearPointSample:
    """Distance-constrained placement around a resolved anchor."""
    accept = surface_acceptance(body, marker.underwater, marker.water_allowed)
    sample = sample_near_point(
        rng, anchor_latitude, anchor_longitude, body.radius,
        marker.min_distance, marker.max_distance, accept,
    )
    marker.latitude, marker.longitude = sample.latitude, sample.longitude
    return sample


def place_at_static_location(marker: MarkerInstance,
                             body: CelestialBody,
                             location: StaticLocation) -> Tuple[float, float]:
    """
    Position relative to a static location.

    A non-zero offset is expressed in the location's local frame and moved
    into world space through the inverse of that frame's basis. Launch
    sites without an offset use their spawn point coordinates.
    """
    offset = np.asarray(marker.static_offset, dtype=float)
    if np.any(offset):
        world_offset = local_offset_to_world(location.right, location.forward, location.up, offset)
        point = np.asarray(location.position, dtype=float) + world_offset
        lat, lon = body.get_latitude(point), body.get_longitude(point)
    elif location.kind == StaticLocationKind.LAUNCH_SITE:
        lat, lon = location.latitude, location.longitude
    else:
        point = np.asarray(location.position, dtype=float)
        lat, lon = body.get_latitude(point), body.get_longitude(point)

    marker.latitude, marker.longitude = lat, lon
    return lat, lon
