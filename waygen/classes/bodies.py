# waygen/classes/bodies.py
"""
Physical-model data consumed by the marker engine.

Bodies, static locations and craft positions are supplied by the host; the
engine only reads them. Surface elevation is an oracle callable taking
(latitude, longitude) in degrees and returning meters above sea level.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence

import numpy as np
from scipy.spatial.transform import Rotation as R

from ..misc.math_utils import radial_vector, vector_to_geo

ElevationFunction = Callable[[float, float], float]


@dataclass
class CelestialBody:
    """A body that markers can be placed on."""
    name: str
    radius: float
    has_solid_surface: bool = True
    ocean: bool = False
    atmosphere: bool = False
    atmosphere_depth: float = 0.0
    elevation_fn: Optional[ElevationFunction] = field(default=None, repr=False, compare=False)

    def surface_elevation(self, latitude: float, longitude: float) -> float:
        """Terrain height relative to sea level at a point (negative under the ocean)."""
        if self.elevation_fn is None:
            return 0.0
        return float(self.elevation_fn(latitude, longitude))

    def get_world_position(self, latitude: float, longitude: float, altitude: float = 0.0) -> np.ndarray:
        """Body-frame position of a point at the given altitude above sea level."""
        return radial_vector(latitude, longitude) * (self.radius + altitude)

    def get_latitude(self, position: Sequence[float]) -> float:
        return vector_to_geo(position)[0]

    def get_longitude(self, position: Sequence[float]) -> float:
        return vector_to_geo(position)[1]


class StaticLocationKind(Enum):
    """Kinds of named static locations."""
    CITY = "city"
    LAUNCH_SITE = "launch_site"


@dataclass
class StaticLocation:
    """
    Named fixed point of interest with its own local frame.

    `right`, `forward` and `up` are the local frame's unit vectors expressed
    in the body frame; `position` is the frame origin. For launch sites the
    spawn point latitude/longitude are what a marker without offset uses.
    """
    name: str
    body_name: str
    kind: StaticLocationKind
    position: np.ndarray
    right: np.ndarray
    forward: np.ndarray
    up: np.ndarray
    latitude: float
    longitude: float

    @classmethod
    def at(cls,
           name: str,
           body: CelestialBody,
           latitude: float,
           longitude: float,
           altitude: float = 0.0,
           heading: float = 0.0,
           kind: StaticLocationKind = StaticLocationKind.CITY) -> "StaticLocation":
        """
        Build a static location sitting on a body.

        Args:
            name: Registry name
            body: Body the location is on
            latitude, longitude: Location (degrees)
            altitude: Height above sea level of the frame origin (meters)
            heading: Rotation of the local frame about its up axis, clockwise from north (degrees)
            kind: City or launch site
        """
        up = radial_vector(latitude, longitude)
        rlon = math.radians(longitude)
        east = np.array([-math.sin(rlon), math.cos(rlon), 0.0])
        north = np.cross(up, east)

        # Clockwise heading seen from above is a negative rotation about up
        yaw = R.from_rotvec(-math.radians(heading) * up)
        right, forward = yaw.apply([east, north])

        return cls(
            name=name,
            body_name=body.name,
            kind=kind,
            position=body.get_world_position(latitude, longitude, altitude),
            right=right,
            forward=forward,
            up=up,
            latitude=latitude,
            longitude=longitude,
        )


@dataclass
class CraftPosition:
    """Where an associated craft currently is."""
    key: str
    craft_name: str
    body_name: str
    latitude: float
    longitude: float
