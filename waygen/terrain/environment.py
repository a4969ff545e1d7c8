# -*- coding: utf-8 -*-
"""
Planetary environment: the physical-model oracle the marker engine queries.

Holds the known bodies, the static-location registry and the craft
association table, and provides the default uniform random surface point
oracle.
"""
import math
import os
import random
from typing import Dict, Iterable, List, Optional, Tuple

from ..classes.bodies import CelestialBody, CraftPosition, StaticLocation, StaticLocationKind
from ..misc.logger import create_logger

# --- Equatorial band (degrees of latitude) ---
# Latitude half-width used for markers flagged forceEquatorial.
# Can be overridden at runtime via WAYGEN_EQUATORIAL_BAND
try:
    EQUATORIAL_BAND_DEGREES = float(os.getenv('WAYGEN_EQUATORIAL_BAND', '5'))
except ValueError:
    EQUATORIAL_BAND_DEGREES = 5.0

# --- Uniform sampler retries ---
# Maximum draws when looking for dry land on an ocean body; the last draw is kept.
try:
    MAX_SURFACE_ATTEMPTS = int(os.getenv('WAYGEN_MAX_SURFACE_ATTEMPTS', '1000'))
except ValueError:
    MAX_SURFACE_ATTEMPTS = 1000


class PlanetaryEnvironment:
    """
    Registry of bodies, static locations and craft associations.

    All lookups return None when the requested entity is not (yet)
    available; the engine treats that as a reason to defer, not an error.
    """

    def __init__(self,
                 bodies: Optional[Iterable[CelestialBody]] = None,
                 static_locations: Optional[Iterable[StaticLocation]] = None,
                 verbose: bool = False):
        self.verbose = verbose
        self.logger = create_logger(verbose=verbose, name="Environment")
        self.bodies: Dict[str, CelestialBody] = {}
        self.static_locations: List[StaticLocation] = []
        self.craft: Dict[str, CraftPosition] = {}

        for body in bodies or []:
            self.add_body(body)
        for location in static_locations or []:
            self.add_static_location(location)

    # --- Bodies ---
    def add_body(self, body: CelestialBody):
        self.bodies[body.name] = body
        self.logger.debug(f"Registered body '{body.name}' (R={body.radius:.0f}m)")

    def get_body(self, name: Optional[str]) -> Optional[CelestialBody]:
        if not name:
            return None
        return self.bodies.get(name)

    # --- Static locations ---
    def add_static_location(self, location: StaticLocation):
        self.static_locations.append(location)

    def get_static_location(self,
                            name: str,
                            body_name: Optional[str] = None,
                            kind: Optional[StaticLocationKind] = None) -> Optional[StaticLocation]:
        """
        Find a static location by name.

        Args:
            name: Registry name
            body_name: Restrict to locations on this body (cities are per body)
            kind: Restrict to cities or launch sites

        Returns:
            The first matching location, or None
        """
        for location in self.static_locations:
            if location.name != name:
                continue
            if body_name is not None and location.body_name != body_name:
                continue
            if kind is not None and location.kind != kind:
                continue
            return location
        return None

    # --- Craft association ---
    def associate_craft(self, key: str, position: CraftPosition):
        self.craft[key] = position

    def dissociate_craft(self, key: str):
        self.craft.pop(key, None)

    def get_associated_craft(self, key: str) -> Optional[CraftPosition]:
        return self.craft.get(key)

    # --- Uniform random surface point oracle ---
    def choose_random_position(self,
                               body: CelestialBody,
                               rng: random.Random,
                               water_allowed: bool = True,
                               force_equatorial: bool = False) -> Tuple[float, float]:
        """
        Draw a point uniformly distributed over the body's surface.

        Args:
            body: Body to sample on
            rng: Generator to draw from
            water_allowed: If False, prefer points above sea level on ocean bodies
            force_equatorial: Restrict latitude to the equatorial band

        Returns:
            (latitude, longitude) in degrees
        """
        if force_equatorial:
            band = math.sin(math.radians(EQUATORIAL_BAND_DEGREES))
        else:
            band = 1.0

        latitude = longitude = 0.0
        for _ in range(MAX_SURFACE_ATTEMPTS):
            latitude = math.degrees(math.asin(rng.uniform(-band, band)))
            longitude = rng.uniform(-180.0, 180.0)
            if water_allowed or not body.ocean or not body.has_solid_surface:
                break
            if body.surface_elevation(latitude, longitude) > 0.0:
                break
        return latitude, longitude
