from __future__ import annotations

import random
from dataclasses import dataclass, field

from ..classes.bodies import CelestialBody
from ..classes.markers import MarkerInstance


@dataclass
class AltitudePolicy:
    """
    Assigns a marker's altitude once its coordinates are known.

    Random-altitude markers:
    - underwater on an ocean body: somewhere between the sea floor and sea level
    - on a body with an atmosphere: somewhere between the surface and the top of the atmosphere
    - otherwise: on the surface (0 m)

    Fixed-altitude underwater markers are clamped so they never sit below
    the sea floor. Any other fixed altitude is left alone.
    """
    rng: random.Random = field(default_factory=random.Random)

    def sea_floor(self, marker: MarkerInstance, body: CelestialBody) -> float:
        return body.surface_elevation(marker.latitude, marker.longitude)

    def assign(self, marker: MarkerInstance, body: CelestialBody) -> float:
        """
        Set and return the marker's altitude.

        Args:
            marker: Marker with resolved latitude/longitude
            body: The marker's anchor body

        Returns:
            The altitude written to the marker (meters)
        """
        if marker.random_altitude:
            if marker.underwater and body.ocean:
                # floor <= 0, so this lands in [floor, 0]
                marker.altitude = self.rng.random() * self.sea_floor(marker, body)
            elif body.atmosphere:
                marker.altitude = self.rng.random() * body.atmosphere_depth
            else:
                marker.altitude = 0.0
        elif marker.underwater:
            marker.altitude = max(self.sea_floor(marker, body), marker.altitude)

        return marker.altitude
