from __future__ import annotations

import random
from typing import Optional

from ..classes.bodies import CelestialBody

FOUNDERS = [
    "Aldrin", "Bessel", "Cassini", "Drake", "Encke", "Faye", "Galle", "Halley",
    "Hubble", "Kepler", "Laplace", "Lowell", "Messier", "Olbers", "Piazzi", "Roche",
    "Sagan", "Tombaugh", "Vega", "Wolf",
]

LAND_FEATURES = [
    "Ridge", "Plateau", "Crater", "Valley", "Mesa", "Basin", "Highlands", "Outcrop",
    "Rise", "Flats", "Scarp", "Hollow",
]

WATER_FEATURES = ["Bay", "Shoal", "Reef", "Sound", "Inlet", "Deep", "Trench", "Lagoon"]

GAS_FEATURES = ["Vortex", "Band", "Storm", "Eddy", "Veil"]

DESIGNATORS = ["Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Theta", "Kappa", "Sigma", "Omega"]


class MissionRandomizer:
    """
    Seeded random source for one mission's markers.

    Site names are drawn sequentially from the mission generator; every
    marker also gets its own seed derived from the mission seed and its
    index, so its sampling sequence does not depend on the order in which
    resolution passes reach it.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed if seed is not None else 0
        self.rng = random.Random(seed)

    def marker_seed(self, index: int) -> int:
        return (self.seed * 1000003 + (index + 1) * 7919) & 0xFFFFFFFF

    @staticmethod
    def marker_rng(seed: int) -> random.Random:
        return random.Random(seed)

    def site_name(self, body: Optional[CelestialBody], water_allowed: bool = True) -> str:
        """
        Generate a readable site name.

        Water features are only offered on ocean bodies when water is
        allowed; gas giants get atmospheric features.
        """
        if body is not None and not body.has_solid_surface:
            features = GAS_FEATURES
        elif body is not None and body.ocean and water_allowed:
            features = LAND_FEATURES + WATER_FEATURES
        else:
            features = LAND_FEATURES

        name = f"{self.rng.choice(FOUNDERS)}'s {self.rng.choice(features)}"
        if self.rng.random() < 0.3:
            name += f" {self.rng.choice(DESIGNATORS)}"
        return name
