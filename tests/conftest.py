import math

import matplotlib
import pytest

matplotlib.use("Agg")

from waygen.classes.bodies import CelestialBody, StaticLocation, StaticLocationKind
from waygen.classes.markers import MarkerInstance
from waygen.procedural.mission import MissionContext, MissionState
from waygen.procedural.visibility import LiveMap
from waygen.terrain.environment import PlanetaryEnvironment

TERRA_RADIUS = 600000.0


def terra_elevation(latitude, longitude):
    # Ocean over the western hemisphere, land over the eastern one
    return 2000.0 * math.sin(math.radians(longitude))


class RecordingMap(LiveMap):
    """Live map double that records every call."""

    def __init__(self):
        self.shown = {}
        self.calls = []

    def add_marker(self, marker: MarkerInstance) -> None:
        self.calls.append(("add", marker.index))
        self.shown[marker.index] = marker

    def remove_marker(self, marker: MarkerInstance) -> None:
        self.calls.append(("remove", marker.index))
        self.shown.pop(marker.index, None)


@pytest.fixture
def terra():
    return CelestialBody("Terra", TERRA_RADIUS, ocean=True, atmosphere=True,
                         atmosphere_depth=70000.0, elevation_fn=terra_elevation)


@pytest.fixture
def luna():
    return CelestialBody("Luna", 200000.0)


@pytest.fixture
def jove():
    return CelestialBody("Jove", 6000000.0, has_solid_surface=False, atmosphere=True, atmosphere_depth=600000.0)


@pytest.fixture
def capital(terra):
    return StaticLocation.at("Capital", terra, 10.0, 20.0, altitude=50.0, heading=30.0)


@pytest.fixture
def launch_pad(terra):
    return StaticLocation.at("Pad A", terra, -0.1, -74.5, altitude=70.0, kind=StaticLocationKind.LAUNCH_SITE)


@pytest.fixture
def environment(terra, luna, jove, capital, launch_pad):
    return PlanetaryEnvironment(bodies=[terra, luna, jove], static_locations=[capital, launch_pad])


@pytest.fixture
def mission():
    return MissionContext("contract-1", seed=12345, state=MissionState.ACTIVE)


@pytest.fixture
def recording_map():
    return RecordingMap()
