import pytest

from waygen.classes.markers import PendingReason
from waygen.parsers.config_node import parse_config_text
from waygen.parsers.marker_config import parse_marker_text
from waygen.parsers.persistence import GENERATOR_NODE, dumps_markers, loads_markers
from waygen.procedural.engine import MarkerGenerator
from waygen.procedural.mission import MissionEvent, MissionState
from waygen.procedural.validation import StaticLocationNotFoundError
from waygen.terrain.environment import PlanetaryEnvironment

MIXED = """
WAYPOINT
{
    targetBody = Terra
    name = Camp
    icon = flag
    latitude = 5.125
    longitude = -30
    altitude = 250
    parameter = reachCamp
}
RANDOM_WAYPOINT
{
    targetBody = Terra
    name = site
    icon = pin
    count = 2
    underwater = true
    clustered = true
}
RANDOM_WAYPOINT_NEAR
{
    targetBody = Terra
    icon = pin
    nearIndex = 0
    chained = true
    count = 2
    minDistance = 100
    maxDistance = 900
}
RANDOM_WAYPOINT_NEAR
{
    targetBody = Terra
    hidden = true
    vessel = rover
    maxDistance = 400
}
PQS_CITY
{
    targetBody = Terra
    name = Downtown
    icon = city
    pqsCity = Capital
    pqsOffset = 12.5, -3, 1E-05
}
LAUNCH_SITE
{
    targetBody = Terra
    icon = pad
    launchSite = Pad A
}
"""


@pytest.fixture
def generator(mission, environment, recording_map):
    definition = parse_marker_text(MIXED, environment)
    generator = MarkerGenerator.instantiate(definition, mission, environment, live_map=recording_map)
    generator.handle_event(MissionEvent.ENVIRONMENT_READY)
    generator.handle_event(MissionEvent.ACCEPTED)
    return generator


def test_round_trip_reproduces_all_fields(generator, mission, environment):
    markers = list(generator)
    assert markers[5].pending_reason == PendingReason.CRAFT_UNAVAILABLE

    restored = loads_markers(dumps_markers(markers), mission, environment)

    assert restored == markers
    assert restored[5].pending_reason == PendingReason.CRAFT_UNAVAILABLE
    assert restored[6].late_corrected and restored[7].late_corrected
    assert restored[6].static_offset == (12.5, -3.0, 1e-05)


def test_publish_state_is_not_stored(generator, mission, environment):
    text = dumps_markers(generator)
    assert "publish" not in text.lower()

    restored = loads_markers(text, mission, environment)
    assert generator.get_marker(1).is_published
    assert not any(m.is_published for m in restored)


def test_load_recomputes_publication(generator, mission, environment, recording_map):
    node = parse_config_text(dumps_markers(generator)).get_nodes(GENERATOR_NODE)[0]
    recording_map.shown.clear()

    loaded = MarkerGenerator.load(node, mission, environment, live_map=recording_map)
    assert not loaded.initialized
    expected = {m.index for m in generator if m.visible and m.is_resolved and not m.parameters}
    assert set(recording_map.shown) == expected


def test_load_inactive_mission_publishes_nothing(generator, mission, environment, recording_map):
    node = generator.save()
    recording_map.shown.clear()
    mission.state = MissionState.GENERATED

    MarkerGenerator.load(node, mission, environment, live_map=recording_map)
    assert recording_map.shown == {}


def test_load_then_resolve_pending_craft_marker(generator, mission, environment, recording_map):
    from waygen.classes.bodies import CraftPosition

    loaded = MarkerGenerator.load(generator.save(), mission, environment, live_map=recording_map)
    environment.associate_craft("rover", CraftPosition("rover", "Rover One", "Terra", 0.0, 10.0))
    loaded.handle_event(MissionEvent.LOADED)
    assert loaded.fully_resolved


def test_missing_static_location_propagates(generator, mission, terra):
    bare = PlanetaryEnvironment(bodies=[terra])
    with pytest.raises(StaticLocationNotFoundError):
        loads_markers(dumps_markers(generator), mission, bare)


@pytest.mark.parametrize("name", [
    "Base//North",
    "Relay {East}",
    "  Padded Site ",
    "C:\\temp\\new",
    "Line\nBreak",
])
def test_round_trip_keeps_names_verbatim(generator, mission, environment, name):
    markers = list(generator)
    markers[0].name = name
    markers[0].names = [name, "Backup"]

    restored = loads_markers(dumps_markers(markers), mission, environment)
    assert restored[0].name == name
    assert restored[0].names == [name, "Backup"]
    assert restored == markers
