from waygen.procedural.mission import MissionEvent, MissionState
from waygen.procedural.randomizer import GAS_FEATURES, LAND_FEATURES, MissionRandomizer


def test_site_names_are_deterministic(terra):
    first = MissionRandomizer(42)
    second = MissionRandomizer(42)
    assert [first.site_name(terra) for _ in range(10)] == [second.site_name(terra) for _ in range(10)]


def test_site_name_biased_by_body(luna, jove, terra):
    randomizer = MissionRandomizer(7)
    for _ in range(20):
        assert randomizer.site_name(jove).split()[1] in GAS_FEATURES
        assert randomizer.site_name(luna).split()[1] in LAND_FEATURES
        assert randomizer.site_name(terra, water_allowed=False).split()[1] in LAND_FEATURES


def test_marker_seed_formula():
    randomizer = MissionRandomizer(12345)
    assert randomizer.marker_seed(0) == (12345 * 1000003 + 7919) & 0xFFFFFFFF
    assert randomizer.marker_seed(4) == (12345 * 1000003 + 5 * 7919) & 0xFFFFFFFF
    assert MissionRandomizer.marker_rng(9).random() == MissionRandomizer.marker_rng(9).random()


def test_event_and_state_classification():
    assert MissionEvent.ACCEPTED.triggers_resolution
    assert MissionEvent.CRAFT_ASSOCIATION_CHANGED.triggers_resolution
    assert not MissionEvent.VIEW_FILTERS_RESET.triggers_resolution
    assert MissionEvent.OFFER_EXPIRED.terminates
    assert not MissionEvent.ENVIRONMENT_READY.terminates
    assert MissionState.DECLINED.is_terminal
    assert not MissionState.ACTIVE.is_terminal
