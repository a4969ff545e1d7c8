"""
Example demonstrating the full marker lifecycle for one mission.

Parses a marker definition, instantiates it for a seeded mission, walks
the mission through offer/accept/parameter completion, saves and reloads
the markers, and renders the published ones to a PNG.
"""
import math
import os
import sys

# Add waygen to path
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from waygen import (
    CelestialBody,
    CraftPosition,
    DisplaySettings,
    Map2DMarkerView,
    MarkerGenerator,
    MissionContext,
    MissionEvent,
    MissionState,
    PlanetaryEnvironment,
    StaticLocation,
    StaticLocationKind,
    ViewContext,
    parse_marker_text,
)
from waygen.procedural.mission import ParameterState

DEFINITION = """
WAYPOINT
{
    targetBody = Terra
    name = Survey Camp
    icon = flag
    latitude = -1.5
    longitude = 25
}
RANDOM_WAYPOINT_NEAR
{
    targetBody = Terra
    name = site
    icon = pin
    nearIndex = 0
    chained = true
    count = 3
    minDistance = 5000
    maxDistance = 15000
    parameter = reachCamp
}
RANDOM_WAYPOINT
{
    targetBody = Terra
    icon = diver
    underwater = true
}
RANDOM_WAYPOINT_NEAR
{
    targetBody = Terra
    icon = rover
    vessel = rover
    maxDistance = 2000
}
PQS_CITY
{
    targetBody = Terra
    name = Harbor Office
    icon = city
    pqsCity = Port Royal
    pqsOffset = 0, 300, 0
}
LAUNCH_SITE
{
    targetBody = Terra
    icon = rocket
    launchSite = Desert Pad
}
"""


def build_environment():
    terra = CelestialBody(
        "Terra", 600000.0, ocean=True, atmosphere=True, atmosphere_depth=70000.0,
        elevation_fn=lambda lat, lon: 1500.0 * math.sin(math.radians(lon)) + 300.0 * math.cos(math.radians(lat * 4)),
    )
    env = PlanetaryEnvironment(bodies=[terra], verbose=True)
    env.add_static_location(StaticLocation.at("Port Royal", terra, 8.0, 40.0, altitude=20.0, heading=15.0))
    env.add_static_location(StaticLocation.at("Desert Pad", terra, -6.5, 32.0, altitude=800.0,
                                              kind=StaticLocationKind.LAUNCH_SITE))
    return env


def main():
    print("=" * 60)
    print("MARKER GENERATION EXAMPLE")
    print("=" * 60)

    env = build_environment()
    definition = parse_marker_text(DEFINITION, env, verbose=True)
    print(f"✓ Parsed {len(definition.templates)} definitions ({definition.instance_count} markers)")

    mission = MissionContext("survey-001", seed=20240611)
    view = Map2DMarkerView(verbose=True)
    generator = MarkerGenerator.instantiate(
        definition, mission, env, live_map=view,
        settings=DisplaySettings(display_offered_markers=True),
        view_context=ViewContext.TRACKING_STATION, verbose=True,
    )

    # Offered: visible from the tracking station only
    mission.state = MissionState.OFFERED
    generator.handle_event(MissionEvent.OFFERED)
    print(f"Offered: {len(view)} markers on the map")

    # Accepted and flying
    mission.state = MissionState.ACTIVE
    generator.visibility.view_context = ViewContext.FLIGHT
    generator.handle_event(MissionEvent.ACCEPTED)

    env.associate_craft("rover", CraftPosition("rover", "Rover One", "Terra", -1.4, 25.2))
    generator.handle_event(MissionEvent.CRAFT_ASSOCIATION_CHANGED)
    generator.handle_event(MissionEvent.ENVIRONMENT_READY)

    mission.set_parameter_state("reachCamp", ParameterState.COMPLETE)
    generator.handle_event(MissionEvent.PARAMETER_STATE_CHANGED)

    for marker in generator:
        status = "published" if marker.is_published else marker.state.value
        print(f"  [{marker.index}] {marker.name:<28} {marker.latitude:9.4f} {marker.longitude:9.4f} "
              f"{marker.altitude:9.1f} m  ({status})")

    # Save and reload
    saved = generator.save()
    reloaded = MarkerGenerator.load(saved, mission, env, live_map=Map2DMarkerView())
    print(f"✓ Reloaded {len(reloaded)} markers, fully resolved: {reloaded.fully_resolved}")

    output_dir = os.path.join(os.path.dirname(__file__), "output")
    os.makedirs(output_dir, exist_ok=True)
    path = view.save_overview(os.path.join(output_dir, "survey_markers.png"), body_name="Terra")
    print(f"✓ Map saved to {path}")

    generator.handle_event(MissionEvent.FINISHED)
    print(f"Finished: {len(view)} markers on the map")


if __name__ == "__main__":
    main()
