from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from ..classes.bodies import CelestialBody
from ..classes.markers import PLACEHOLDER_NAME, MarkerInstance, MarkerTemplate, MarkerType, PendingReason
from ..misc.logger import create_logger
from ..parsers.config_node import ConfigNode
from ..parsers.marker_config import MarkerDefinition, find_static_location
from ..parsers.persistence import decode_markers, encode_markers
from ..terrain.environment import PlanetaryEnvironment
from .altitude_policy import AltitudePolicy
from .mission import MissionContext, MissionEvent, MissionState
from .randomizer import MissionRandomizer
from .synthesizers import place_at_static_location, place_fixed, place_near, place_random_uniform
from .visibility import DisplaySettings, LiveMap, ViewContext, VisibilityManager


def duplicate_templates(templates: List[MarkerTemplate],
                        mission: MissionContext,
                        randomizer: MissionRandomizer,
                        environment: PlanetaryEnvironment) -> List[MarkerInstance]:
    """
    Expand templates into a mission's markers.

    Each template yields `count` markers. Names are taken positionally from
    the template's name list (a single name applies to every copy); missing
    or placeholder names are generated from the mission's generator. Chained
    copies after the first are anchored on the copy just before them.
    """
    markers: List[MarkerInstance] = []
    for template in templates:
        for i in range(template.count):
            index = len(markers)
            marker = MarkerInstance.from_template(template, index, mission, randomizer.marker_seed(index))
            markers.append(marker)

            if template.names:
                if len(template.names) == 1:
                    marker.name = template.names[0]
                elif i < len(template.names):
                    marker.name = template.names[i]
            if not marker.name or marker.name.lower() == PLACEHOLDER_NAME:
                body = environment.get_body(marker.body_name)
                marker.name = randomizer.site_name(body, marker.water_allowed)

            if marker.chained and i != 0:
                marker.near_index = index - 1
    return markers


class MarkerGenerator:
    """
    Owns one mission's markers and drives them to a resolved, published state.

    `resolve()` is the single entry point for coordinate generation: it is
    safe to call from every lifecycle trigger, leaves resolved markers
    untouched, and defers any marker whose dependencies are not available
    yet (body, anchor marker, craft, static location) to a later call.
    """

    def __init__(self,
                 mission: MissionContext,
                 environment: PlanetaryEnvironment,
                 markers: Optional[List[MarkerInstance]] = None,
                 live_map: Optional[LiveMap] = None,
                 settings: Optional[DisplaySettings] = None,
                 view_context: ViewContext = ViewContext.FLIGHT,
                 verbose: bool = False):
        self.mission = mission
        self.environment = environment
        self.markers: List[MarkerInstance] = markers if markers is not None else []
        self.randomizer = MissionRandomizer(mission.seed)
        self.verbose = verbose
        self.logger = create_logger(verbose=verbose, name="MarkerGenerator").with_context(mission.mission_id)
        self.initialized = False
        self.definition: Optional[MarkerDefinition] = None

        if live_map is None:
            from ..visualization.map2d import Map2DMarkerView
            live_map = Map2DMarkerView(verbose=verbose)
        self.visibility = VisibilityManager(live_map, settings, view_context, verbose=verbose)

    @classmethod
    def instantiate(cls,
                    definition: MarkerDefinition,
                    mission: MissionContext,
                    environment: PlanetaryEnvironment,
                    **kwargs) -> "MarkerGenerator":
        """
        Create a mission's generator from a parsed definition.

        Static-location names that could not be checked at parse time are
        checked now for every body that has become known.

        Raises:
            StaticLocationNotFoundError: If such a name does not resolve
        """
        definition.verify_static_locations(environment)
        generator = cls(mission, environment, **kwargs)
        generator.definition = definition
        generator.markers = duplicate_templates(definition.templates, mission, generator.randomizer, environment)
        generator.logger.info(f"Created {len(generator.markers)} markers")
        generator.resolve()
        return generator

    # --- Lookup ---
    def get_marker(self, index: int) -> MarkerInstance:
        return self.markers[index]

    def __iter__(self) -> Iterator[MarkerInstance]:
        return iter(self.markers)

    def __len__(self) -> int:
        return len(self.markers)

    @property
    def fully_resolved(self) -> bool:
        return all(m.is_resolved for m in self.markers)

    # --- Resolution ---
    def resolve(self) -> bool:
        """
        Run one resolution pass over every pending marker.

        Returns:
            True once every marker is resolved

        Raises:
            StaticLocationNotFoundError: If a body unknown at parse time is now
                known but lacks a static location named by the definition
        """
        if self.initialized:
            return True

        if self.definition is not None and self.definition.unverified_static:
            self.definition.verify_static_locations(self.environment)

        self.logger.debug("Resolving markers...")
        for marker in self.markers:
            if marker.is_resolved:
                continue
            self._resolve_marker(marker)

        self.initialized = self.fully_resolved
        pending = sum(1 for m in self.markers if not m.is_resolved)
        if pending:
            self.logger.debug(f"{pending} markers still pending")
        return self.initialized

    def uninitialize(self):
        """Force the next trigger to run a full pass again."""
        self.initialized = False

    def _resolve_marker(self, marker: MarkerInstance) -> bool:
        body = self.environment.get_body(marker.body_name)
        if body is None:
            marker.defer(PendingReason.BODY_UNAVAILABLE)
            return False

        rng = MissionRandomizer.marker_rng(marker.seed)

        if marker.marker_type == MarkerType.FIXED:
            place_fixed(marker)

        elif marker.marker_type == MarkerType.RANDOM_UNIFORM:
            self.logger.debug(f"Generating a random marker on {body.name}...")
            place_random_uniform(marker, body, self.environment, rng)

        elif marker.marker_type == MarkerType.RANDOM_NEAR:
            anchor = self._near_anchor(marker)
            if anchor is None:
                return False
            body, lat, lon = anchor
            marker.body_name = body.name
            sample = place_near(marker, body, lat, lon, rng)
            if not sample.accepted:
                self.logger.warning(
                    f"No valid point found near {lat:.4f}, {lon:.4f} for '{marker.name}' "
                    f"after {sample.attempts} attempts; using the last sample"
                )

        elif marker.marker_type.is_static:
            location = find_static_location(self.environment, marker)
            if location is None:
                marker.defer(PendingReason.STATIC_LOCATION_UNAVAILABLE)
                return False
            place_at_static_location(marker, body, location)

        AltitudePolicy(rng).assign(marker, body)
        marker.mark_resolved()
        self.logger.info(f"Generated marker '{marker.name}' at {marker.latitude:.4f}, {marker.longitude:.4f}")
        return True

    def _near_anchor(self, marker: MarkerInstance) -> Optional[Tuple[CelestialBody, float, float]]:
        """Resolved anchor for a near marker, or None (with the marker deferred)."""
        if marker.craft_key:
            craft = self.environment.get_associated_craft(marker.craft_key)
            body = self.environment.get_body(craft.body_name) if craft is not None else None
            if craft is None or body is None:
                marker.defer(PendingReason.CRAFT_UNAVAILABLE)
                return None
            self.logger.debug(f"Generating a random marker near craft {craft.craft_name}...")
            return body, craft.latitude, craft.longitude

        index = marker.near_index
        if index is None or not 0 <= index < len(self.markers):
            self.logger.warning(f"Marker {marker.index} has no valid anchor index ({index})")
            marker.defer(PendingReason.ANCHOR_PENDING)
            return None

        other = self.markers[index]
        body = self.environment.get_body(other.body_name)
        if not other.is_resolved or body is None:
            marker.defer(PendingReason.ANCHOR_PENDING)
            return None
        self.logger.debug(f"Generating a random marker near marker {other.name}...")
        return body, other.latitude, other.longitude

    def apply_late_correction(self) -> int:
        """
        Recompute static-location markers once the environment is fully ready.

        Each static marker is corrected at most once; markers still pending
        are marked as done since they will resolve against the ready frames.
        Published markers are retracted and published again at their new
        position.

        Returns:
            Number of markers whose coordinates were recomputed
        """
        corrected = 0
        for marker in self.markers:
            if not marker.marker_type.is_static or marker.late_corrected:
                continue

            if marker.is_resolved:
                body = self.environment.get_body(marker.body_name)
                location = find_static_location(self.environment, marker) if body is not None else None
                if location is None:
                    self.logger.warning(f"Can't adjust '{marker.name}': static location unavailable")
                    continue
                self.logger.debug(f"Adjusting static location coordinates for marker {marker.name}")
                place_at_static_location(marker, body, location)
                AltitudePolicy(MissionRandomizer.marker_rng(marker.seed)).assign(marker, body)
                corrected += 1
                if marker.is_published:
                    # The map may hold the old coordinates
                    self.visibility.retract(marker)
                    self.visibility.publish(marker)

            marker.late_corrected = True
        return corrected

    # --- Lifecycle ---
    def handle_event(self, event: MissionEvent):
        """Dispatch an inbound lifecycle trigger."""
        self.logger.debug(f"Handling {event.value}")
        if event.triggers_resolution:
            self.resolve()
            self.visibility.sync(self.markers)
        elif event == MissionEvent.VIEW_FILTERS_RESET:
            self.visibility.reset_view_filters(self.markers)
        elif event == MissionEvent.ENVIRONMENT_READY:
            self.apply_late_correction()
        elif event.terminates:
            self.visibility.retract_all(self.markers)

    # --- Persistence ---
    def save(self) -> ConfigNode:
        return encode_markers(self.markers)

    @classmethod
    def load(cls,
             node: ConfigNode,
             mission: MissionContext,
             environment: PlanetaryEnvironment,
             **kwargs) -> "MarkerGenerator":
        """
        Restore a generator from saved markers.

        Publication is recomputed from the current mission and gating state.

        Raises:
            StaticLocationNotFoundError: If a saved static location is gone
        """
        markers = decode_markers(node, mission, environment)
        generator = cls(mission, environment, markers=markers, **kwargs)
        generator.initialized = generator.fully_resolved
        if mission.state in (MissionState.ACTIVE, MissionState.OFFERED):
            generator.visibility.sync(markers)
        return generator
