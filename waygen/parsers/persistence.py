"""
Save/restore of a mission's markers.

Each marker becomes one WAYPOINT node carrying everything needed to
rebuild it without the marker definition. Publish state is not stored:
it is recomputed from the mission and gating state after a load.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from ..classes.markers import MarkerInstance, MarkerType, PendingReason
from ..procedural.validation import StaticLocationNotFoundError
from ..terrain.environment import PlanetaryEnvironment
from .config_node import ConfigNode, format_config_node, parse_bool, parse_config_text, parse_vector
from .marker_config import find_static_location

GENERATOR_NODE = "WAYPOINT_GENERATOR"
MARKER_NODE = "WAYPOINT"


def encode_marker(marker: MarkerInstance) -> ConfigNode:
    node = ConfigNode(MARKER_NODE)
    node.add_value("type", marker.marker_type.value)
    node.add_value("index", marker.index)
    for p in marker.parameters:
        node.add_value("parameter", p)
    for n in marker.names:
        node.add_value("names", n)
    node.add_value("celestialName", marker.body_name)
    node.add_value("name", marker.name)
    node.add_value("icon", marker.icon)
    node.add_value("seed", marker.seed)
    if marker.near_index is not None:
        node.add_value("nearIndex", marker.near_index)
    if marker.craft_key is not None:
        node.add_value("vessel", marker.craft_key)
    node.add_value("chained", marker.chained)
    node.add_value("minDistance", marker.min_distance)
    node.add_value("maxDistance", marker.max_distance)
    node.add_value("count", marker.count)
    node.add_value("isInitialized", marker.is_resolved)
    if marker.pending_reason is not None:
        node.add_value("pendingReason", marker.pending_reason.value)
    node.add_value("latitude", marker.latitude)
    node.add_value("longitude", marker.longitude)
    node.add_value("altitude", marker.altitude)
    node.add_value("hidden", not marker.visible)
    node.add_value("clustered", marker.clustered)
    if marker.static_location_name is not None:
        node.add_value("staticLocation", marker.static_location_name)
        node.add_value("staticOffset", tuple(marker.static_offset))
        node.add_value("lateCorrected", marker.late_corrected)
    node.add_value("randomAltitude", marker.random_altitude)
    node.add_value("underwater", marker.underwater)
    node.add_value("waterAllowed", marker.water_allowed)
    node.add_value("forceEquatorial", marker.force_equatorial)
    return node


def encode_markers(markers: Iterable[MarkerInstance]) -> ConfigNode:
    root = ConfigNode(GENERATOR_NODE)
    for marker in markers:
        root.add_node(encode_marker(marker))
    return root


def decode_marker(node: ConfigNode,
                  mission=None,
                  environment: Optional[PlanetaryEnvironment] = None) -> MarkerInstance:
    """
    Rebuild one marker.

    Static-location names are looked up again in the current registry.

    Raises:
        StaticLocationNotFoundError: If the static location is no longer available
    """
    def flag(key: str, default: bool = False) -> bool:
        raw = node.get_value(key)
        return parse_bool(raw) if raw else default

    near_index = node.get_value("nearIndex")
    pending_reason = node.get_value("pendingReason")
    initialized = flag("isInitialized", True)

    marker = MarkerInstance(
        index=int(node.get_value("index")),
        marker_type=MarkerType(node.get_value("type")),
        body_name=node.get_value("celestialName", ""),
        name=node.get_value("name", ""),
        names=node.get_values("names"),
        latitude=float(node.get_value("latitude", "0")),
        longitude=float(node.get_value("longitude", "0")),
        altitude=float(node.get_value("altitude", "0")),
        random_altitude=flag("randomAltitude"),
        parameters=node.get_values("parameter"),
        visible=not flag("hidden"),
        icon=node.get_value("icon", ""),
        underwater=flag("underwater"),
        clustered=flag("clustered"),
        water_allowed=flag("waterAllowed", True),
        force_equatorial=flag("forceEquatorial"),
        count=int(node.get_value("count", "1")),
        min_distance=float(node.get_value("minDistance", "0")),
        max_distance=float(node.get_value("maxDistance", "0")),
        near_index=int(near_index) if near_index not in (None, "", "-1") else None,
        craft_key=node.get_value("vessel"),
        chained=flag("chained"),
        static_location_name=node.get_value("staticLocation"),
        seed=int(node.get_value("seed", "0")),
        late_corrected=flag("lateCorrected"),
        mission=mission,
    )
    offset = node.get_value("staticOffset")
    if offset:
        marker.static_offset = parse_vector(offset)

    if initialized:
        marker.mark_resolved()
    else:
        reason = PendingReason(pending_reason) if pending_reason else PendingReason.NOT_ATTEMPTED
        marker.defer(reason)

    if marker.static_location_name is not None and environment is not None:
        if find_static_location(environment, marker) is None:
            raise StaticLocationNotFoundError(marker.static_location_name, marker.body_name)

    return marker


def decode_markers(node: ConfigNode,
                   mission=None,
                   environment: Optional[PlanetaryEnvironment] = None) -> List[MarkerInstance]:
    return [decode_marker(child, mission, environment) for child in node.get_nodes(MARKER_NODE)]


def dumps_markers(markers: Iterable[MarkerInstance]) -> str:
    return format_config_node(encode_markers(markers))


def loads_markers(text: str,
                  mission=None,
                  environment: Optional[PlanetaryEnvironment] = None) -> List[MarkerInstance]:
    root = parse_config_text(text)
    generators = root.get_nodes(GENERATOR_NODE)
    node = generators[0] if generators else root
    return decode_markers(node, mission, environment)
