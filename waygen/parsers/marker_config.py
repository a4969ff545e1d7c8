"""
Parsing of marker definitions into MarkerTemplates.

Every child node of a generator node is one marker definition, tagged by
its node name. Any failed field invalidates the whole definition: errors
are collected across all markers and raised together.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

from ..classes.bodies import StaticLocationKind
from ..classes.markers import MarkerTemplate, MarkerType
from ..misc.logger import create_logger
from ..procedural.validation import (
    InvalidMarkerDefinitionError,
    StaticLocationNotFoundError,
    UnknownMarkerTypeError,
    ValidationResult,
    check_all,
)
from ..terrain.environment import PlanetaryEnvironment
from .config_node import ConfigNode, parse_bool, parse_config_text, parse_vector

COMMON_KEYS = {"targetBody", "name", "altitude", "parameter", "hidden", "icon", "underwater", "clustered"}

TYPE_KEYS = {
    MarkerType.FIXED: {"latitude", "longitude"},
    MarkerType.RANDOM_UNIFORM: {"waterAllowed", "forceEquatorial", "count"},
    MarkerType.RANDOM_NEAR: {"waterAllowed", "vessel", "nearIndex", "chained", "count", "minDistance", "maxDistance"},
    MarkerType.STATIC_CITY: {"pqsCity", "pqsOffset"},
    MarkerType.STATIC_LAUNCH_SITE: {"launchSite", "pqsOffset"},
}

LIST_KEYS = {"name", "parameter"}

STATIC_KINDS = {
    MarkerType.STATIC_CITY: StaticLocationKind.CITY,
    MarkerType.STATIC_LAUNCH_SITE: StaticLocationKind.LAUNCH_SITE,
}


class _FieldReader:
    """Typed access to one definition node, recording a ValidationResult per failure."""

    def __init__(self, node: ConfigNode, label: str, results: List[ValidationResult]):
        self.node = node
        self.label = label
        self.results = results

    def fail(self, message: str):
        self.results.append(ValidationResult(False, f"{self.label}: {message}"))

    def _raw(self, key: str, required: bool) -> Optional[str]:
        values = self.node.get_values(key)
        if not values:
            if required:
                self.fail(f"missing required value '{key}'")
            return None
        if len(values) > 1 and key not in LIST_KEYS:
            self.fail(f"value '{key}' is given {len(values)} times")
            return None
        return values[0]

    def _typed(self, key, convert, required, default, check: Optional[Callable] = None, rule: str = ""):
        raw = self._raw(key, required)
        if raw is None:
            return default
        try:
            value = convert(raw)
        except ValueError as e:
            self.fail(f"couldn't parse '{key}' = '{raw}': {e}")
            return default
        if check is not None and not check(value):
            self.fail(f"'{key}' = {raw} must be {rule}")
            return default
        return value

    def string(self, key: str, required: bool = False, default: Optional[str] = None) -> Optional[str]:
        return self._typed(key, str, required, default)

    def floating(self, key: str, required: bool = False, default: Optional[float] = None,
                 check: Optional[Callable] = None, rule: str = "") -> Optional[float]:
        return self._typed(key, float, required, default, check, rule)

    def integer(self, key: str, required: bool = False, default: Optional[int] = None,
                check: Optional[Callable] = None, rule: str = "") -> Optional[int]:
        return self._typed(key, int, required, default, check, rule)

    def boolean(self, key: str, default: bool = False) -> bool:
        return self._typed(key, parse_bool, False, default)

    def vector(self, key: str, default=(0.0, 0.0, 0.0)):
        return self._typed(key, parse_vector, False, default)

    def string_list(self, key: str) -> List[str]:
        return list(self.node.get_values(key))

    def check_unexpected(self, allowed: Set[str]):
        for key in self.node.keys():
            if key not in allowed:
                self.fail(f"unexpected value '{key}'")


@dataclass
class MarkerDefinition:
    """
    A validated, mission-independent marker generator definition.

    `unverified_static` lists template indexes whose static location could
    not be checked at parse time because the body was not known yet.
    """
    templates: List[MarkerTemplate] = field(default_factory=list)
    unverified_static: List[int] = field(default_factory=list)

    @property
    def instance_count(self) -> int:
        return sum(t.count for t in self.templates)

    def verify_static_locations(self, environment: PlanetaryEnvironment):
        """
        Retry the static-location checks deferred at parse time.

        Templates whose body is still unknown stay unverified.

        Raises:
            StaticLocationNotFoundError: If a name does not resolve on a known body
        """
        for index in list(self.unverified_static):
            template = self.templates[index]
            if environment.get_body(template.body_name) is None:
                continue
            if find_static_location(environment, template) is None:
                raise StaticLocationNotFoundError(template.static_location_name, template.body_name)
            self.unverified_static.remove(index)


def find_static_location(environment: PlanetaryEnvironment, template_or_marker):
    """Registry lookup for a static-type template or marker (cities are per body)."""
    kind = STATIC_KINDS[template_or_marker.marker_type]
    body_name = template_or_marker.body_name if kind == StaticLocationKind.CITY else None
    return environment.get_static_location(template_or_marker.static_location_name, body_name, kind)


def parse_marker_definitions(node: ConfigNode,
                             environment: Optional[PlanetaryEnvironment] = None,
                             default_body: Optional[str] = None,
                             verbose: bool = False) -> MarkerDefinition:
    """
    Parse every child of `node` into a MarkerTemplate.

    Args:
        node: Generator node whose children are marker definitions
        environment: Used to check static-location names when the body is known
        default_body: Body used by markers that omit targetBody
        verbose: Print progress messages

    Returns:
        MarkerDefinition holding the templates in declaration order

    Raises:
        InvalidMarkerDefinitionError: If any definition is invalid
        UnknownMarkerTypeError: If any definition has an unrecognized type tag
    """
    logger = create_logger(verbose=verbose, name="MarkerConfig")
    results: List[ValidationResult] = []
    definition = MarkerDefinition()
    unknown_type = False
    declared_instances = 0

    for index, child in enumerate(node.get_nodes()):
        label = f"{child.name}[{index}]"
        try:
            marker_type = MarkerType(child.name)
        except ValueError:
            logger.error(f"Unrecognized marker node: '{child.name}'")
            results.append(ValidationResult(False, f"{label}: unrecognized marker type '{child.name}'"))
            unknown_type = True
            declared_instances += 1
            continue

        reader = _FieldReader(child, label, results)
        template = _read_template(reader, marker_type, index, default_body, declared_instances)
        reader.check_unexpected(COMMON_KEYS | TYPE_KEYS[marker_type])

        if marker_type.is_static and template.static_location_name:
            body = environment.get_body(template.body_name) if environment is not None else None
            if body is None:
                # Checked again once the body is known
                definition.unverified_static.append(index)
            elif find_static_location(environment, template) is None:
                logger.error(f"Couldn't load static location with name '{template.static_location_name}'")
                reader.fail(f"couldn't find static location '{template.static_location_name}'")

        definition.templates.append(template)
        declared_instances += max(1, template.count)

    check_all(results, UnknownMarkerTypeError if unknown_type else InvalidMarkerDefinitionError)

    logger.info(f"Parsed {len(definition.templates)} marker definitions "
                f"({definition.instance_count} markers per mission)")
    return definition


def parse_marker_text(text: str,
                      environment: Optional[PlanetaryEnvironment] = None,
                      default_body: Optional[str] = None,
                      verbose: bool = False) -> MarkerDefinition:
    """Parse config text whose top-level nodes are marker definitions."""
    return parse_marker_definitions(parse_config_text(text), environment, default_body, verbose)


def _read_template(reader: _FieldReader,
                   marker_type: MarkerType,
                   index: int,
                   default_body: Optional[str],
                   declared_instances: int) -> MarkerTemplate:
    body_name = reader.string("targetBody", required=default_body is None, default=default_body)
    template = MarkerTemplate(marker_type=marker_type, index=index, body_name=body_name or "")

    template.names = reader.string_list("name")
    template.altitude = reader.floating("altitude")
    template.parameters = reader.string_list("parameter")
    template.visible = not reader.boolean("hidden", False)
    template.icon = reader.string("icon", required=template.visible, default="") or ""
    template.underwater = reader.boolean("underwater", False)
    template.clustered = reader.boolean("clustered", False)

    if marker_type == MarkerType.FIXED:
        template.latitude = reader.floating("latitude", required=True, default=0.0,
                                            check=lambda x: -90.0 <= x <= 90.0, rule="within [-90, 90]")
        template.longitude = reader.floating("longitude", required=True, default=0.0)

    elif marker_type == MarkerType.RANDOM_UNIFORM:
        template.water_allowed = reader.boolean("waterAllowed", True)
        template.force_equatorial = reader.boolean("forceEquatorial", False)
        template.count = reader.integer("count", default=1, check=lambda x: x >= 1, rule=">= 1")

    elif marker_type == MarkerType.RANDOM_NEAR:
        template.water_allowed = reader.boolean("waterAllowed", True)

        # An empty vessel counts as absent
        template.craft_key = reader.string("vessel") or None
        has_craft = template.craft_key is not None
        has_index = reader.node.has_value("nearIndex")
        if has_craft == has_index:
            reader.fail("exactly one of 'vessel' or 'nearIndex' is required")

        if has_craft:
            if reader.node.has_value("chained"):
                reader.fail("'chained' only applies to markers anchored with 'nearIndex'")
        else:
            template.near_index = reader.integer(
                "nearIndex", default=None,
                check=lambda x: 0 <= x < declared_instances,
                rule=f"an earlier marker index (0..{declared_instances - 1})",
            )
            template.chained = reader.boolean("chained", False)

        template.count = reader.integer("count", default=1, check=lambda x: x >= 1, rule=">= 1")
        template.min_distance = reader.floating("minDistance", default=0.0, check=lambda x: x >= 0.0, rule=">= 0")
        template.max_distance = reader.floating("maxDistance", required=True, default=0.0,
                                                check=lambda x: x > 0.0, rule="> 0")
        if template.max_distance and template.min_distance > template.max_distance:
            reader.fail(f"minDistance ({template.min_distance}) is greater than maxDistance ({template.max_distance})")

    elif marker_type.is_static:
        key = "pqsCity" if marker_type == MarkerType.STATIC_CITY else "launchSite"
        template.static_location_name = reader.string(key, required=True)
        template.static_offset = reader.vector("pqsOffset")
        template.altitude = template.altitude if template.altitude is not None else 0.0

    return template
