# waygen/classes/markers.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from waygen.procedural.mission import MissionContext

# Names equal to this token (case-insensitive) are replaced by a generated site name
PLACEHOLDER_NAME = "site"


class MarkerType(Enum):
    """Placement types, valued by their config tag."""
    FIXED = "WAYPOINT"
    RANDOM_UNIFORM = "RANDOM_WAYPOINT"
    RANDOM_NEAR = "RANDOM_WAYPOINT_NEAR"
    STATIC_CITY = "PQS_CITY"
    STATIC_LAUNCH_SITE = "LAUNCH_SITE"

    @property
    def is_static(self) -> bool:
        return self in (MarkerType.STATIC_CITY, MarkerType.STATIC_LAUNCH_SITE)

    @property
    def is_duplicable(self) -> bool:
        return self in (MarkerType.RANDOM_UNIFORM, MarkerType.RANDOM_NEAR)


class ResolutionState(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class PublishState(Enum):
    NOT_PUBLISHED = "not_published"
    PUBLISHED = "published"


class PendingReason(Enum):
    """Why a marker is still pending after a resolution pass."""
    NOT_ATTEMPTED = "not_attempted"
    BODY_UNAVAILABLE = "body_unavailable"
    ANCHOR_PENDING = "anchor_pending"
    CRAFT_UNAVAILABLE = "craft_unavailable"
    STATIC_LOCATION_UNAVAILABLE = "static_location_unavailable"


@dataclass
class MarkerTemplate:
    """Mission-independent marker definition, produced by the config parser."""
    marker_type: MarkerType
    index: int
    body_name: str
    names: List[str] = field(default_factory=list)
    altitude: Optional[float] = None  # None -> random altitude
    parameters: List[str] = field(default_factory=list)
    visible: bool = True
    icon: str = ""
    underwater: bool = False
    clustered: bool = False
    water_allowed: bool = True
    force_equatorial: bool = False

    # Fixed
    latitude: float = 0.0
    longitude: float = 0.0

    # RandomUniform / RandomNear
    count: int = 1

    # RandomNear
    min_distance: float = 0.0
    max_distance: float = 0.0
    near_index: Optional[int] = None
    craft_key: Optional[str] = None
    chained: bool = False

    # StaticCity / StaticLaunchSite
    static_location_name: Optional[str] = None
    static_offset: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    @property
    def random_altitude(self) -> bool:
        return self.altitude is None and not self.marker_type.is_static


@dataclass
class MarkerInstance:
    """
    Runtime marker owned by one mission's generator.

    `index` is the stable handle other markers use to anchor on this one.
    Coordinates are meaningful only once `state` is RESOLVED.
    """
    index: int
    marker_type: MarkerType
    body_name: str
    name: str = ""
    names: List[str] = field(default_factory=list)
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    random_altitude: bool = False
    parameters: List[str] = field(default_factory=list)
    visible: bool = True
    icon: str = ""
    underwater: bool = False
    clustered: bool = False
    water_allowed: bool = True
    force_equatorial: bool = False
    count: int = 1
    min_distance: float = 0.0
    max_distance: float = 0.0
    near_index: Optional[int] = None
    craft_key: Optional[str] = None
    chained: bool = False
    static_location_name: Optional[str] = None
    static_offset: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    seed: int = 0

    state: ResolutionState = ResolutionState.PENDING
    pending_reason: Optional[PendingReason] = PendingReason.NOT_ATTEMPTED
    publish_state: PublishState = field(default=PublishState.NOT_PUBLISHED, compare=False)
    late_corrected: bool = False
    is_on_surface: bool = field(default=False, compare=False)
    is_navigable: bool = field(default=False, compare=False)

    mission: Optional["MissionContext"] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_template(cls, template: MarkerTemplate, index: int, mission: Optional["MissionContext"] = None,
                      seed: int = 0) -> "MarkerInstance":
        """Copy every template field needed at resolution time into a fresh pending marker."""
        return cls(
            index=index,
            marker_type=template.marker_type,
            body_name=template.body_name,
            names=list(template.names),
            latitude=template.latitude,
            longitude=template.longitude,
            altitude=template.altitude if template.altitude is not None else 0.0,
            random_altitude=template.random_altitude,
            parameters=list(template.parameters),
            visible=template.visible,
            icon=template.icon,
            underwater=template.underwater,
            clustered=template.clustered,
            water_allowed=template.water_allowed,
            force_equatorial=template.force_equatorial,
            count=template.count,
            min_distance=template.min_distance,
            max_distance=template.max_distance,
            near_index=template.near_index,
            craft_key=template.craft_key,
            chained=template.chained,
            static_location_name=template.static_location_name,
            static_offset=tuple(template.static_offset),
            seed=seed,
            mission=mission,
        )

    @property
    def is_resolved(self) -> bool:
        return self.state == ResolutionState.RESOLVED

    @property
    def is_published(self) -> bool:
        return self.publish_state == PublishState.PUBLISHED

    @property
    def anchor(self) -> Optional[Union[int, str]]:
        """The near-placement anchor: another marker's index or a craft key."""
        if self.marker_type != MarkerType.RANDOM_NEAR:
            return None
        return self.craft_key if self.craft_key else self.near_index

    @property
    def gating_parameter(self) -> Optional[str]:
        return self.parameters[0] if self.parameters else None

    def mark_resolved(self):
        self.state = ResolutionState.RESOLVED
        self.pending_reason = None

    def defer(self, reason: PendingReason):
        self.state = ResolutionState.PENDING
        self.pending_reason = reason

    def to_dict(self) -> Dict[str, Any]:
        """Plain snapshot of the marker's data fields (no mission reference)."""
        return {
            "index": self.index,
            "type": self.marker_type.value,
            "body": self.body_name,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "altitude": self.altitude,
            "state": self.state.value,
            "published": self.is_published,
        }
