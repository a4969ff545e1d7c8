from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class MissionState(Enum):
    """Lifecycle of the mission that owns a set of markers."""
    GENERATED = "generated"
    OFFERED = "offered"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    DECLINED = "declined"
    OFFER_EXPIRED = "offer_expired"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (MissionState.COMPLETED, MissionState.FAILED, MissionState.DECLINED,
                        MissionState.OFFER_EXPIRED, MissionState.CANCELLED)


class ParameterState(Enum):
    """State of a mission sub-objective used for gating."""
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"
    FAILED = "failed"


class MissionEvent(Enum):
    """Inbound lifecycle triggers a marker generator responds to."""
    OFFERED = "offered"
    PARAMETER_STATE_CHANGED = "parameter_state_changed"
    ACCEPTED = "accepted"
    LOADED = "loaded"
    CRAFT_ASSOCIATION_CHANGED = "craft_association_changed"
    VIEW_FILTERS_RESET = "view_filters_reset"
    ENVIRONMENT_READY = "environment_ready"
    FINISHED = "finished"
    DECLINED = "declined"
    OFFER_EXPIRED = "offer_expired"
    FAILED = "failed"
    UNREGISTERED = "unregistered"

    @property
    def triggers_resolution(self) -> bool:
        return self in (MissionEvent.OFFERED, MissionEvent.PARAMETER_STATE_CHANGED, MissionEvent.ACCEPTED,
                        MissionEvent.LOADED, MissionEvent.CRAFT_ASSOCIATION_CHANGED)

    @property
    def terminates(self) -> bool:
        return self in (MissionEvent.FINISHED, MissionEvent.DECLINED, MissionEvent.OFFER_EXPIRED,
                        MissionEvent.FAILED, MissionEvent.UNREGISTERED)


@dataclass
class MissionContext:
    """
    The mission a marker set belongs to.

    `seed` is the mission's stable seed; all marker randomness derives from
    it so that regenerating a mission reproduces the same markers.
    """
    mission_id: str
    seed: int
    state: MissionState = MissionState.GENERATED
    target_body: Optional[str] = None
    parameters: Dict[str, ParameterState] = field(default_factory=dict)

    def set_parameter_state(self, parameter_id: str, state: ParameterState):
        self.parameters[parameter_id] = state

    def parameter_state(self, parameter_id: str) -> Optional[ParameterState]:
        return self.parameters.get(parameter_id)

    def is_parameter_complete(self, parameter_id: str) -> bool:
        return self.parameters.get(parameter_id) == ParameterState.COMPLETE
