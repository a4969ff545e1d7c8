"""
Publication of markers to an external live map.

A marker moves NOT_PUBLISHED -> PUBLISHED when it is resolved, visible,
its gating sub-objective (if any) is complete and the current view context
shows missions in its state. It moves back on mission termination,
unregistration, or a view-filter reset (after which every still-eligible
marker is published again).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ..classes.markers import MarkerInstance, PublishState
from ..misc.logger import create_logger
from .mission import MissionState


class LiveMap(ABC):
    """Contract of the external map that displays published markers."""

    @abstractmethod
    def add_marker(self, marker: MarkerInstance) -> None:
        ...

    @abstractmethod
    def remove_marker(self, marker: MarkerInstance) -> None:
        ...


class ViewContext(Enum):
    """Where the player is looking from."""
    FLIGHT = "flight"
    TRACKING_STATION = "tracking_station"
    SPACE_CENTER = "space_center"
    EDITOR = "editor"


@dataclass
class DisplaySettings:
    """Host preferences for which missions' markers are shown."""
    display_active_markers: bool = True
    display_offered_markers: bool = False


class VisibilityManager:
    """Publishes and retracts one mission's markers on a live map."""

    def __init__(self,
                 live_map: LiveMap,
                 settings: DisplaySettings = None,
                 view_context: ViewContext = ViewContext.FLIGHT,
                 verbose: bool = False):
        self.live_map = live_map
        self.settings = settings or DisplaySettings()
        self.view_context = view_context
        self.logger = create_logger(verbose=verbose, name="Visibility")

    def is_gate_open(self, marker: MarkerInstance) -> bool:
        """No gating parameter, or the first one is complete."""
        parameter_id = marker.gating_parameter
        if parameter_id is None:
            return True
        return marker.mission is not None and marker.mission.is_parameter_complete(parameter_id)

    def is_eligible(self, marker: MarkerInstance) -> bool:
        """Resolved, visible, attached to a mission and not gated."""
        return (marker.is_resolved and marker.visible and marker.mission is not None
                and self.is_gate_open(marker))

    def context_permits(self, marker: MarkerInstance) -> bool:
        """Whether the current view context shows markers of the marker's mission state."""
        if self.view_context not in (ViewContext.FLIGHT, ViewContext.TRACKING_STATION):
            return False

        state = marker.mission.state
        in_tracking = self.view_context == ViewContext.TRACKING_STATION
        if state == MissionState.ACTIVE:
            return self.settings.display_active_markers or not in_tracking
        if state == MissionState.OFFERED:
            return self.settings.display_offered_markers and in_tracking
        return False

    def publish(self, marker: MarkerInstance) -> bool:
        """
        Push a marker to the live map.

        No-op if already published or detached from its mission.

        Returns:
            True if the marker was added to the map by this call
        """
        if marker.is_published or marker.mission is None:
            return False

        marker.is_on_surface = True
        marker.is_navigable = True

        if not self.context_permits(marker):
            return False

        self.live_map.add_marker(marker)
        marker.publish_state = PublishState.PUBLISHED
        self.logger.debug(f"Published marker {marker.index} '{marker.name}'")
        return True

    def retract(self, marker: MarkerInstance):
        self.live_map.remove_marker(marker)
        if marker.is_published:
            self.logger.debug(f"Retracted marker {marker.index} '{marker.name}'")
        marker.publish_state = PublishState.NOT_PUBLISHED

    def sync(self, markers: Iterable[MarkerInstance]) -> int:
        """Publish every eligible marker that is not on the map yet. Returns how many were added."""
        added = 0
        for marker in markers:
            if self.is_eligible(marker) and self.publish(marker):
                added += 1
        return added

    def retract_all(self, markers: Iterable[MarkerInstance]):
        for marker in markers:
            self.retract(marker)

    def reset_view_filters(self, markers: Iterable[MarkerInstance]) -> int:
        """
        Rebuild the map state after the host reset its view filters.

        The map may have dropped its render state without telling us, so
        everything is retracted and eligible markers are published again.
        """
        markers = list(markers)
        self.retract_all(markers)
        return self.sync(markers)
