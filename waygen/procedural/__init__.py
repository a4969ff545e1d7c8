"""
Procedural marker generation for waygen.

This package turns parsed marker definitions into concrete, per-mission
markers: duplication, coordinate synthesis, altitude assignment,
publication to a live map, and lifecycle handling.
"""

from .validation import (
    WaypointGenerationError,
    InvalidMarkerDefinitionError,
    UnknownMarkerTypeError,
    StaticLocationNotFoundError,
    ConfigSyntaxError,
)
from .mission import MissionContext, MissionEvent, MissionState, ParameterState
from .visibility import DisplaySettings, LiveMap, ViewContext, VisibilityManager
from .engine import MarkerGenerator

__all__ = [
    "MarkerGenerator",
    "MissionContext",
    "MissionEvent",
    "MissionState",
    "ParameterState",
    "DisplaySettings",
    "LiveMap",
    "ViewContext",
    "VisibilityManager",
    "WaypointGenerationError",
    "InvalidMarkerDefinitionError",
    "UnknownMarkerTypeError",
    "StaticLocationNotFoundError",
    "ConfigSyntaxError",
]
