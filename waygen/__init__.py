__version__ = "0.1.0"

# --- Procedural Engine ---
from .procedural import (
    MarkerGenerator,
    MissionContext,
    MissionEvent,
    MissionState,
    ParameterState,
    DisplaySettings,
    LiveMap,
    ViewContext,
    WaypointGenerationError,
    InvalidMarkerDefinitionError,
    UnknownMarkerTypeError,
    StaticLocationNotFoundError,
    ConfigSyntaxError,
)

# --- Definitions and Persistence ---
from .parsers.config_node import ConfigNode, format_config_node, parse_config_text
from .parsers.marker_config import MarkerDefinition, parse_marker_definitions, parse_marker_text
from .parsers.persistence import dumps_markers, loads_markers

# --- Essential Dataclasses ---
from .classes.bodies import CelestialBody, CraftPosition, StaticLocation, StaticLocationKind
from .classes.markers import MarkerInstance, MarkerTemplate, MarkerType

# --- Environment ---
from .terrain.environment import PlanetaryEnvironment

# --- Visualization ---
from .visualization import Map2DMarkerView

from .misc.logger import create_logger
_logger = create_logger(verbose=False, name="waygen")
_logger.info(f"Waygen {__version__} loaded.")
