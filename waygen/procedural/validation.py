"""Validation and error handling for marker generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


class WaypointGenerationError(Exception):
    """Base exception for marker generation failures."""
    pass


class InvalidMarkerDefinitionError(WaypointGenerationError):
    """Raised when a marker definition fails validation; no generator is produced."""

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__("Invalid marker definition:\n  " + "\n  ".join(self.errors))


class UnknownMarkerTypeError(InvalidMarkerDefinitionError):
    """Raised when a marker definition uses an unrecognized type tag."""
    pass


class StaticLocationNotFoundError(WaypointGenerationError):
    """Raised when a static location name is not present in the registry."""

    def __init__(self, name: str, body_name: str = ""):
        self.name = name
        self.body_name = body_name
        where = f" on '{body_name}'" if body_name else ""
        super().__init__(f"Couldn't find static location '{name}'{where}")


class ConfigSyntaxError(WaypointGenerationError):
    """Raised when config-node text cannot be parsed."""

    def __init__(self, message: str, line: int = 0):
        self.line = line
        super().__init__(f"line {line}: {message}" if line else message)


@dataclass
class ValidationResult:
    """Result of a validation check."""
    valid: bool
    message: str = ""

    def raise_if_invalid(self, error_class: type = WaypointGenerationError):
        """Raise an error if validation failed."""
        if not self.valid:
            if issubclass(error_class, InvalidMarkerDefinitionError):
                raise error_class([self.message])
            raise error_class(self.message)


def check_all(results: Iterable[ValidationResult], error_class: type = InvalidMarkerDefinitionError):
    """Raise once with every failed message, if any check failed."""
    errors = [r.message for r in results if not r.valid]
    if errors:
        raise error_class(errors)
