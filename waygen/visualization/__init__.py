"""
Visualization module for waygen.

Provides a matplotlib-backed live map that collects published markers
and renders them as a static overview image.
"""

from .map2d import Map2DMarkerView

__all__ = ['Map2DMarkerView']
