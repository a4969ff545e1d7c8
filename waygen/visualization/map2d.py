"""
Lightweight 2D live map for published markers using matplotlib.

Markers pushed by a VisibilityManager are kept in memory and can be
rendered to a longitude/latitude overview image per body.
"""

from io import BytesIO
from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

from ..classes.markers import MarkerInstance, MarkerType
from ..misc.logger import create_logger
from ..procedural.visibility import LiveMap


class Map2DMarkerView(LiveMap):
    """
    In-memory live map with static image output.

    Example:
        >>> view = Map2DMarkerView()
        >>> generator = MarkerGenerator.instantiate(definition, mission, env, live_map=view)
        >>> generator.handle_event(MissionEvent.ACCEPTED)
        >>> view.save_overview("markers.png", body_name="Terra")
    """

    def __init__(self, figsize: Tuple[int, int] = (12, 6), dpi: int = 150, verbose: bool = False):
        self.figsize = figsize
        self.dpi = dpi
        self.logger = create_logger(verbose=verbose, name="Map2D")
        self._markers: Dict[Tuple[Optional[str], int], MarkerInstance] = {}

        self.colors = {
            'fixed': '#0066CC',
            'random': '#FF6600',
            'near': '#CC0000',
            'static': '#28A745',
            'underwater': '#1F4E79',
        }

    @staticmethod
    def _key(marker: MarkerInstance) -> Tuple[Optional[str], int]:
        mission_id = marker.mission.mission_id if marker.mission is not None else None
        return mission_id, marker.index

    # --- LiveMap ---
    def add_marker(self, marker: MarkerInstance) -> None:
        self._markers[self._key(marker)] = marker

    def remove_marker(self, marker: MarkerInstance) -> None:
        # Removing a marker that was never added is allowed
        self._markers.pop(self._key(marker), None)

    def __contains__(self, marker: MarkerInstance) -> bool:
        return self._key(marker) in self._markers

    def __len__(self) -> int:
        return len(self._markers)

    def published_markers(self, body_name: Optional[str] = None) -> List[MarkerInstance]:
        markers = list(self._markers.values())
        if body_name is not None:
            markers = [m for m in markers if m.body_name == body_name]
        return markers

    # --- Rendering ---
    def _marker_color(self, marker: MarkerInstance) -> str:
        if marker.underwater:
            return self.colors['underwater']
        if marker.marker_type.is_static:
            return self.colors['static']
        if marker.marker_type == MarkerType.RANDOM_NEAR:
            return self.colors['near']
        if marker.marker_type == MarkerType.RANDOM_UNIFORM:
            return self.colors['random']
        return self.colors['fixed']

    def _draw(self, body_name: Optional[str]):
        markers = self.published_markers(body_name)
        self.logger.info(f"Drawing {len(markers)} markers...")

        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        for marker in markers:
            ax.scatter(marker.longitude, marker.latitude, s=80, c=self._marker_color(marker),
                       marker='^', edgecolors='black', linewidth=1, zorder=9)
            ax.annotate(marker.name, (marker.longitude, marker.latitude),
                        xytext=(0, 10), textcoords='offset points',
                        ha='center', fontsize=8, fontweight='bold')

        ax.set_xlim(-180, 180)
        ax.set_ylim(-90, 90)
        ax.set_xlabel('Longitude (deg)', fontsize=12)
        ax.set_ylabel('Latitude (deg)', fontsize=12)
        ax.set_title(f'Markers - {body_name or "all bodies"}', fontsize=14, fontweight='bold')
        ax.grid(True, alpha=0.3)
        plt.tight_layout()
        return fig

    def save_overview(self, filename: str, body_name: Optional[str] = None) -> str:
        """
        Save an overview image of the published markers.

        Args:
            filename: Output image path
            body_name: Only draw markers on this body

        Returns:
            Path to saved file
        """
        fig = self._draw(body_name)
        fig.savefig(filename, dpi=self.dpi, bbox_inches='tight')
        plt.close(fig)
        self.logger.info(f"✓ Marker overview saved: {filename}")
        return filename

    def get_overview_bytes(self, body_name: Optional[str] = None, format: str = 'PNG') -> bytes:
        """Overview image as bytes."""
        fig = self._draw(body_name)
        buffer = BytesIO()
        fig.savefig(buffer, format=format.lower(), dpi=self.dpi, bbox_inches='tight')
        plt.close(fig)

        image_bytes = buffer.getvalue()
        buffer.close()
        return image_bytes
