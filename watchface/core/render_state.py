"""
Render State - Surface geometry and display mode of the watch face
"""
from dataclasses import dataclass


HOUR_HAND_RATIO = 0.5
MINUTE_HAND_RATIO = 0.7
SECOND_HAND_RATIO = 0.9


@dataclass
class RenderState:
    """
    Geometry derived from the surface size plus the ambient/visible flags.

    Every geometry field is re-derived from width, height and the background
    width on each resize, so the last resize alone decides the result.
    """

    width: int = 0
    height: int = 0
    center_x: float = 0.0
    center_y: float = 0.0
    scale: float = 1.0
    hour_hand_length: float = 0.0
    minute_hand_length: float = 0.0
    second_hand_length: float = 0.0
    ambient: bool = False
    visible: bool = False

    def resize(self, width: int, height: int, background_width: int = 0) -> None:
        """
        Recompute geometry for a new surface size.

        Args:
            width: Surface width in pixels
            height: Surface height in pixels
            background_width: Width of the originally decoded background, 0 if none
        """
        self.width = max(0, int(width))
        self.height = max(0, int(height))

        # Center on the whole surface, ignoring insets such as a flat "chin"
        self.center_x = self.width / 2.0
        self.center_y = self.height / 2.0

        self.scale = self.width / background_width if background_width > 0 else 1.0

        half_width = self.width / 2.0
        self.hour_hand_length = HOUR_HAND_RATIO * half_width
        self.minute_hand_length = MINUTE_HAND_RATIO * half_width
        self.second_hand_length = SECOND_HAND_RATIO * half_width

    def set_ambient(self, ambient: bool) -> bool:
        """
        Set ambient mode.

        Returns:
            True if the flag changed
        """
        changed = self.ambient != bool(ambient)
        self.ambient = bool(ambient)
        return changed

    def set_visible(self, visible: bool) -> bool:
        """
        Set visibility.

        Returns:
            True if the flag changed
        """
        changed = self.visible != bool(visible)
        self.visible = bool(visible)
        return changed

    @property
    def interactive(self) -> bool:
        """Whether the once-a-second redraw timer should run"""
        return self.visible and not self.ambient
