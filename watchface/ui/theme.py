"""
Theme - Colors, stroke widths and paints for the analog face
"""
from .canvas import Paint


class Theme:
    """
    Dark theme configuration for the analog face.
    """

    # Color Palette
    BG_PRIMARY = '#000000'        # Face background and hub rings
    FG_HAND = '#ffffff'           # Hour/minute hands and major ticks
    FG_TICK = '#ffffff'           # Minor ticks
    ACCENT_SECOND = '#ff0000'     # Second hand
    FG_LABEL = '#0f00247f'        # Dial digits, half transparent

    # Strokes
    HAND_STROKE_WIDTH = 7
    SECOND_STROKE_WIDTH = 3
    TICK_STROKE_WIDTH = 1

    # Text
    LABEL_TEXT_SIZE = 22

    # Tick marks, measured inward from the bottom edge
    MAJOR_TICK_LENGTH = 16
    MINOR_TICK_LENGTH = 3

    # Hubs
    HUB_RADIUS = 13
    HUB_RING_RADIUS = 7
    SECOND_HUB_RADIUS = 8
    SECOND_HUB_RING_RADIUS = 4

    # Dial label inset from the edges
    LABEL_INSET = 20

    @staticmethod
    def background_paint() -> Paint:
        return Paint(color=Theme.BG_PRIMARY)

    @staticmethod
    def hand_paint() -> Paint:
        return Paint(
            color=Theme.FG_HAND,
            stroke_width=Theme.HAND_STROKE_WIDTH,
            anti_alias=True,
            stroke_cap='square',
            style='fill',
        )

    @staticmethod
    def second_hand_paint() -> Paint:
        return Paint(
            color=Theme.ACCENT_SECOND,
            stroke_width=Theme.SECOND_STROKE_WIDTH,
            anti_alias=True,
            stroke_cap='square',
            style='fill',
        )

    @staticmethod
    def tick_paint() -> Paint:
        return Paint(color=Theme.FG_TICK, stroke_width=Theme.TICK_STROKE_WIDTH)

    @staticmethod
    def label_paint() -> Paint:
        return Paint(color=Theme.FG_LABEL, text_size=Theme.LABEL_TEXT_SIZE)


class FacePaints:
    """
    The mutable paint set of one engine.

    Anti-aliasing on the hands follows the display mode; the other paints
    never anti-alias.
    """

    def __init__(self):
        self.background = Theme.background_paint()
        self.hand = Theme.hand_paint()
        self.second_hand = Theme.second_hand_paint()
        self.tick = Theme.tick_paint()
        self.label = Theme.label_paint()

    def set_ambient(self, ambient: bool) -> None:
        self.hand.anti_alias = not ambient
        self.second_hand.anti_alias = not ambient
