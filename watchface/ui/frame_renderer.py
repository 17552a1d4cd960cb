"""
Frame Renderer - Turns a clock sample and the render state into drawing calls
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from PIL import Image

from ..core.clock_service import ClockSample
from ..core.render_state import RenderState
from .canvas import Canvas
from .theme import FacePaints, Theme


# 360 / 60 = 6 and 360 / 12 = 30
DEGREES_PER_SECOND = 6.0
DEGREES_PER_MINUTE = 6.0
DEGREES_PER_HOUR = 30.0
HOUR_DEGREES_PER_MINUTE = 0.5

MAJOR_TICKS = 12
MINOR_TICKS_PER_MAJOR = 4
TICK_STEP_DEGREES = 6.0

LABEL_LAYOUTS = ('source', 'corrected')

Label = Tuple[str, float, float]


@dataclass(frozen=True)
class HandAngles:
    """Clockwise hand rotations in degrees from 12 o'clock."""

    hours: float
    minutes: float
    seconds: float


def compute_hand_angles(sample: ClockSample) -> HandAngles:
    """
    Rotation of each hand for a clock sample.

    The second hand sweeps with the sub-second fraction, the minute hand
    steps once a minute and the hour hand advances half a degree per minute.
    """
    seconds = (sample.second + sample.fractional_second) * DEGREES_PER_SECOND
    minutes = sample.minute * DEGREES_PER_MINUTE
    hours = sample.hour * DEGREES_PER_HOUR + sample.minute * HOUR_DEGREES_PER_MINUTE
    return HandAngles(hours=hours, minutes=minutes, seconds=seconds)


def label_positions(layout: str, state: RenderState) -> List[Label]:
    """
    Dial label text and baseline positions.

    Args:
        layout: 'source' keeps the original placement, where "6" and "9" sit
            at negative coordinates; 'corrected' puts all four on the face
        state: Current render state

    Returns:
        List of (text, x, y)

    Raises:
        ValueError: For an unknown layout
    """
    w, h = state.width, state.height
    cx, cy = state.center_x, state.center_y
    inset = Theme.LABEL_INSET

    if layout == 'source':
        return [
            ('3', w - inset, cy),
            ('6', cx, -h + inset),
            ('9', -w + inset, cy),
            ('12', cx, h - inset),
            ('12', cx, cy),
        ]
    if layout == 'corrected':
        return [
            ('3', w - inset, cy),
            ('6', cx, h - inset),
            ('9', inset, cy),
            ('12', cx, inset + Theme.LABEL_TEXT_SIZE),
            ('12', cx, cy),
        ]
    raise ValueError(f"Unknown label layout: {layout}")


class FrameRenderer:
    """
    Draws one frame of the analog face.

    Drawing order matters: later strokes cover earlier ones at the shared
    pivot, so ticks come first, then hour, minute and second hands.
    """

    def __init__(self, paints: FacePaints, label_layout: str = 'source'):
        """
        Initialize frame renderer.

        Args:
            paints: Paint set shared with the engine
            label_layout: Dial label layout name

        Raises:
            ValueError: For an unknown label layout
        """
        if label_layout not in LABEL_LAYOUTS:
            raise ValueError(f"Unknown label layout: {label_layout}")
        self._paints = paints
        self._label_layout = label_layout

    def render(
        self,
        canvas: Canvas,
        sample: ClockSample,
        state: RenderState,
        background: Optional[Image.Image] = None
    ) -> HandAngles:
        """
        Draw background, labels, ticks and hands.

        Args:
            canvas: Drawing surface
            sample: Clock sample for this frame
            state: Current render state
            background: Pre-scaled background image, None for a solid fill

        Returns:
            The hand angles used for this frame
        """
        paints = self._paints

        if background is not None:
            canvas.draw_bitmap(background, 0, 0, paints.background)
        else:
            canvas.draw_color(paints.background.color)

        for text, x, y in label_positions(self._label_layout, state):
            canvas.draw_text(text, x, y, paints.label)

        angles = compute_hand_angles(sample)
        cx, cy = state.center_x, state.center_y

        with canvas.scoped():
            self._draw_ticks(canvas, state)

            canvas.rotate(angles.hours, cx, cy)
            canvas.draw_line(cx, cy, cx, cy - state.hour_hand_length, paints.hand)

            canvas.rotate(angles.minutes - angles.hours, cx, cy)
            canvas.draw_line(cx, cy, cx, cy - state.minute_hand_length, paints.hand)

            canvas.draw_circle(cx, cy, Theme.HUB_RADIUS, paints.hand)
            canvas.draw_circle(cx, cy, Theme.HUB_RING_RADIUS, paints.background)

            if not state.ambient:
                canvas.rotate(angles.seconds - angles.minutes, cx, cy)
                canvas.draw_line(cx, cy, cx, cy - state.second_hand_length, paints.second_hand)
                canvas.draw_circle(cx, cy, Theme.SECOND_HUB_RADIUS, paints.second_hand)
                canvas.draw_circle(cx, cy, Theme.SECOND_HUB_RING_RADIUS, paints.background)

        return angles

    def _draw_ticks(self, canvas: Canvas, state: RenderState) -> None:
        """One major tick then four minor ticks per hour, 6 degrees apart"""
        cx, cy, h = state.center_x, state.center_y, state.height
        for _ in range(MAJOR_TICKS):
            canvas.draw_line(cx, h - Theme.MAJOR_TICK_LENGTH, cx, h, self._paints.hand)
            canvas.rotate(TICK_STEP_DEGREES, cx, cy)
            for _ in range(MINOR_TICKS_PER_MAJOR):
                canvas.draw_line(cx, h - Theme.MINOR_TICK_LENGTH, cx, h, self._paints.tick)
                canvas.rotate(TICK_STEP_DEGREES, cx, cy)

    @property
    def label_layout(self) -> str:
        return self._label_layout
