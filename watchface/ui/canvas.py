"""
Canvas - Drawing surfaces with an affine transform stack
"""
import math
import os
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont


FONT_PATHS = [
    '/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf',
    '/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf',
    '/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf',
]

Point = Tuple[float, float]


@dataclass
class Paint:
    """Stroke and fill attributes for one drawing call."""

    color: str = '#ffffff'
    stroke_width: float = 1.0
    anti_alias: bool = False
    stroke_cap: str = 'butt'
    style: str = 'fill'
    text_size: float = 12.0

    def copy(self) -> 'Paint':
        return replace(self)


class TransformStack:
    """
    Current transform plus the saved ones, as 3x3 affine matrices.

    Rotations use screen coordinates (y down), so positive degrees turn
    clockwise, matching clock hands.
    """

    def __init__(self):
        self._matrix = np.identity(3)
        self._rotation = 0.0
        self._saved: List[Tuple[np.ndarray, float]] = []

    def rotate(self, degrees: float, px: float = 0.0, py: float = 0.0) -> None:
        """
        Rotate about a pivot point.

        Args:
            degrees: Clockwise rotation in degrees
            px: Pivot x
            py: Pivot y
        """
        rad = math.radians(degrees)
        c, s = math.cos(rad), math.sin(rad)
        rotation = np.array([
            [c, -s, px - c * px + s * py],
            [s, c, py - s * px - c * py],
            [0.0, 0.0, 1.0],
        ])
        self._matrix = self._matrix @ rotation
        self._rotation += degrees

    def save(self) -> int:
        """
        Push the current transform.

        Returns:
            Save count before the push, for restore_to_count()
        """
        count = len(self._saved)
        self._saved.append((self._matrix.copy(), self._rotation))
        return count

    def restore(self) -> None:
        """
        Pop the most recently saved transform.

        Raises:
            RuntimeError: If there is no matching save()
        """
        if not self._saved:
            raise RuntimeError("restore() called without a matching save()")
        self._matrix, self._rotation = self._saved.pop()

    def restore_to_count(self, count: int) -> None:
        """Pop saved transforms until only count remain"""
        while len(self._saved) > count:
            self.restore()

    @contextmanager
    def scoped(self) -> Iterator['TransformStack']:
        """Save on entry, restore on every exit path"""
        count = self.save()
        try:
            yield self
        finally:
            self.restore_to_count(count)

    def map_point(self, x: float, y: float) -> Point:
        """Map a local point to device coordinates"""
        mapped = self._matrix @ np.array([x, y, 1.0])
        return (float(mapped[0]), float(mapped[1]))

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix.copy()

    @property
    def rotation(self) -> float:
        """Cumulative rotation in degrees since the last reset"""
        return self._rotation

    @property
    def depth(self) -> int:
        return len(self._saved)


class Canvas:
    """
    Drawing surface interface used by the frame renderer.

    Subclasses implement the primitives; the transform stack is shared.
    """

    def __init__(self, width: int, height: int):
        self._width = width
        self._height = height
        self.transform = TransformStack()

    def rotate(self, degrees: float, px: float = 0.0, py: float = 0.0) -> None:
        self.transform.rotate(degrees, px, py)

    def save(self) -> int:
        return self.transform.save()

    def restore(self) -> None:
        self.transform.restore()

    def scoped(self):
        return self.transform.scoped()

    def draw_color(self, color: str) -> None:
        raise NotImplementedError

    def draw_bitmap(self, bitmap: Image.Image, x: float, y: float, paint: Paint) -> None:
        raise NotImplementedError

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, paint: Paint) -> None:
        raise NotImplementedError

    def draw_circle(self, cx: float, cy: float, radius: float, paint: Paint) -> None:
        raise NotImplementedError

    def draw_text(self, text: str, x: float, y: float, paint: Paint) -> None:
        raise NotImplementedError

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height


@dataclass
class DrawCommand:
    """One recorded drawing call, in device coordinates."""

    op: str
    points: Tuple[Point, ...] = ()
    radius: float = 0.0
    text: str = ''
    color: str = ''
    paint: Optional[Paint] = None
    rotation: float = 0.0
    local: Tuple[float, ...] = field(default_factory=tuple)


class RecordingCanvas(Canvas):
    """
    Canvas that records every call instead of rasterizing it.
    """

    def __init__(self, width: int = 0, height: int = 0):
        super().__init__(width, height)
        self.commands: List[DrawCommand] = []

    def _record(self, op: str, points=(), local=(), paint: Optional[Paint] = None, **kwargs) -> None:
        self.commands.append(DrawCommand(
            op=op,
            points=tuple(self.transform.map_point(x, y) for x, y in points),
            paint=paint.copy() if paint is not None else None,
            rotation=self.transform.rotation,
            local=tuple(local),
            **kwargs
        ))

    def draw_color(self, color: str) -> None:
        self._record('color', color=color)

    def draw_bitmap(self, bitmap: Image.Image, x: float, y: float, paint: Paint) -> None:
        self._record('bitmap', points=[(x, y)], local=(x, y, bitmap.width, bitmap.height), paint=paint)

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, paint: Paint) -> None:
        self._record('line', points=[(x0, y0), (x1, y1)], local=(x0, y0, x1, y1), paint=paint)

    def draw_circle(self, cx: float, cy: float, radius: float, paint: Paint) -> None:
        self._record('circle', points=[(cx, cy)], local=(cx, cy), paint=paint, radius=radius)

    def draw_text(self, text: str, x: float, y: float, paint: Paint) -> None:
        self._record('text', points=[(x, y)], local=(x, y), paint=paint, text=text)

    def by_op(self, op: str) -> List[DrawCommand]:
        return [command for command in self.commands if command.op == op]


class PillowCanvas(Canvas):
    """
    Canvas that rasterizes onto a Pillow image.

    Geometry is mapped through the transform stack before drawing. Bitmaps
    are placed at their mapped origin without being rotated.
    """

    def __init__(self, image: Image.Image):
        super().__init__(image.width, image.height)
        self._image = image
        self._draw = ImageDraw.Draw(image, 'RGBA')
        self._fonts: Dict[int, ImageFont.ImageFont] = {}
        self._font_file = self._find_font_file()

    @staticmethod
    def _find_font_file() -> Optional[str]:
        for path in FONT_PATHS:
            if os.path.exists(path):
                return path
        return None

    def _font(self, size: float):
        key = max(1, int(round(size)))
        if key not in self._fonts:
            if self._font_file:
                self._fonts[key] = ImageFont.truetype(self._font_file, key)
            else:
                self._fonts[key] = ImageFont.load_default(key)
        return self._fonts[key]

    def draw_color(self, color: str) -> None:
        self._draw.rectangle([0, 0, self._width, self._height], fill=color)

    def draw_bitmap(self, bitmap: Image.Image, x: float, y: float, paint: Paint) -> None:
        mx, my = self.transform.map_point(x, y)
        mask = bitmap if bitmap.mode == 'RGBA' else None
        self._image.paste(bitmap, (int(round(mx)), int(round(my))), mask)

    def draw_line(self, x0: float, y0: float, x1: float, y1: float, paint: Paint) -> None:
        start = self.transform.map_point(x0, y0)
        end = self.transform.map_point(x1, y1)
        width = max(1, int(round(paint.stroke_width)))
        self._draw.line([start, end], fill=paint.color, width=width)

    def draw_circle(self, cx: float, cy: float, radius: float, paint: Paint) -> None:
        mx, my = self.transform.map_point(cx, cy)
        bounds = [mx - radius, my - radius, mx + radius, my + radius]
        if paint.style == 'stroke':
            width = max(1, int(round(paint.stroke_width)))
            self._draw.ellipse(bounds, outline=paint.color, width=width)
        else:
            self._draw.ellipse(bounds, fill=paint.color)

    def draw_text(self, text: str, x: float, y: float, paint: Paint) -> None:
        mx, my = self.transform.map_point(x, y)
        # "1" renders glyphs without anti-aliasing
        self._draw.fontmode = 'L' if paint.anti_alias else '1'
        self._draw.text((mx, my), text, fill=paint.color, font=self._font(paint.text_size), anchor='ls')

    @property
    def image(self) -> Image.Image:
        return self._image
