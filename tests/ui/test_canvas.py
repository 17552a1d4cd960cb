import pytest
from PIL import Image

from watchface.ui.canvas import Paint, PillowCanvas, RecordingCanvas, TransformStack


def approx_point(point):
    return pytest.approx(point, abs=1e-9)


class TestTransformStack:
    """Verify rotation about a pivot and scoped restore so hand geometry lands where expected."""

    def test_positive_rotation_turns_clockwise(self) -> None:
        """With y pointing down, +90 degrees moves 12 o'clock to 3 o'clock."""
        stack = TransformStack()
        stack.rotate(90, 100, 100)

        assert stack.map_point(100, 0) == approx_point((200.0, 100.0))

    def test_rotations_accumulate(self) -> None:
        """Two 45 degree rotations equal one 90 degree rotation."""
        stack = TransformStack()
        stack.rotate(45, 50, 50)
        stack.rotate(45, 50, 50)

        assert stack.rotation == 90
        assert stack.map_point(50, 0) == approx_point((100.0, 50.0))

    def test_scoped_restores_on_exception(self) -> None:
        """The scope restores the transform even when drawing raises."""
        stack = TransformStack()

        with pytest.raises(RuntimeError, match="boom"):
            with stack.scoped():
                stack.rotate(30, 0, 0)
                stack.save()
                raise RuntimeError("boom")

        assert stack.depth == 0
        assert stack.rotation == 0
        assert stack.map_point(3, 4) == approx_point((3.0, 4.0))

    def test_restore_without_save_raises(self) -> None:
        """Unbalanced restore is a programming error."""
        with pytest.raises(RuntimeError, match="without a matching save"):
            TransformStack().restore()


class TestRecordingCanvas:
    """Check that recorded commands carry mapped geometry and paint snapshots."""

    def test_records_mapped_points_and_rotation(self) -> None:
        """Lines are stored in device coordinates together with the active rotation."""
        canvas = RecordingCanvas(200, 200)
        canvas.rotate(180, 100, 100)
        canvas.draw_line(100, 100, 100, 50, Paint())

        command = canvas.commands[0]
        assert command.op == 'line'
        assert command.rotation == 180
        assert command.points[1] == approx_point((100.0, 150.0))
        assert command.local == (100, 100, 100, 50)

    def test_paint_is_snapshotted(self) -> None:
        """Later paint changes do not rewrite earlier commands."""
        canvas = RecordingCanvas(10, 10)
        paint = Paint(anti_alias=True)
        canvas.draw_circle(5, 5, 2, paint)
        paint.anti_alias = False

        assert canvas.by_op('circle')[0].paint.anti_alias is True


class TestPillowCanvas:
    """Exercise the raster backend so previews and snapshots show the face."""

    def test_draws_rotated_line(self) -> None:
        """A vertical line rotated 90 degrees about the center becomes horizontal."""
        image = Image.new('RGBA', (100, 100), '#000000')
        canvas = PillowCanvas(image)
        with canvas.scoped():
            canvas.rotate(90, 50, 50)
            canvas.draw_line(50, 50, 50, 10, Paint(color='#ff0000', stroke_width=3))

        assert image.getpixel((80, 50))[:3] == (255, 0, 0)
        assert image.getpixel((50, 20))[:3] == (0, 0, 0)

    def test_fill_and_circle(self) -> None:
        """draw_color floods the surface and circles fill around their center."""
        image = Image.new('RGBA', (40, 40))
        canvas = PillowCanvas(image)
        canvas.draw_color('#000000')
        canvas.draw_circle(20, 20, 6, Paint(color='#ffffff'))

        assert image.getpixel((20, 20))[:3] == (255, 255, 255)
        assert image.getpixel((2, 2))[:3] == (0, 0, 0)

    def test_bitmap_pasted_at_origin(self) -> None:
        """Bitmaps are copied at their mapped origin."""
        image = Image.new('RGBA', (20, 20), '#000000')
        tile = Image.new('RGBA', (5, 5), '#00ff00')
        PillowCanvas(image).draw_bitmap(tile, 0, 0, Paint())

        assert image.getpixel((4, 4))[:3] == (0, 255, 0)
        assert image.getpixel((6, 6))[:3] == (0, 0, 0)

    def test_text_renders_without_anti_aliasing(self) -> None:
        """Non anti-aliased text only produces fully covered or empty pixels."""
        image = Image.new('RGBA', (80, 40), '#000000')
        canvas = PillowCanvas(image)
        canvas.draw_text('12', 10, 30, Paint(color='#ffffff', text_size=22, anti_alias=False))

        values = set(image.getchannel('R').tobytes())
        assert values <= {0, 255}
        assert 255 in values
