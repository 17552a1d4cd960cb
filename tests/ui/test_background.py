from PIL import Image

from watchface.ui.background import load_background, scale_background


class TestBackground:
    """Cover background decoding and scaling so the face fills any surface size."""

    def test_load_converts_to_rgba(self, tmp_path, logger) -> None:
        """Decoded backgrounds are RGBA regardless of the file mode."""
        path = tmp_path / "dial.png"
        Image.new('RGB', (320, 240), '#204060').save(path)

        image = load_background(path, logger)

        assert image.mode == 'RGBA'
        assert image.size == (320, 240)

    def test_missing_path_means_solid_face(self, logger) -> None:
        """No configured path yields no bitmap."""
        assert load_background(None, logger) is None

    def test_unreadable_file_is_logged_and_skipped(self, tmp_path, logger) -> None:
        """A file that is not an image falls back to the solid face."""
        path = tmp_path / "dial.png"
        path.write_text("not an image")

        assert load_background(path, logger) is None
        assert load_background(tmp_path / "absent.png", logger) is None

    def test_scale_keeps_aspect_ratio(self) -> None:
        """Both dimensions scale by the same factor."""
        original = Image.new('RGBA', (320, 240))

        assert scale_background(original, 1.25).size == (400, 300)
        assert scale_background(original, 0.5).size == (160, 120)

    def test_scale_never_mutates_original(self) -> None:
        """Rescaling always starts from the decoded image, which stays untouched."""
        original = Image.new('RGBA', (320, 240))
        scale_background(original, 2.0)

        assert original.size == (320, 240)
        assert scale_background(original, 1.0) is not original

    def test_zero_scale_clamps_to_one_pixel(self) -> None:
        """A zero-width surface still yields a valid image."""
        assert scale_background(Image.new('RGBA', (320, 240)), 0.0).size == (1, 1)
