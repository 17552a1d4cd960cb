"""
Background - Decode and rescale the watch face background image
"""
from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from ..core.logging_service import LoggingService, get_logger


def load_background(
    path: Optional[Union[str, Path]],
    logger: Optional[LoggingService] = None
) -> Optional[Image.Image]:
    """
    Decode a background image.

    Args:
        path: Image file path, None for a solid background
        logger: Logging service

    Returns:
        RGBA image, or None when no usable image is available
    """
    logger = logger or get_logger()
    if not path:
        return None

    try:
        with Image.open(path) as image:
            decoded = image.convert('RGBA')
    except (OSError, UnidentifiedImageError) as e:
        logger.error(f"Failed to load background '{path}': {e}")
        return None

    logger.info(f"Loaded background {path}: {decoded.width}x{decoded.height}")
    return decoded


def scale_background(original: Image.Image, scale: float) -> Image.Image:
    """
    Rescale the originally decoded background, keeping its aspect ratio.

    Args:
        original: Image as decoded, never a previously scaled copy
        scale: Factor applied to both dimensions

    Returns:
        New image of (width * scale, height * scale), at least 1x1
    """
    width = max(1, int(original.width * scale))
    height = max(1, int(original.height * scale))
    if (width, height) == original.size:
        return original.copy()
    return original.resize((width, height), Image.Resampling.LANCZOS)
