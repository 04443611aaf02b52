"""
Image file utilities for the conversion pipeline.
"""
import os
from typing import Tuple

from PIL import Image

from api.core import get_logger
from config import DEFAULT_SIZE_BASIS

logger = get_logger("vision2page.image")


def read_image_size(image_path: str) -> Tuple[int, int]:
    """
    Read the pixel size of an image without decoding its pixel data.

    Object localization responses carry no page size, so the image itself
    provides the scaling basis for normalized vertices. If the image cannot
    be read, the default basis is returned and normalized geometry will not
    match the image.

    Returns:
        (width, height) in pixels
    """
    try:
        with Image.open(image_path) as img:
            width, height = img.size
        logger.debug(f"Image size {width}x{height}", extra={"extra_data": {"image": image_path}})
        return width, height
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning(
            f"Could not read image size, using default basis {DEFAULT_SIZE_BASIS}: {e}",
            extra={"extra_data": {"image": image_path}}
        )
        return DEFAULT_SIZE_BASIS


def read_image_bytes(image_path: str) -> bytes:
    """Load the raw encoded image for upload."""
    with open(image_path, "rb") as f:
        return f.read()


def image_filename(image_path: str) -> str:
    """File name recorded in the PAGE document (no directory part)."""
    return os.path.basename(image_path)
