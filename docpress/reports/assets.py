"""
Image assets loaded before layout starts.

Layout never touches the filesystem: logos are read and verified here, and a
logo that cannot be read is replaced by a blank placeholder so the report
still renders.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Union

from PIL import Image as PILImage
from reportlab.lib.utils import ImageReader

from ..exceptions import AssetError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_logo(path: PathLike) -> bytes:
    """
    Read an image file and make sure ReportLab can decode it.

    Args:
        path: Image file path

    Returns:
        Raw image bytes

    Raises:
        AssetError: If the file is missing or is not a readable image
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise AssetError(f"Cannot read image {path}", details=str(e)) from e

    try:
        width, height = ImageReader(BytesIO(data)).getSize()
    except Exception as e:
        raise AssetError(f"Unsupported image {path}", details=str(e)) from e
    if width <= 0 or height <= 0:
        raise AssetError(f"Empty image {path}", details=f"{width}x{height}")

    logger.debug("Loaded logo %s (%dx%d, %d bytes)", path, width, height, len(data))
    return data


def placeholder_image(width: int = 64, height: int = 64) -> bytes:
    """Blank PNG used in place of an unreadable image."""
    output = BytesIO()
    image = PILImage.new("RGB", (width, height), color=(240, 240, 240))
    image.save(output, format="PNG")
    return output.getvalue()


def load_logo_or_placeholder(path: PathLike) -> bytes:
    """``load_logo`` that logs failures and falls back to ``placeholder_image``."""
    try:
        return load_logo(path)
    except AssetError as e:
        logger.warning("Using placeholder logo: %s", e)
        return placeholder_image()
