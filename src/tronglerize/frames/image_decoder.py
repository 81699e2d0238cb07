"""
Image Decoder
=============

Dedicated module for decoding source frame images into OpenCV matrices.

Design Rules:
    - This is the ONLY place in the codebase that decodes source images
    - Validates shape and dtype
    - Fails fast on corrupt or missing files
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from tronglerize.errors import SourceUnreadable


logger = logging.getLogger(__name__)


def load_image_bgr(path: Union[str, Path]) -> np.ndarray:
    """
    Decode an image file to a BGR numpy array.

    The file is read into memory first and decoded with cv2.imdecode,
    which, unlike cv2.imread, handles non-ASCII paths.

    Args:
        path: Image file (any format OpenCV can decode)

    Returns:
        BGR image as np.ndarray (H, W, 3), dtype=uint8

    Raises:
        SourceUnreadable: If the file cannot be read or decoded
    """
    path = Path(path)

    try:
        raw = np.fromfile(str(path), dtype=np.uint8)
    except OSError as e:
        raise SourceUnreadable(f"Cannot read {path}: {e}") from e

    if raw.size == 0:
        raise SourceUnreadable(f"Empty image file: {path}")

    bgr = cv2.imdecode(raw, cv2.IMREAD_COLOR)

    if bgr is None:
        raise SourceUnreadable(
            f"Failed to decode {path}: cv2.imdecode returned None"
        )

    if bgr.ndim != 3 or bgr.shape[2] != 3:
        raise SourceUnreadable(f"Invalid image shape for {path}: {bgr.shape}")

    if bgr.dtype != np.uint8:
        raise SourceUnreadable(f"Invalid dtype for {path}: {bgr.dtype}")

    return bgr
