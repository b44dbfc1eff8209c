from typing import Optional, Tuple

import cv2
import numpy as np
from loguru import logger
from PIL import Image

from ..errors import InvalidArgument, InvalidImage
from ..params import Filter

# Filter.LANCZOS3 goes through Pillow; cv2 only ships the 8x8 Lanczos-4 kernel
_INTERPOLATION = {
    Filter.NEAREST: cv2.INTER_NEAREST,
    Filter.TRIANGLE: cv2.INTER_LINEAR,
    Filter.CATMULL_ROM: cv2.INTER_CUBIC,
    Filter.GAUSSIAN: cv2.INTER_LINEAR,
}

# Gaussian filtering pre-shrinks to at most this many times the target size
GAUSSIAN_PRESCALE = 2


def target_dimensions(
    src_w: int, src_h: int, width: int, height: Optional[int] = None
) -> Tuple[int, int]:
    """
    Computes the output size for a requested character width.

    Args:
        src_w: Width of the decoded image in pixels.
        src_h: Height of the decoded image in pixels.
        width: Requested output width (one pixel per terminal column).
        height: Explicit output height in pixels, or None to keep the aspect ratio.

    Returns:
        (width, height), both at least 1.
    """
    if width <= 0:
        raise InvalidArgument(f"width must be a positive integer, got {width}")
    if height is not None and height <= 0:
        raise InvalidArgument(f"height must be a positive integer, got {height}")
    if src_w <= 0 or src_h <= 0:
        raise InvalidImage(f"image has zero extent ({src_w}x{src_h})")
    if height is None:
        height = max(1, round(width * src_h / src_w))
    return width, height


def gaussian_blur(rgb: np.ndarray, scale: float) -> np.ndarray:
    """Low-pass before a downscale by `scale` (source pixels per output pixel)."""
    if scale <= 1.0:
        return rgb
    sigma = 0.5 * min(scale, GAUSSIAN_PRESCALE)
    k = int(2 * round(3 * sigma) + 1)
    return cv2.GaussianBlur(rgb, (k, k), sigma)


def area_prescale(rgb: np.ndarray, dst_w: int, dst_h: int) -> np.ndarray:
    """
    Box-averages `rgb` down to at most GAUSSIAN_PRESCALE times the target size,
    so the blur that follows works on a bounded kernel whatever the source size.
    """
    src_h, src_w = rgb.shape[:2]
    mid_w = min(src_w, GAUSSIAN_PRESCALE * dst_w)
    mid_h = min(src_h, GAUSSIAN_PRESCALE * dst_h)
    if (mid_w, mid_h) == (src_w, src_h):
        return rgb
    return cv2.resize(rgb, (mid_w, mid_h), interpolation=cv2.INTER_AREA)


def resize_image(
    rgb: np.ndarray,
    width: int,
    height: Optional[int] = None,
    filt: Filter = Filter.TRIANGLE,
) -> np.ndarray:
    """
    Resizes an RGB image to `width` columns, keeping the aspect ratio unless
    `height` is given.

    An image that already has the target size is returned as an unchanged copy,
    so resizing twice to the same width is the same as resizing once.
    """
    src_h, src_w = rgb.shape[:2]
    dst_w, dst_h = target_dimensions(src_w, src_h, width, height)
    if (dst_w, dst_h) == (src_w, src_h):
        return rgb.copy()

    filt = Filter(filt)
    logger.debug(f"Resizing {src_w}x{src_h} -> {dst_w}x{dst_h} ({filt.value})")
    if filt is Filter.LANCZOS3:
        img = Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8), "RGB")
        return np.asarray(img.resize((dst_w, dst_h), Image.Resampling.LANCZOS)).copy()

    src = rgb
    if filt is Filter.GAUSSIAN:
        src = area_prescale(rgb, dst_w, dst_h)
        mid_h, mid_w = src.shape[:2]
        src = gaussian_blur(src, max(mid_w / dst_w, mid_h / dst_h))
    out = cv2.resize(src, (dst_w, dst_h), interpolation=_INTERPOLATION[filt])
    return np.ascontiguousarray(out, dtype=np.uint8)
