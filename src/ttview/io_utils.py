from pathlib import Path
from typing import Union

import numpy as np
from loguru import logger
from PIL import Image, UnidentifiedImageError

from .errors import InvalidImage


def imread_rgb(path: Union[str, Path]) -> np.ndarray:
    """
    Decodes an image file into an RGB uint8 array shaped (height, width, 3).

    Alpha is dropped, not composited. Missing or unreadable files raise the
    usual FileNotFoundError / OSError; undecodable content raises InvalidImage.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No such file: '{path}'")
    try:
        with Image.open(path) as img:
            fmt = img.format
            img = img.convert("RGB")
            rgb = np.asarray(img, dtype=np.uint8).copy()
    except UnidentifiedImageError as e:
        raise InvalidImage(f"cannot identify image file '{path}'") from e
    except (SyntaxError, ValueError, Image.DecompressionBombError) as e:
        # Pillow reports truncated/corrupt data through these
        raise InvalidImage(f"cannot decode '{path}': {e}") from e

    if rgb.ndim != 3 or rgb.shape[0] == 0 or rgb.shape[1] == 0:
        raise InvalidImage(f"'{path}' has zero width or height")
    logger.debug(f"Decoded {path} ({fmt}) as {rgb.shape[1]}x{rgb.shape[0]}")
    return rgb


def save_png_rgb(path: Union[str, Path], rgb: np.ndarray) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8), "RGB").save(str(path))
