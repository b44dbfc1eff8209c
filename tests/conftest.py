import re

import numpy as np
import pytest
from loguru import logger

from ttview.io_utils import save_png_rgb

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)

SGR_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_sgr(line: str) -> str:
    return SGR_RE.sub("", line)


def gradient_image(width: int, height: int) -> np.ndarray:
    xs = np.linspace(0, 255, num=width, dtype=np.uint8)
    ys = np.linspace(0, 255, num=height, dtype=np.uint8)
    r = np.tile(xs, (height, 1))
    g = np.tile(ys[:, np.newaxis], (1, width))
    b = np.full((height, width), 128, dtype=np.uint8)
    return np.stack([r, g, b], axis=-1)


@pytest.fixture(autouse=True)
def _reset_logger():
    logger.remove()
    yield
    # main() binds a sink to the captured stderr of the current test
    logger.remove()


@pytest.fixture
def write_png(tmp_path):
    def _write(rgb, name="image.png"):
        path = tmp_path / name
        save_png_rgb(path, np.asarray(rgb, dtype=np.uint8))
        return path

    return _write


@pytest.fixture
def quad_png(write_png):
    """2x2: red green / blue white."""
    return write_png([[RED, GREEN], [BLUE, WHITE]], "quad.png")
