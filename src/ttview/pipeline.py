from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Union

import numpy as np
from loguru import logger

from .io_utils import imread_rgb
from .params import RenderParams
from .processing.resample import resize_image
from .processing.styles import render_lines


@dataclass
class PipelineResult:
    source: np.ndarray
    resized: np.ndarray
    lines: Iterator[str]


def run_pipeline(rgb_in: np.ndarray, p: RenderParams) -> PipelineResult:
    """Resizes a decoded image and prepares its (lazy) line rendering."""
    p.validate()
    resized = resize_image(rgb_in, p.width, p.height, p.filter)
    lines = render_lines(resized, p.style, p.gradient, p.color_mode)
    return PipelineResult(source=rgb_in, resized=resized, lines=lines)


def render_file(path: Union[str, Path], p: RenderParams) -> Iterator[str]:
    """
    Decodes, resizes and renders one image file.

    Decoding and resizing happen before this returns, so any error is raised
    here rather than halfway through writing the output.
    """
    p.validate()
    rgb = imread_rgb(path)
    logger.debug(f"Rendering {path} with {p}")
    return run_pipeline(rgb, p).lines
