"""
Turns an RGB pixel buffer into terminal text, one line at a time.

The colour styles pack two pixel rows into each character cell with the upper
half block: foreground is the top pixel, background the bottom pixel. A
trailing unpaired row is drawn as background-filled spaces.
"""
from dataclasses import dataclass
from typing import Iterator, List, Optional

import numpy as np

from ..errors import InvalidArgument
from ..params import ColorMode, Style
from .ansi import RGB, RESET, encode_cell

UPPER_HALF_BLOCK = "▀"
BRAILLE_BASE = 0x2800

# (dx, dy) of braille dots 1-8 in bit order
BRAILLE_OFFSETS = (
    (0, 0),
    (0, 1),
    (0, 2),
    (1, 0),
    (1, 1),
    (1, 2),
    (0, 3),
    (1, 3),
)

# BT.601 luma in thousandths, so pure white comes out at exactly 1.0
LUMA_WEIGHTS = np.array([299, 587, 114], dtype=np.int64)


@dataclass
class RenderCell:
    glyph: str
    fg: Optional[RGB]
    bg: Optional[RGB]


def _rgb(px) -> RGB:
    return (int(px[0]), int(px[1]), int(px[2]))


def luma(rgb: np.ndarray) -> np.ndarray:
    """Per-pixel brightness in [0, 1] for a (H, W, 3) uint8 buffer."""
    return np.clip((rgb.astype(np.int64) @ LUMA_WEIGHTS) / 255000.0, 0.0, 1.0)


def to_greyscale(rgb: np.ndarray) -> np.ndarray:
    grey = np.rint(luma(rgb) * 255.0).astype(np.uint8)
    return np.repeat(grey[..., np.newaxis], 3, axis=2)


def floyd_steinberg(grey: np.ndarray) -> np.ndarray:
    """
    Dithers a greyscale buffer to pure black/white with Floyd-Steinberg error
    diffusion. Accepts (H, W) or (H, W, 3) uint8, returns (H, W, 3) uint8.
    """
    if grey.ndim == 3:
        grey = grey[..., 0]
    work = grey.astype(np.float64) / 255.0
    h, w = work.shape
    for y in range(h):
        for x in range(w):
            old = work[y, x]
            new = 0.0 if old < 0.5 else 1.0
            work[y, x] = new
            err = old - new
            if x + 1 < w:
                work[y, x + 1] += err * 7 / 16
            if y + 1 < h:
                if x > 0:
                    work[y + 1, x - 1] += err * 3 / 16
                work[y + 1, x] += err * 5 / 16
                if x + 1 < w:
                    work[y + 1, x + 1] += err * 1 / 16
    out = (work >= 0.5).astype(np.uint8) * 255
    return np.repeat(out[..., np.newaxis], 3, axis=2)


def half_block_cells(rgb: np.ndarray) -> Iterator[List[RenderCell]]:
    h, w = rgb.shape[:2]
    for top in range(0, h, 2):
        bottom = top + 1
        if bottom < h:
            yield [
                RenderCell(UPPER_HALF_BLOCK, _rgb(rgb[top, x]), _rgb(rgb[bottom, x]))
                for x in range(w)
            ]
        else:
            yield [RenderCell(" ", None, _rgb(rgb[top, x])) for x in range(w)]


def render_half_blocks(
    rgb: np.ndarray, color_mode: ColorMode = ColorMode.TRUECOLOR
) -> Iterator[str]:
    for cells in half_block_cells(rgb):
        yield "".join(encode_cell(c.glyph, c.fg, c.bg, color_mode) for c in cells) + RESET


def render_gradient(rgb: np.ndarray, gradient: str) -> Iterator[str]:
    b = luma(rgb)
    h = b.shape[0]
    last = len(gradient) - 1
    for top in range(0, h, 2):
        row = b[top]
        if top + 1 < h:
            row = (row + b[top + 1]) / 2.0
        yield "".join(gradient[int(last * v)] for v in row) + RESET


def render_braille(rgb: np.ndarray) -> Iterator[str]:
    dark = luma(rgb) < 0.5
    h, w = dark.shape
    for y in range(0, h, 4):
        chars = []
        for x in range(0, w, 2):
            mask = 0
            for bit, (dx, dy) in enumerate(BRAILLE_OFFSETS):
                if x + dx < w and y + dy < h and dark[y + dy, x + dx]:
                    mask |= 1 << bit
            chars.append(chr(BRAILLE_BASE + mask))
        yield "".join(chars) + RESET


def render_lines(
    rgb: np.ndarray,
    style: Style = Style.COLOR,
    gradient: Optional[str] = None,
    color_mode: ColorMode = ColorMode.TRUECOLOR,
) -> Iterator[str]:
    """
    Lazily renders `rgb` top to bottom in the given style.

    Every yielded line ends with an attribute reset and carries no newline.
    """
    style = Style(style)
    color_mode = ColorMode(color_mode)
    if style is Style.COLOR:
        return render_half_blocks(rgb, color_mode)
    if style is Style.GREYSCALE:
        return render_half_blocks(to_greyscale(rgb), color_mode)
    if style is Style.GRADIENT:
        if not gradient:
            raise InvalidArgument("gradient string must not be empty")
        return render_gradient(rgb, gradient)
    if style is Style.BRAILLE:
        return render_braille(rgb)
    if style is Style.DITHERED_BRAILLE:
        return render_braille(floyd_steinberg(to_greyscale(rgb)))
    return render_half_blocks(floyd_steinberg(to_greyscale(rgb)), color_mode)
