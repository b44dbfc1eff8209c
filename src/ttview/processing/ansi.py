from functools import lru_cache
from typing import Optional, Tuple

from ..params import ColorMode

RGB = Tuple[int, int, int]

ESC = "\x1b"
RESET = f"{ESC}[0m"

# xterm 6x6x6 cube channel levels and the 24-step grey ramp (232..255)
CUBE_LEVELS = (0, 95, 135, 175, 215, 255)
GREY_LEVELS = tuple(8 + 10 * i for i in range(24))

# VGA-style 16 colour palette, indices 0-7 normal, 8-15 bright
ANSI16_PALETTE: Tuple[RGB, ...] = (
    (0, 0, 0),
    (170, 0, 0),
    (0, 170, 0),
    (170, 85, 0),
    (0, 0, 170),
    (170, 0, 170),
    (0, 170, 170),
    (170, 170, 170),
    (85, 85, 85),
    (255, 85, 85),
    (85, 255, 85),
    (255, 255, 85),
    (85, 85, 255),
    (255, 85, 255),
    (85, 255, 255),
    (255, 255, 255),
)


def _dist2(a: RGB, b: RGB) -> int:
    return sum((int(x) - int(y)) ** 2 for x, y in zip(a, b))


def _nearest_level(v: int, levels) -> int:
    return min(range(len(levels)), key=lambda i: abs(levels[i] - v))


@lru_cache(maxsize=4096)
def quantize_256(rgb: RGB) -> int:
    """Nearest xterm-256 palette index, choosing between the cube and grey ramp."""
    r, g, b = (_nearest_level(c, CUBE_LEVELS) for c in rgb)
    cube_idx = 16 + 36 * r + 6 * g + b
    cube_rgb = (CUBE_LEVELS[r], CUBE_LEVELS[g], CUBE_LEVELS[b])

    grey = _nearest_level(sum(rgb) // 3, GREY_LEVELS)
    grey_rgb = (GREY_LEVELS[grey],) * 3
    if _dist2(rgb, grey_rgb) < _dist2(rgb, cube_rgb):
        return 232 + grey
    return cube_idx


@lru_cache(maxsize=4096)
def quantize_16(rgb: RGB) -> int:
    """Nearest of the 16 basic colours; ties go to the lower index."""
    return min(range(16), key=lambda i: (_dist2(rgb, ANSI16_PALETTE[i]), i))


def _color_code(rgb: RGB, mode: ColorMode, background: bool) -> str:
    r, g, b = (int(c) for c in rgb)
    if mode is ColorMode.TRUECOLOR:
        return f"{48 if background else 38};2;{r};{g};{b}"
    if mode is ColorMode.XTERM256:
        return f"{48 if background else 38};5;{quantize_256((r, g, b))}"
    idx = quantize_16((r, g, b))
    base = (40 if background else 30) if idx < 8 else (100 if background else 90)
    return str(base + idx % 8)


def fg(rgb: RGB, mode: ColorMode = ColorMode.TRUECOLOR) -> str:
    return f"{ESC}[{_color_code(rgb, mode, background=False)}m"


def bg(rgb: RGB, mode: ColorMode = ColorMode.TRUECOLOR) -> str:
    return f"{ESC}[{_color_code(rgb, mode, background=True)}m"


def encode_cell(
    glyph: str,
    fg_rgb: Optional[RGB],
    bg_rgb: Optional[RGB],
    mode: ColorMode = ColorMode.TRUECOLOR,
) -> str:
    out = ""
    if fg_rgb is not None:
        out += fg(fg_rgb, mode)
    if bg_rgb is not None:
        out += bg(bg_rgb, mode)
    return out + glyph
