from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional

from .errors import InvalidArgument


class Filter(str, Enum):
    NEAREST = "nearest"
    TRIANGLE = "triangle"  # bilinear
    CATMULL_ROM = "catmull-rom"  # bicubic
    GAUSSIAN = "gaussian"  # blur + bilinear
    LANCZOS3 = "lanczos3"


class Style(str, Enum):
    COLOR = "color"
    GREYSCALE = "greyscale"
    GRADIENT = "gradient"
    BRAILLE = "braille"
    DITHERED_BRAILLE = "dithered-braille"
    DITHERED = "dithered"


class ColorMode(str, Enum):
    TRUECOLOR = "truecolor"
    XTERM256 = "256"
    ANSI16 = "16"


DEFAULT_WIDTH = 80


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise InvalidArgument(
            f"invalid {enum_cls.__name__.lower()} {value!r} (choose from {choices})"
        ) from None


def _is_positive_int(value) -> bool:
    # bool is an int subclass; JSON `true` must not pass as width 1
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass
class RenderParams:
    width: int = DEFAULT_WIDTH
    height: Optional[int] = None  # None = keep aspect ratio
    filter: Filter = Filter.TRIANGLE
    style: Style = Style.COLOR
    gradient: Optional[str] = None  # only used by Style.GRADIENT
    color_mode: ColorMode = ColorMode.TRUECOLOR

    def __post_init__(self):
        self.filter = _coerce(Filter, self.filter)
        self.style = _coerce(Style, self.style)
        self.color_mode = _coerce(ColorMode, self.color_mode)

    def validate(self) -> "RenderParams":
        if not _is_positive_int(self.width):
            raise InvalidArgument(f"width must be a positive integer, got {self.width!r}")
        if self.height is not None and not _is_positive_int(self.height):
            raise InvalidArgument(
                f"height must be a positive integer, got {self.height!r}"
            )
        if self.gradient is not None and not isinstance(self.gradient, str):
            raise InvalidArgument(f"gradient must be a string, got {self.gradient!r}")
        if self.style is Style.GRADIENT and not self.gradient:
            raise InvalidArgument("gradient style needs a non-empty gradient string")
        return self

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["filter"] = self.filter.value
        d["style"] = self.style.value
        d["color_mode"] = self.color_mode.value
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderParams":
        """Builds params from a plain dict, ignoring keys it does not know."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
