import argparse
import sys
from typing import List, Optional, TextIO

from loguru import logger

from . import __version__
from .errors import TTViewError
from .params import ColorMode, Filter, RenderParams, Style
from .pipeline import render_file
from .preset_management import get_available_presets, load_preset, save_preset

# --style choices; gradient is selected through --gradient
STYLE_CHOICES = [s.value for s in Style if s is not Style.GRADIENT]


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ttview",
        description="Render images in the terminal with 24-bit colour half blocks.",
    )
    parser.add_argument("paths", nargs="*", metavar="path", help="Image file(s) to display")
    parser.add_argument(
        "-w",
        "--width",
        type=positive_int,
        default=None,
        help="Output width in character cells (default: 80)",
    )
    parser.add_argument(
        "--height",
        type=positive_int,
        default=None,
        help="Output height in pixels, two per text line (default: keep aspect ratio)",
    )
    parser.add_argument(
        "-f",
        "--filter",
        choices=[f.value for f in Filter],
        default=None,
        help="Resampling filter (default: triangle)",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-s", "--style", choices=STYLE_CHOICES, default=None, help="Display style (default: color)"
    )
    group.add_argument(
        "-g",
        "--gradient",
        default=None,
        help="Characters from darkest to lightest; selects the gradient style",
    )
    parser.add_argument(
        "-c",
        "--color-mode",
        choices=[m.value for m in ColorMode],
        default=None,
        help="Colour escapes to emit (default: truecolor)",
    )
    parser.add_argument("--preset", default=None, help="Load render settings from a saved preset")
    parser.add_argument(
        "--save-preset", default=None, metavar="NAME", help="Save the effective settings as a preset"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List saved presets and exit"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("-V", "--version", action="version", version=f"ttview {__version__}")
    return parser


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<level>{level}</level>: {message}",
    )


def resolve_params(args: argparse.Namespace, parser: argparse.ArgumentParser) -> RenderParams:
    """Preset values first (if any), then every flag given on the command line."""
    params = RenderParams()
    if args.preset:
        params = load_preset(args.preset)
        if params is None:
            available = ", ".join(get_available_presets()) or "none"
            parser.error(f"unknown preset '{args.preset}' (available: {available})")

    if args.width is not None:
        params.width = args.width
    if args.height is not None:
        params.height = args.height
    if args.filter is not None:
        params.filter = Filter(args.filter)
    if args.gradient is not None:
        if not args.gradient:
            parser.error("argument -g/--gradient: must not be empty")
        params.style = Style.GRADIENT
        params.gradient = args.gradient
    elif args.style is not None:
        params.style = Style(args.style)
    if args.color_mode is not None:
        params.color_mode = ColorMode(args.color_mode)
    return params


def display_images(paths: List[str], params: RenderParams, out: TextIO) -> int:
    """Writes every image to `out`; returns the number that failed."""
    failures = 0
    for path in paths:
        try:
            lines = render_file(path, params)
        except (TTViewError, OSError) as e:
            logger.error(f"{path}: {e}")
            failures += 1
            continue
        if len(paths) > 1:
            out.write(f"{path}:\n")
        for line in lines:
            out.write(line + "\n")
        out.flush()
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.list_presets:
        for name in get_available_presets():
            print(name)
        return 0

    try:
        params = resolve_params(args, parser).validate()
    except (TTViewError, OSError) as e:
        parser.error(str(e))

    if args.save_preset:
        try:
            path = save_preset(args.save_preset, params)
        except (TTViewError, OSError) as e:
            parser.error(f"cannot save preset '{args.save_preset}': {e}")
        logger.info(f"Saved preset '{args.save_preset}' to {path}")
    elif not args.paths:
        parser.error("the following arguments are required: path")

    failures = display_images(args.paths, params, sys.stdout)
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
