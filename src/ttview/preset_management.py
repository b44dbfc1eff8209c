import json
import os
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from .errors import InvalidArgument
from .params import RenderParams

PRESETS_DIR = "presets"
PRESETS_ENV = "TTVIEW_PRESETS_DIR"

PathLike = Union[str, Path]


def get_presets_dir(presets_dir: Optional[PathLike] = None) -> Path:
    """Explicit argument, then $TTVIEW_PRESETS_DIR, then ./presets."""
    if presets_dir is not None:
        return Path(presets_dir)
    return Path(os.environ.get(PRESETS_ENV, PRESETS_DIR))


def get_preset_path(preset_name: str, presets_dir: Optional[PathLike] = None) -> Path:
    """Constructs the full path for a given preset name."""
    return get_presets_dir(presets_dir) / f"{preset_name}.json"


def get_available_presets(presets_dir: Optional[PathLike] = None) -> List[str]:
    """Returns a list of available preset names without the .json extension."""
    root = get_presets_dir(presets_dir)
    if not root.exists():
        return []
    return sorted(p.stem for p in root.glob("*.json") if p.is_file())


def save_preset(
    preset_name: str, params: RenderParams, presets_dir: Optional[PathLike] = None
) -> Path:
    """Saves render parameters to a JSON file and returns its path."""
    if not preset_name:
        raise InvalidArgument("preset name must not be empty")
    filepath = get_preset_path(preset_name, presets_dir)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as f:
        json.dump(params.to_dict(), f, indent=2)
    logger.debug(f"Saved preset '{preset_name}' to {filepath}")
    return filepath


def load_preset(
    preset_name: str, presets_dir: Optional[PathLike] = None
) -> Optional[RenderParams]:
    """Loads a preset JSON file, or returns None when it does not exist."""
    filepath = get_preset_path(preset_name, presets_dir)
    if not filepath.exists():
        return None
    with open(filepath, "r") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidArgument(f"preset '{preset_name}' is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidArgument(f"preset '{preset_name}' must hold a JSON object")
    logger.debug(f"Loaded preset '{preset_name}' from {filepath}")
    return RenderParams.from_dict(data)
