import json

import pytest

from ttview.errors import InvalidArgument
from ttview.params import ColorMode, Filter, RenderParams, Style
from ttview.preset_management import (
    PRESETS_ENV,
    get_available_presets,
    get_preset_path,
    load_preset,
    save_preset,
)


def test_save_and_load_round_trip(tmp_path):
    params = RenderParams(
        width=42, filter=Filter.LANCZOS3, style=Style.GREYSCALE, color_mode=ColorMode.ANSI16
    )
    path = save_preset("mono", params, tmp_path)
    assert path == tmp_path / "mono.json"
    assert json.loads(path.read_text())["style"] == "greyscale"
    assert load_preset("mono", tmp_path) == params


def test_available_presets_sorted(tmp_path):
    assert get_available_presets(tmp_path / "absent") == []
    for name in ("zeta", "alpha"):
        save_preset(name, RenderParams(), tmp_path)
    (tmp_path / "notes.txt").write_text("ignored")
    assert get_available_presets(tmp_path) == ["alpha", "zeta"]


def test_load_missing_preset_returns_none(tmp_path):
    assert load_preset("nothing", tmp_path) is None


def test_load_invalid_json(tmp_path):
    (tmp_path / "broken.json").write_text("{not json")
    with pytest.raises(InvalidArgument):
        load_preset("broken", tmp_path)


def test_load_non_object(tmp_path):
    (tmp_path / "list.json").write_text("[1, 2]")
    with pytest.raises(InvalidArgument):
        load_preset("list", tmp_path)


def test_save_requires_name(tmp_path):
    with pytest.raises(InvalidArgument):
        save_preset("", RenderParams(), tmp_path)


def test_presets_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(PRESETS_ENV, str(tmp_path))
    assert get_preset_path("x") == tmp_path / "x.json"


@pytest.mark.parametrize(
    "data",
    [
        {"width": True},
        {"width": "80"},
        {"width": 2.5},
        {"height": False},
        {"height": -4},
        {"style": "gradient", "gradient": 5},
        {"gradient": ["#"]},
    ],
)
def test_malformed_preset_values_fail_validation(tmp_path, data):
    (tmp_path / "bad.json").write_text(json.dumps(data))
    params = load_preset("bad", tmp_path)
    with pytest.raises(InvalidArgument):
        params.validate()


def test_load_non_utf8_preset(tmp_path):
    (tmp_path / "binary.json").write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(InvalidArgument):
        load_preset("binary", tmp_path)
