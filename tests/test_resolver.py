from __future__ import annotations

import json
from pathlib import Path

import pytest

from mermaidtools.config.resolver import (
    DEFAULTS,
    load_config_file,
    override_options,
    parse_output_target,
    resolve_options,
)
from mermaidtools.core.models import OutputFormat, RenderOptions, Theme


def _write_config(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_only(tmp_path):
    options = resolve_options({"output": tmp_path})

    for key, value in DEFAULTS.items():
        if key == "output":
            continue
        assert getattr(options, key) == value


@pytest.mark.parametrize(
    "config, cli, expected",
    [
        ({}, {}, {"theme": Theme.DEFAULT, "width": 800}),
        ({"theme": "dark"}, {}, {"theme": Theme.DARK, "width": 800}),
        ({"theme": "dark", "width": 1200}, {"width": 640}, {"theme": Theme.DARK, "width": 640}),
        ({"format": "pdf"}, {"format": "svg"}, {"format": OutputFormat.SVG}),
        ({"background": "transparent", "quality": 3}, {}, {"background": "transparent", "quality": 3}),
        ({"scale": 1.5}, {"scale": None}, {"scale": 1.5}),
        ({"recursive": True}, {"recursive": False}, {"recursive": True}),
    ],
)
def test_layer_priority(tmp_path, config, cli, expected):
    config_path = _write_config(tmp_path / "config.json", config)

    options = resolve_options({"output": tmp_path, **cli}, config_path=config_path)

    for key, value in expected.items():
        assert getattr(options, key) == value


def test_missing_config_file_warns(tmp_path, caplog):
    options = resolve_options({"output": tmp_path}, config_path=tmp_path / "nope.json")

    assert options.theme is Theme.DEFAULT
    assert "Config file not found" in caplog.text


def test_unparseable_config_file_warns(tmp_path, caplog):
    config_path = tmp_path / "broken.json"
    config_path.write_text("{not json", encoding="utf-8")

    assert load_config_file(config_path) == {}
    assert "Error loading config file" in caplog.text


def test_config_must_be_object(tmp_path, caplog):
    config_path = _write_config(tmp_path / "list.json", ["dark"])

    assert load_config_file(config_path) == {}
    assert "must contain a JSON object" in caplog.text


def test_unknown_config_keys_are_ignored(tmp_path):
    config_path = _write_config(tmp_path / "config.json", {"theme": "forest", "fancy": 1})

    options = resolve_options({"output": tmp_path}, config_path=config_path)

    assert options.theme is Theme.FOREST
    assert not hasattr(options, "fancy")


def test_invalid_value_keeps_prior_layer(tmp_path, caplog):
    config_path = _write_config(tmp_path / "config.json", {"format": "svg"})

    options = resolve_options(
        {"output": tmp_path, "format": "bmp"}, config_path=config_path
    )

    assert options.format is OutputFormat.SVG
    assert "Invalid format 'bmp'" in caplog.text


def test_output_target_overrides_format_flag(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    options = resolve_options({"format": "png"}, output_target="out/chart.svg")

    assert options.format is OutputFormat.SVG
    assert options.output == Path("out")
    assert options.output_filename == "chart.svg"
    assert (tmp_path / "out").is_dir()


def test_output_target_overrides_config_format(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_path = _write_config(tmp_path / "config.json", {"format": "pdf"})

    options = resolve_options({}, config_path=config_path, output_target="chart.png")

    assert options.format is OutputFormat.PNG
    assert options.output == Path(".")
    assert options.output_filename == "chart.png"


def test_unrecognized_output_extension_is_ignored(tmp_path, caplog):
    options = resolve_options(
        {"output": tmp_path, "format": "pdf"}, output_target="chart.gif"
    )

    assert options.format is OutputFormat.PDF
    assert options.output == tmp_path
    assert options.output_filename is None
    assert 'Unsupported output format in "chart.gif"' in caplog.text


def test_parse_output_target_is_case_insensitive():
    assert parse_output_target("Diagram.PDF") == {
        "format": OutputFormat.PDF,
        "output": Path("."),
        "output_filename": "Diagram.PDF",
    }
    assert parse_output_target("notes.txt") is None


def test_output_directory_is_created(tmp_path):
    target = tmp_path / "a" / "b" / "c"

    resolve_options({"output": target})

    assert target.is_dir()


def test_override_options_returns_new_instance():
    base = RenderOptions(theme="dark")

    updated = override_options(base, {"format": "svg", "theme": "purple"}, "prompt")

    assert updated.format is OutputFormat.SVG
    assert updated.theme is Theme.DARK
    assert base.format is OutputFormat.PNG
