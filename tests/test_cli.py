"""Tests for the pulse-charts CLI."""

from __future__ import annotations

import base64
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pulse_charts import __version__
from pulse_charts.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _work_in_tmp(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # setup_logging writes logs/ into the working directory
    monkeypatch.chdir(tmp_path)
    for name in ("PCH_DEVICE_PIXEL_RATIO", "PCH_LOG_LEVEL", "PCH_CHARTS_CONFIG"):
        monkeypatch.delenv(name, raising=False)


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_render_demo_data() -> None:
    result = runner.invoke(app, ["render", "--seed", "1", "--width", "200", "--height", "100"])

    assert result.exit_code == 0, result.output
    for kind in ("revenue", "signups", "funnel", "heat"):
        assert f"{kind}: rendered (200x100 px)" in result.output
    assert "Rendered 4 of 4 charts" in result.output
    assert "Using generated demo data" in result.output


def test_render_respects_pixel_ratio_and_skip() -> None:
    result = runner.invoke(
        app,
        ["render", "--seed", "1", "--width", "100", "--height", "50", "--dpr", "2", "--skip", "heat"],
    )

    assert result.exit_code == 0, result.output
    assert "funnel: rendered (200x100 px)" in result.output
    assert "heat: skipped" in result.output
    assert "Rendered 3 of 4 charts" in result.output


def test_render_dataset_file_with_base64(tmp_path: Path) -> None:
    data = tmp_path / "dataset.yaml"
    data.write_text(
        "revenue_series:\n"
        "  - {label: Jan, value: 100}\n"
        "  - {label: Feb, value: 200}\n"
        "funnel_stages:\n"
        "  - {label: Visits, value: 1000}\n"
        "  - {label: Signups, value: 100}\n"
    )

    result = runner.invoke(
        app,
        ["render", "--data", str(data), "--width", "120", "--height", "80",
         "--skip", "signups", "--skip", "heat", "--base64"],
    )

    assert result.exit_code == 0, result.output
    uris = [line for line in result.output.splitlines() if line.startswith("data:image/png;base64,")]
    assert len(uris) == 2
    assert base64.b64decode(uris[0].split(",", 1)[1]).startswith(b"\x89PNG")


def test_render_missing_dataset_file() -> None:
    result = runner.invoke(app, ["render", "--data", "missing.yaml"])
    assert result.exit_code == 1
    assert "Dataset file not found" in result.output


def test_render_malformed_dataset(tmp_path: Path) -> None:
    data = tmp_path / "bad.json"
    data.write_text('{"funnel_stages": [{"label": "Visits", "value": "lots"}]}')

    result = runner.invoke(app, ["render", "--data", str(data)])

    assert result.exit_code == 1
    assert "not a number" in result.output


def test_render_zero_area_warns() -> None:
    result = runner.invoke(app, ["render", "--seed", "2", "--width", "0"])

    assert result.exit_code == 0, result.output
    assert "zero area" in result.output
    assert "heat: rendered (0x180 px)" in result.output


def test_render_rejects_unusable_chart_config(tmp_path: Path) -> None:
    cfg = tmp_path / "charts.yaml"
    cfg.write_text("charts:\n  funnel_palette: []\n")

    result = runner.invoke(app, ["render", "--seed", "1", "--config", str(cfg)])

    assert result.exit_code == 1
    assert "funnel_palette" in result.output
    assert "Rendered" not in result.output


def test_render_rejects_chart_config_from_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    cfg = tmp_path / "charts.yaml"
    cfg.write_text("charts: 3\n")
    monkeypatch.setenv("PCH_CHARTS_CONFIG", str(cfg))

    result = runner.invoke(app, ["render", "--seed", "1"])

    assert result.exit_code == 1
    assert "mapping" in result.output
