"""Tests for the command line interface."""

from typer.testing import CliRunner

from udnews.cli.app import app
from udnews.config import load_sources

runner = CliRunner()


def _init(tmp_path) -> str:
    result = runner.invoke(app, ["init", "--config-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    return str(tmp_path / "config.yaml")


def test_init_seeds_default_sources(tmp_path) -> None:
    _init(tmp_path)

    names = [s.name for s in load_sources(tmp_path / "sources.yaml")]
    assert names == ["Matichon", "TNN", "Honekrasae"]


def test_status_on_memory_backend_warns(tmp_path) -> None:
    config_path = _init(tmp_path)

    result = runner.invoke(app, ["sources", "list", "--status", "-c", config_path])

    assert result.exit_code == 0
    assert "memory store" in result.output
    assert "Source Health" not in result.output


def test_add_then_remove_source(tmp_path) -> None:
    config_path = _init(tmp_path)

    added = runner.invoke(
        app, ["sources", "add", "-n", "Khaosod", "-u", "https://www.khaosod.co.th/rss", "-c", config_path]
    )
    duplicate = runner.invoke(
        app, ["sources", "add", "-n", "Again", "-u", "https://www.khaosod.co.th/rss", "-c", config_path]
    )
    removed = runner.invoke(app, ["sources", "remove", "TNN", "-c", config_path])

    assert added.exit_code == 0
    assert duplicate.exit_code == 1
    assert removed.exit_code == 0
    names = [s.name for s in load_sources(tmp_path / "sources.yaml")]
    assert names == ["Matichon", "Honekrasae", "Khaosod"]


def test_missing_config_exits_non_zero(tmp_path) -> None:
    result = runner.invoke(app, ["sources", "list", "-c", str(tmp_path / "absent.yaml")])
    assert result.exit_code == 1
