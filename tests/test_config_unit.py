import json
from pathlib import Path

import pytest

from eqsolver import config
from eqsolver.engine import EquationSolver


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("EQSOLVER_STRICT_BOUNDS", raising=False)
    monkeypatch.delenv("EQSOLVER_LOG_LEVEL", raising=False)


def test_defaults_without_file() -> None:
    assert config.load_settings() == config.DEFAULT_SETTINGS
    assert config.load_settings("/nonexistent/eqsolver.json") == config.DEFAULT_SETTINGS


def test_file_values_are_merged(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"strict_bounds": True, "log_level": "debug",
                                "theme": "dark"}), encoding="utf-8")

    settings = config.load_settings(str(path))
    assert settings == {"strict_bounds": True, "log_level": "DEBUG"}


def test_corrupt_or_non_object_file_falls_back(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert config.load_settings(str(broken)) == config.DEFAULT_SETTINGS

    listed = tmp_path / "list.json"
    listed.write_text("[1, 2]", encoding="utf-8")
    assert config.load_settings(str(listed)) == config.DEFAULT_SETTINGS


def test_environment_overrides_file(monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"strict_bounds": True}), encoding="utf-8")
    monkeypatch.setenv("EQSOLVER_STRICT_BOUNDS", "off")
    monkeypatch.setenv("EQSOLVER_LOG_LEVEL", "info")

    settings = config.load_settings(str(path))
    assert settings["strict_bounds"] is False
    assert settings["log_level"] == "INFO"


def test_bad_boolean_in_environment(monkeypatch) -> None:
    monkeypatch.setenv("EQSOLVER_STRICT_BOUNDS", "maybe")
    with pytest.raises(ValueError, match="EQSOLVER_STRICT_BOUNDS"):
        config.load_settings()


def test_solver_picks_up_environment(monkeypatch) -> None:
    monkeypatch.setenv("EQSOLVER_STRICT_BOUNDS", "yes")
    assert EquationSolver.from_settings().strict_bounds is True
