import io
import logging

import pytest

import main as entry
from eqsolver.log import configure_logging


@pytest.fixture(autouse=True)
def _quiet(monkeypatch, restore_eqsolver_logger):
    monkeypatch.delenv("EQSOLVER_STRICT_BOUNDS", raising=False)
    monkeypatch.delenv("EQSOLVER_LOG_LEVEL", raising=False)


def test_main_solves_and_prints(capsys) -> None:
    assert entry.main(["x + y = 3, x - y = 1"]) == 0
    out = capsys.readouterr().out
    assert "=> x = 2" in out
    assert "y = 1" in out


def test_main_reports_singular_system(capsys) -> None:
    assert entry.main(["x + y = 3, 2x + 2y = 10"]) == 1
    assert "No solution" in capsys.readouterr().out


def test_main_reports_bad_input(capsys) -> None:
    assert entry.main(["x + y = 3"]) == 2
    assert "Error:" in capsys.readouterr().err


def test_main_applies_log_level_from_settings(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"log_level": "ERROR"}', encoding="utf-8")
    entry.main(["--settings", str(path), "x = 1"])
    assert logging.getLogger("eqsolver").level == logging.ERROR


def test_configure_logging_replaces_handler() -> None:
    first, second = io.StringIO(), io.StringIO()
    configure_logging("INFO", stream=first)
    logger = configure_logging("INFO", stream=second)
    assert len(logger.handlers) == 1
    logging.getLogger("eqsolver.engine").info("hello")
    assert first.getvalue() == ""
    assert "[INFO] eqsolver.engine" in second.getvalue()


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging("LOUD")


def test_main_rejects_unknown_log_level_in_settings(tmp_path, capsys) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"log_level": "LOUD"}', encoding="utf-8")
    assert entry.main(["--settings", str(path), "x = 1"]) == 2
    assert "Unknown log level" in capsys.readouterr().err


def test_main_rejects_bad_strict_bounds_variable(monkeypatch, capsys) -> None:
    monkeypatch.setenv("EQSOLVER_STRICT_BOUNDS", "maybe")
    assert entry.main(["x = 1"]) == 2
    assert "EQSOLVER_STRICT_BOUNDS" in capsys.readouterr().err


def test_configure_logging_follows_redirected_stderr(capsys) -> None:
    configure_logging("INFO")
    logging.getLogger("eqsolver.engine").info("to stderr")
    assert "to stderr" in capsys.readouterr().err
