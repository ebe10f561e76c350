"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from crd_converter.cli import main


def _sample_config() -> str:
    return str(Path(__file__).resolve().parents[3] / "samples" / "config.yaml")


def test_missing_required_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["convert", "--config", _sample_config(), "--input", "review.json"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--kind" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["validate", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option" in captured.err
    assert "--bogus" in captured.err
    assert "Traceback" not in captured.err


def test_invalid_log_level_is_rejected(capsys) -> None:
    exit_code = main(["--log-level", "chatty", "validate", "--config", _sample_config()])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "--log-level" in captured.err


def test_missing_configuration_file_returns_cli_error(tmp_path: Path, capsys) -> None:
    exit_code = main(["validate", "--config", str(tmp_path / "missing.yaml")])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Configuration file not found" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_kind_returns_cli_error(capsys) -> None:
    exit_code = main(["paths", "--config", _sample_config(), "--kind", "Route"])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Unknown kind 'Route' (configured kinds: Gateway)." in captured.err


def test_unknown_schema_version_returns_cli_error(capsys) -> None:
    exit_code = main(
        ["schema", "--config", _sample_config(), "--kind", "Gateway", "--version", "v3"]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Unknown version 'v3' for kind Gateway." in captured.err


def test_missing_input_file_returns_cli_error(tmp_path: Path, capsys) -> None:
    exit_code = main(
        [
            "convert",
            "--config",
            _sample_config(),
            "--kind",
            "Gateway",
            "--input",
            str(tmp_path / "missing.json"),
        ]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "missing.json" in captured.err
