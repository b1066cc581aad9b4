"""Tests for edge cases and error handling."""

from pathlib import Path

import pytest

from branchmanager.core.config import State
from branchmanager.core.yaml_settings import YamlWithIncludesSettingsSource


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


def test_circular_include_detected(fixtures_dir):
    """Circular include raises ValueError during initialization."""
    yaml_file = fixtures_dir / "circular_a.yaml"

    # Files are read in __init__, not __call__
    with pytest.raises(ValueError, match="Circular include"):
        YamlWithIncludesSettingsSource(State, yaml_file=str(yaml_file))


def test_missing_include_file_raises_error(tmp_path):
    """A missing include fails loudly."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "include: nonexistent.yaml\nconfig:\n  github:\n    owner: x\n"
    )

    with pytest.raises(FileNotFoundError):
        YamlWithIncludesSettingsSource(State, yaml_file=str(config_file))


def test_missing_config_file_is_skipped(tmp_path):
    """The project file is optional; defaults still load."""
    data = YamlWithIncludesSettingsSource(
        State, yaml_file=str(tmp_path / "absent.yaml")
    )()

    assert data["config"]["git"]["main_branch"] == "main"


def test_empty_include_list(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "include: []\nconfig:\n  github:\n    owner: empty\n"
    )

    data = YamlWithIncludesSettingsSource(
        State, yaml_file=str(config_file)
    )()

    assert data["config"]["github"]["owner"] == "empty"


def test_include_with_no_config_section(tmp_path):
    """Include file with no config: section is handled."""
    (tmp_path / "partial.yaml").write_text("other:\n  key: value\n")
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "include: partial.yaml\nconfig:\n  github:\n    owner: partial\n"
    )

    data = YamlWithIncludesSettingsSource(
        State, yaml_file=str(config_file)
    )()

    assert data["other"]["key"] == "value"
    assert data["config"]["github"]["owner"] == "partial"


def test_absolute_include_path(fixtures_dir, tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        f"include: {fixtures_dir / 'extra_commands.yaml'}\n"
    )

    data = YamlWithIncludesSettingsSource(
        State, yaml_file=str(config_file)
    )()

    assert data["config"]["commands"]["custom"]["test_cmd"] == "echo custom"


def test_empty_yaml_file(tmp_path):
    """Empty YAML file is handled gracefully."""
    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    config_file = tmp_path / "config.yaml"
    config_file.write_text(f"include: {empty}\n")

    data = YamlWithIncludesSettingsSource(
        State, yaml_file=str(config_file)
    )()

    assert data["config"]["strategy"]["name"] == "autosquash"


def test_same_file_twice_loaded_once(fixtures_dir):
    minimal = str(fixtures_dir / "minimal.yaml")

    data = YamlWithIncludesSettingsSource(
        State, yaml_file=[minimal, minimal]
    )()

    assert data["config"]["github"]["owner"] == "angular"
