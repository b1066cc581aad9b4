"""YAML configuration loading with include directive support."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

CONFIG_FILENAME = "branchmanager.yaml"

# Used while the configuration that sets up the real logger is loading
_bootstrap_logger = None


def _get_bootstrap_logger():
    global _bootstrap_logger
    if _bootstrap_logger is None:
        from branchmanager.core.log import ConsoleSink, Logger
        _bootstrap_logger = Logger(
            console=ConsoleSink(level="warn"), instrument_httpx=False
        )
        _bootstrap_logger.setup(log_root=Path.home(), run_name="bootstrap")
    return _bootstrap_logger


def _cleanup_bootstrap_logger():
    global _bootstrap_logger
    if _bootstrap_logger:
        _bootstrap_logger.close()
        _bootstrap_logger = None


def _cli_includes(argv: list[str]) -> list[str]:
    """Collect the values of every `--include FILE` in argv."""
    includes = []
    args = iter(argv[1:])
    for arg in args:
        if arg == "--include":
            value = next(args, None)
            if value is not None:
                includes.append(value)
    return includes


def deep_merge(base: dict, override: dict) -> dict:
    """Return base with override merged in; override wins on conflicts."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


# Alias so _read_files can reach the function despite its ``deep_merge``
# parameter (required by the pydantic-settings base signature).
_deep_merge = deep_merge


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """YAML settings source layering several files.

    Files are deep merged in increasing priority:
    package defaults < user config < ./branchmanager.yaml < --include
    files. Any file may pull in others with an `include:` key, resolved
    relative to the including file.
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_file=None):
        includes = _cli_includes(sys.argv)
        base = yaml_file or settings_cls.model_config.get("yaml_file")
        if base and includes:
            base = [base] if isinstance(base, (str, os.PathLike)) else list(base)
            yaml_file = base + includes
        else:
            yaml_file = base or includes or None
        super().__init__(settings_cls, yaml_file)

    def _read_files(self, files, deep_merge: bool = False):  # noqa: ARG002
        candidates = [
            Path(__file__).parent.parent / "defaults" / "default.yaml",
            Path(user_config_dir("branchmanager", appauthor=False))
            / CONFIG_FILENAME,
        ]
        if files:
            if isinstance(files, (str, os.PathLike)):
                files = [files]
            candidates.extend(Path(f).expanduser() for f in files)

        result = {}
        seen = set()
        for path in candidates:
            resolved = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            if not path.is_file():
                _get_bootstrap_logger().debug(
                    "Configuration file not found (skipping)",
                    file=str(path),
                )
                continue
            with _get_bootstrap_logger().span(
                "Configuration loading", file=str(path)
            ):
                result = _deep_merge(result, self._load(resolved, set()))
        return result

    def _load(self, path: Path, visited: set[Path]) -> dict:
        """Load one file, merging its `include:` files beneath it."""
        if path in visited:
            raise ValueError(f"Circular include: {path}")
        visited.add(path)

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        includes = data.pop("include", None) or []
        if isinstance(includes, str):
            includes = [includes]
        for include in includes:
            include_path = Path(include)
            if not include_path.is_absolute():
                include_path = (path.parent / include_path).resolve()
            data = deep_merge(self._load(include_path, visited.copy()), data)
        return data
