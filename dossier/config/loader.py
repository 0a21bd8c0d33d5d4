"""Layered TOML configuration: defaults, then the active environment."""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "DOSSIER_CONFIG_DIR"
ENVIRONMENT_ENV = "DOSSIER_ENV"
DEFAULT_ENVIRONMENT = "development"
SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Directory holding default.toml and the per-environment files.

    DOSSIER_CONFIG_DIR wins and must exist. Otherwise the nearest
    ``config/`` directory from the working directory upwards is used.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_ENV} does not point to a directory: {override}")
        return path

    start = Path.cwd()
    for candidate in [start, *start.parents][:SEARCH_DEPTH]:
        if (candidate / "config").is_dir():
            return candidate / "config"
    return Path("config")


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Configuration file not found: {file_path}") from e


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested tables merge recursively."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_layers(config_dir: Path, environment: str) -> list[Path]:
    """Existing config files in precedence order, lowest first."""
    candidates = [config_dir / "default.toml", config_dir / f"{environment}.toml"]
    return [path for path in candidates if path.is_file()]


def load_config(config_dir: Path | None = None, environment: str | None = None) -> dict[str, Any]:
    """Merge default.toml with the environment's file.

    Both files are optional; settings fall back to model defaults.
    """
    config: dict[str, Any] = {}
    for path in config_layers(config_dir or get_config_dir(), environment or get_environment()):
        config = deep_merge(config, load_toml(path))
    return config
