"""Settings loading utilities."""

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from middlechain.config.schema import ChainSettings


def get_config_path() -> Path:
    """Get the default settings file path."""
    return Path.home() / ".middlechain" / "config.json"


def load_settings(config_path: Path | None = None) -> ChainSettings:
    """
    Load settings from file, or fall back to defaults.

    Environment variables (``MIDDLECHAIN_*``) fill in anything the file
    leaves out.

    Args:
        config_path: Optional path to settings file. Uses default if not provided.

    Returns:
        Loaded settings object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                raise ValueError("Settings root must be a JSON object")
            return ChainSettings(**convert_keys(raw))
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.warning("Failed to load settings from {}: {}; using defaults", path, e)

    return ChainSettings()


def save_settings(settings: ChainSettings, config_path: Path | None = None) -> None:
    """
    Save settings to file.

    Args:
        settings: Settings to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = path.with_name(f".{path.name}.tmp-{os.getpid()}")
    with open(tmp_path, "w") as f:
        json.dump(convert_to_camel(settings.model_dump()), f, indent=2)
    os.replace(tmp_path, path)


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
