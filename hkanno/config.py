"""
hkanno.config - YAML config loading and validation.

Handles loading hkanno.yaml from the working directory (or a parent) and
validating editor options.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, field_validator

from hkanno.backend import OUT_FORMATS
from hkanno.exceptions import ConfigError

CONFIG_FILENAME = "hkanno.yaml"


class EditorConfig(BaseModel):
    """Resolved editor configuration."""

    default_format: str = "xml"
    output_suffix: str = ".modified"
    show_preview: bool = False
    strict_correlation: bool = True
    time_policy: str = "lenient"

    @field_validator("default_format")
    @classmethod
    def validate_default_format(cls, v: str) -> str:
        if v not in OUT_FORMATS:
            raise ValueError(f"default_format must be one of: {set(OUT_FORMATS)}")
        return v

    @field_validator("time_policy")
    @classmethod
    def validate_time_policy(cls, v: str) -> str:
        valid = {"lenient", "strict"}
        if v not in valid:
            raise ValueError(f"time_policy must be one of: {valid}")
        return v

    @field_validator("output_suffix")
    @classmethod
    def validate_output_suffix(cls, v: str) -> str:
        if not v or "/" in v or "\\" in v:
            raise ValueError("output_suffix must be a non-empty file name fragment")
        return v


def find_config_dir(start: Path | None = None) -> Path | None:
    """Find the nearest directory containing hkanno.yaml."""
    current = (start or Path.cwd()).resolve()
    while True:
        if (current / CONFIG_FILENAME).exists():
            return current
        if current == current.parent:
            return None
        current = current.parent


def load_config(config_dir: Path) -> EditorConfig:
    """Load and validate configuration from a directory."""
    config_file = config_dir / CONFIG_FILENAME
    if not config_file.exists():
        raise FileNotFoundError(f"No {CONFIG_FILENAME} found in {config_dir}")

    with open(config_file) as f:
        raw_config = yaml.safe_load(f) or {}

    if not isinstance(raw_config, dict):
        raise ConfigError(f"{config_file} must contain a mapping")

    return EditorConfig(**raw_config)


def resolve_config(start: Path | None = None) -> EditorConfig:
    """Load the nearest hkanno.yaml, or the defaults if there is none."""
    config_dir = find_config_dir(start)
    if config_dir is None:
        return EditorConfig()
    return load_config(config_dir)


def create_default_config() -> dict[str, Any]:
    """Create a default config dict."""
    return EditorConfig().model_dump()


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
