"""Configuration loading utilities."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ValidationFailure
from ..schemas.config import AppConfig, load_config


def load_config_file(path: str | Path | None) -> AppConfig:
    """Load and validate a YAML configuration file; defaults when no path is given."""
    if path is None:
        return AppConfig()
    config_path = Path(path)
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle)
    try:
        return load_config(raw)
    except ValidationError as exc:
        raise ValidationFailure(
            "config", f"Invalid config file {config_path}", exc.errors()
        ) from exc


__all__ = ["load_config_file"]
