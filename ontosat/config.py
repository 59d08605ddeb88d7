"""YAML configuration for the ontosat command line.

Example `ontosat.yaml`:

    mode: terminological
    format: turtle
    output_suffix: -saturated
    output_dir: build/
    log_level: INFO
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ontosat.derivation import SaturationMode
from ontosat.errors import InvalidArgumentError, ParseFailureError

FORMATS = ("rdfxml", "ntriples", "turtle")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULTS: dict[str, Any] = {
    "mode": SaturationMode.ASSERTIONAL.value,
    "format": "rdfxml",
    "output_suffix": "-saturated",
    "output_dir": None,
    "log_level": "WARNING",
}


def load_yaml(path: str | Path) -> dict:
    """Load a YAML file and return its contents as a dict."""
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def validate_config(config: dict) -> dict:
    unknown = sorted(set(config) - set(DEFAULTS))
    if unknown:
        raise InvalidArgumentError(f"Unknown config keys: {', '.join(unknown)}")

    SaturationMode.parse(config["mode"])
    if config["format"] not in FORMATS:
        raise InvalidArgumentError(
            f"Invalid format: {config['format']!r} (expected one of: {', '.join(FORMATS)})"
        )
    level = str(config["log_level"]).upper()
    if level not in LOG_LEVELS:
        raise InvalidArgumentError(f"Invalid log_level: {config['log_level']!r}")
    config["log_level"] = level
    if not isinstance(config["output_suffix"], str):
        raise InvalidArgumentError("output_suffix must be a string")
    return config


def load_config(path: str | Path | None = None, **overrides) -> dict:
    """Defaults, then the YAML file at *path*, then non-None *overrides*."""
    config = dict(DEFAULTS)
    if path is not None:
        try:
            data = load_yaml(path)
        except UnicodeDecodeError as exc:
            raise ParseFailureError(f"Config file {path} is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            raise InvalidArgumentError(f"Cannot read config file {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ParseFailureError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ParseFailureError(f"Config file {path} must contain a mapping")
        config.update(data)
    config.update({k: v for k, v in overrides.items() if v is not None})
    return validate_config(config)
