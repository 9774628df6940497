"""Helper utilities for loading and normalising configuration inputs."""
from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from pydantic import ValidationError

from .errors import ConfigurationError
from .schema import Config

logger = logging.getLogger(__name__)

__all__ = [
    "parse_override_value",
    "apply_overrides_dict",
    "load_config",
    "configure_logging",
]


def parse_override_value(raw: str) -> Any:
    """Parse a CLI override value into a Python object."""

    text = raw.strip()
    lower = text.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"none", "null"}:
        return None
    try:
        return int(text)
    except ValueError:
        try:
            return float(text)
        except ValueError:
            pass
    if (text.startswith('"') and text.endswith('"')) or (text.startswith("'") and text.endswith("'")):
        return text[1:-1]
    return text


def apply_overrides_dict(payload: Dict[str, Any], overrides: Sequence[str]) -> Dict[str, Any]:
    """Apply dotted-path ``PATH=VALUE`` overrides to a configuration dictionary."""

    if not overrides:
        return payload
    for item in overrides:
        key, sep, value_str = item.partition("=")
        if not sep:
            raise ConfigurationError(f"Invalid override '{item}'; expected path=value")
        parts = [segment for segment in key.strip().split(".") if segment]
        if not parts:
            raise ConfigurationError(f"Invalid override '{item}'; empty path")
        target: Any = payload
        for segment in parts[:-1]:
            if not isinstance(target, dict):
                raise ConfigurationError(
                    f"Cannot traverse into non-mapping for override '{item}' at '{segment}'"
                )
            if segment not in target or target[segment] is None:
                target[segment] = {}
            target = target[segment]
        if not isinstance(target, dict):
            raise ConfigurationError(f"Cannot set override '{item}'; target is not a mapping")
        target[parts[-1]] = parse_override_value(value_str)
    return payload


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Sequence[str]] = None,
) -> Config:
    """Load a YAML configuration file into a :class:`Config` instance.

    Parameters
    ----------
    path:
        YAML file; when ``None`` only the defaults and ``overrides`` apply.
    overrides:
        Dotted ``PATH=VALUE`` strings applied before validation.
    """
    from ruamel.yaml import YAML

    data: Any = {}
    if path is not None:
        yaml = YAML(typ="safe")
        source_path = Path(path).resolve()
        try:
            with source_path.open("r", encoding="utf-8") as fh:
                data = yaml.load(fh)
        except FileNotFoundError as exc:
            raise ConfigurationError(f"configuration file not found: {source_path}") from exc
        if data is None:
            data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("The configuration root must be a mapping")
    data = apply_overrides_dict(data, list(overrides or []))
    try:
        cfg = Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid configuration: {exc}") from exc
    logger.debug("Loaded configuration from %s", path if path is not None else "defaults")
    return cfg


def configure_logging(level: int, suppress_warnings: bool = False) -> None:
    """Configure root logging and route Python warnings into it."""

    logging.basicConfig(level=level)
    root = logging.getLogger()
    root.setLevel(level)
    if suppress_warnings:
        warnings.filterwarnings("ignore")
    logging.captureWarnings(True)
