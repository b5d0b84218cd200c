"""Helpers for reading runner configuration into typed dataclasses."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from importlib import import_module
from pathlib import Path
from typing import Any

from compoconf import parse_config
from omegaconf import OmegaConf

from . import schema


class ConfigLoaderError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


_REGISTRY_SENTINEL = {"loaded": False}


def _ensure_registrations() -> None:
    if _REGISTRY_SENTINEL["loaded"]:
        return
    import_module("justcmd.failure")
    _REGISTRY_SENTINEL["loaded"] = True


def runner_config_from_mapping(data: Mapping[str, Any], source: str = "<mapping>") -> schema.RunnerConfig:
    """Validate plain data into ``RunnerConfig``."""

    _ensure_registrations()
    if not isinstance(data, Mapping):
        raise ConfigLoaderError(f"{source}: configuration root must be a mapping")
    try:
        return parse_config(schema.RunnerConfig, dict(data))
    except Exception as exc:  # compoconf raises rich errors
        raise ConfigLoaderError(f"Unable to parse config {source}: {exc}") from exc


def load_runner_config(path: str | Path, overrides: Iterable[str] | None = None) -> schema.RunnerConfig:
    """Load a YAML file into ``RunnerConfig``.

    Args:
        path: YAML file. May use OmegaConf interpolation such as
            ``${oc.env:SHELL}``.
        overrides: Dotlist overrides applied on top of the file, e.g.
            ``["failure_handler.class_name=LogFailureHandler"]``.
    """

    path = Path(path)
    if not path.exists():
        raise ConfigLoaderError(f"Configuration file not found: {path}")

    cfg = OmegaConf.load(path)
    overrides = list(overrides or [])
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(overrides))
    data = OmegaConf.to_container(cfg, resolve=True)
    return runner_config_from_mapping(data, source=str(path))  # type: ignore[arg-type]


__all__ = ["ConfigLoaderError", "load_runner_config", "runner_config_from_mapping"]
