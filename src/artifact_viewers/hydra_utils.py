"""Hydra config composition and typed settings."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Optional, Union

from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from artifact_viewers.config.schema import AppConfig, register_configs
from artifact_viewers.errors import ConfigError

DEFAULT_CONFIG_PATH = "configs"
DEFAULT_CONFIG_NAME = "default"


def _normalize_config_name(config_name: str) -> str:
    if config_name.endswith((".yaml", ".yml")):
        return Path(config_name).stem
    return config_name


def compose_config(
    *,
    config_path: Union[Path, str] = DEFAULT_CONFIG_PATH,
    config_name: str = DEFAULT_CONFIG_NAME,
    overrides: Optional[Sequence[str]] = None,
) -> Any:
    register_configs()
    config_dir = Path(config_path)
    if not config_dir.is_absolute():
        config_dir = (Path.cwd() / config_dir).resolve()
    if not config_dir.exists():
        raise ConfigError(f"Config directory not found: {config_dir}")
    if GlobalHydra.instance().is_initialized():
        GlobalHydra.instance().clear()
    try:
        with initialize_config_dir(config_dir=str(config_dir), version_base=None):
            return compose(
                config_name=_normalize_config_name(config_name),
                overrides=[item for item in (overrides or []) if item and item != "--"],
            )
    except Exception as exc:
        raise ConfigError(f"Failed to compose config {config_name!r}: {exc}") from exc


def resolve_config(cfg: Any) -> dict[str, Any]:
    if not OmegaConf.is_config(cfg):
        if isinstance(cfg, Mapping):
            return dict(cfg)
        raise ConfigError("Config must be a mapping or an OmegaConf object.")
    resolved = OmegaConf.to_container(
        cfg,
        resolve=True,
        throw_on_missing=False,
    )
    if not isinstance(resolved, dict):
        raise ConfigError("Resolved config must be a mapping.")
    return resolved


def format_config(cfg: Any) -> str:
    return OmegaConf.to_yaml(cfg, resolve=True)


def settings_from_config(cfg: Any = None) -> AppConfig:
    """Validate a composed (or plain mapping) config against ``AppConfig``."""
    schema = OmegaConf.structured(AppConfig)
    if cfg is None:
        return OmegaConf.to_object(schema)
    try:
        merged = OmegaConf.merge(schema, resolve_config(cfg))
        return OmegaConf.to_object(merged)
    except OmegaConfBaseException as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONFIG_NAME",
    "compose_config",
    "resolve_config",
    "format_config",
    "settings_from_config",
]
