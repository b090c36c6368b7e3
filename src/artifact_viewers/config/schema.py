"""Structured config schema for Hydra."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Optional


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class ArtifactsConfig:
    base_url: str = "http://localhost:3000"
    timeout: float = 30.0
    # When set, artifacts are read from <local_root>/<bucket>/<key> instead of HTTP.
    local_root: Optional[str] = None


@dataclass
class VisualizationConfig:
    base_url: str = "http://localhost:8888"
    namespace: str = ""
    timeout: float = 120.0


@dataclass
class MlmdConfig:
    context_type: str = "run"
    pod_name_property: str = "kfp_pod_name"
    state_property: str = "state"
    complete_state: str = "complete"


@dataclass
class AppConfig:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    artifacts: ArtifactsConfig = field(default_factory=ArtifactsConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)
    mlmd: MlmdConfig = field(default_factory=MlmdConfig)


def register_configs() -> None:
    from hydra.core.config_store import ConfigStore

    cs = ConfigStore.instance()
    try:
        cs.store(group="schema", name="base", node=AppConfig, package="_global_")
    except Exception as exc:
        logging.getLogger(__name__).warning(
            "Hydra config store registration failed: %s", exc
        )


__all__ = [
    "LoggingConfig",
    "ArtifactsConfig",
    "VisualizationConfig",
    "MlmdConfig",
    "AppConfig",
    "register_configs",
]
