"""Configuration schema for artifact_viewers."""

from artifact_viewers.config.schema import (
    AppConfig,
    ArtifactsConfig,
    LoggingConfig,
    MlmdConfig,
    VisualizationConfig,
    register_configs,
)

__all__ = [
    "AppConfig",
    "ArtifactsConfig",
    "LoggingConfig",
    "MlmdConfig",
    "VisualizationConfig",
    "register_configs",
]
