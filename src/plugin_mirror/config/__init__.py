"""Configuration loading subpackage."""
from __future__ import annotations

from plugin_mirror.config.loader import (
    DEFAULT_CONFIG_NAME,
    ConfigError,
    MirrorConfig,
    ProjectConfigSet,
    ProjectSpec,
    ToolPaths,
    load_config,
    parse_config,
    parse_git_source,
)

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "ConfigError",
    "MirrorConfig",
    "ProjectConfigSet",
    "ProjectSpec",
    "ToolPaths",
    "load_config",
    "parse_config",
    "parse_git_source",
]
