"""YAML configuration loader.

Reads ``config.yml`` from the storage root and turns it into an ordered
:data:`ProjectConfigSet`.  The expected document looks like::

    plugins:
      my-plugin:
        git: "https://github.com/acme/my-plugin.git develop"
        svn: "https://plugins.svn.wordpress.org/my-plugin"
    tools:
      npm: /usr/local/bin/npm

The ``git`` value is a URL optionally followed by a branch name.  The
``tools`` section is optional and overrides executable names.
"""
from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_CONFIG_NAME = "config.yml"


class ConfigError(Exception):
    """Raised when the configuration file is missing or malformed."""


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectSpec:
    """One project to mirror.

    Attributes
    ----------
    name:
        Unique key; also used as the directory name under ``git/`` and
        ``svn/``.
    origin_url:
        URL of the upstream git repository.
    dist_url:
        URL of the Subversion distribution repository.
    origin_branch:
        Branch to track, or ``""`` for the remote's default branch.
    """

    name: str
    origin_url: str
    dist_url: str
    origin_branch: str = ""

    def __post_init__(self) -> None:
        if not self.name or self.name in {".", ".."} or "/" in self.name or "\\" in self.name:
            raise ValueError(
                f"Invalid project name {self.name!r}: must be a single directory name"
            )
        if not self.origin_url:
            raise ValueError(f"Project {self.name!r}: origin URL must not be empty")
        if not self.dist_url:
            raise ValueError(f"Project {self.name!r}: distribution URL must not be empty")


ProjectConfigSet = dict[str, ProjectSpec]
"""Ordered mapping of project name to :class:`ProjectSpec`."""


@dataclass(frozen=True)
class ToolPaths:
    """Executables used for each external tool."""

    git: str = "git"
    svn: str = "svn"
    composer: str = "composer"
    npm: str = "npm"


@dataclass
class MirrorConfig:
    """Everything loaded from a configuration file."""

    projects: ProjectConfigSet = field(default_factory=dict)
    tools: ToolPaths = field(default_factory=ToolPaths)
    source: Path | None = None


# ---------------------------------------------------------------------------
# File schema
# ---------------------------------------------------------------------------


class _PluginEntry(BaseModel):
    git: str
    svn: str


class _ToolsSection(BaseModel):
    git: str = "git"
    svn: str = "svn"
    composer: str = "composer"
    npm: str = "npm"


class _ConfigDocument(BaseModel):
    plugins: dict[str, _PluginEntry]
    tools: _ToolsSection = Field(default_factory=_ToolsSection)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_git_source(value: str) -> tuple[str, str]:
    """Split a ``git`` config value into ``(url, branch)``.

    Parameters
    ----------
    value:
        ``"<url>"`` or ``"<url> <branch>"``, separated by any whitespace.

    Returns
    -------
    tuple[str, str]
        The URL and the branch (``""`` when no branch was given).

    Raises
    ------
    ValueError
        If *value* is blank or has more than two tokens.
    """
    tokens = value.split()
    if not tokens:
        raise ValueError("git source must not be empty")
    if len(tokens) > 2:
        raise ValueError(
            f"git source {value!r} must be '<url>' or '<url> <branch>', got {len(tokens)} tokens"
        )
    url = tokens[0]
    branch = tokens[1] if len(tokens) == 2 else ""
    return url, branch


def parse_config(yaml_text: str, source: Path | None = None) -> MirrorConfig:
    """Parse configuration from a YAML string.

    Raises
    ------
    ConfigError
        If the YAML is invalid or does not match the expected schema.
    """
    try:
        data = yaml.safe_load(io.StringIO(yaml_text))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in configuration: {exc}") from exc

    if not isinstance(data, dict) or "plugins" not in data:
        raise ConfigError("Configuration must have a top-level 'plugins' key.")
    plugins = data.get("plugins") or {}
    if not isinstance(plugins, dict):
        raise ConfigError("'plugins' must be a mapping of name to settings.")
    # YAML allows non-string keys (e.g. a plugin named 404)
    data = dict(data)
    data["plugins"] = {str(name): entry for name, entry in plugins.items()}

    try:
        document = _ConfigDocument.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    projects: ProjectConfigSet = {}
    for name, entry in document.plugins.items():
        try:
            origin_url, origin_branch = parse_git_source(entry.git)
            projects[name] = ProjectSpec(
                name=name,
                origin_url=origin_url,
                origin_branch=origin_branch,
                dist_url=entry.svn.strip(),
            )
        except ValueError as exc:
            raise ConfigError(f"Plugin {name!r}: {exc}") from exc

    tools = ToolPaths(**document.tools.model_dump())
    return MirrorConfig(projects=projects, tools=tools, source=source)


def load_config(path: Union[str, Path]) -> MirrorConfig:
    """Load configuration from a YAML file.

    Parameters
    ----------
    path:
        Path to ``config.yml``.

    Raises
    ------
    ConfigError
        If the file does not exist or its content is invalid.
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"{config_path.name} seems to be missing ({config_path}).")
    content = config_path.read_text(encoding="utf-8")
    return parse_config(content, source=config_path)


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
