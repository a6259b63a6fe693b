"""Unit tests for plugin_mirror.config.loader."""
from __future__ import annotations

from pathlib import Path

import pytest

from plugin_mirror.config.loader import (
    ConfigError,
    ProjectSpec,
    ToolPaths,
    load_config,
    parse_config,
    parse_git_source,
)

_BASIC_YAML = """\
plugins:
  zeta-plugin:
    git: "https://github.com/acme/zeta.git"
    svn: "https://plugins.svn.wordpress.org/zeta-plugin"
  alpha-plugin:
    git: "https://github.com/acme/alpha.git   release"
    svn: "https://plugins.svn.wordpress.org/alpha-plugin"
"""


class TestParseGitSource:
    def test_url_only(self) -> None:
        assert parse_git_source("https://example/demo.git") == ("https://example/demo.git", "")

    def test_url_and_branch(self) -> None:
        assert parse_git_source("https://example/demo.git develop") == (
            "https://example/demo.git",
            "develop",
        )

    def test_any_whitespace_separates(self) -> None:
        assert parse_git_source("  git@host:demo.git\tmain  ") == ("git@host:demo.git", "main")

    def test_blank_value_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            parse_git_source("   ")

    def test_three_tokens_rejected(self) -> None:
        with pytest.raises(ValueError, match="3 tokens"):
            parse_git_source("https://example/demo.git main extra")


class TestProjectSpec:
    def test_is_immutable(self) -> None:
        spec = ProjectSpec(name="demo", origin_url="u", dist_url="d")
        with pytest.raises(AttributeError):
            spec.name = "other"  # type: ignore[misc]

    def test_branch_defaults_to_empty(self) -> None:
        assert ProjectSpec(name="demo", origin_url="u", dist_url="d").origin_branch == ""

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "../escape", "a\\b"])
    def test_name_must_be_single_directory(self, name: str) -> None:
        with pytest.raises(ValueError, match="Invalid project name"):
            ProjectSpec(name=name, origin_url="u", dist_url="d")

    def test_empty_urls_rejected(self) -> None:
        with pytest.raises(ValueError):
            ProjectSpec(name="demo", origin_url="", dist_url="d")
        with pytest.raises(ValueError):
            ProjectSpec(name="demo", origin_url="u", dist_url="")


class TestParseConfig:
    def test_projects_keep_document_order(self) -> None:
        config = parse_config(_BASIC_YAML)
        assert list(config.projects) == ["zeta-plugin", "alpha-plugin"]

    def test_branch_is_split_from_git_value(self) -> None:
        spec = parse_config(_BASIC_YAML).projects["alpha-plugin"]
        assert spec.origin_url == "https://github.com/acme/alpha.git"
        assert spec.origin_branch == "release"

    def test_svn_value_is_bare_url(self) -> None:
        spec = parse_config(_BASIC_YAML).projects["zeta-plugin"]
        assert spec.dist_url == "https://plugins.svn.wordpress.org/zeta-plugin"
        assert spec.origin_branch == ""

    def test_default_tools(self) -> None:
        assert parse_config(_BASIC_YAML).tools == ToolPaths()

    def test_tools_override(self) -> None:
        text = _BASIC_YAML + "tools:\n  npm: /usr/local/bin/npm\n"
        tools = parse_config(text).tools
        assert tools.npm == "/usr/local/bin/npm"
        assert tools.git == "git"

    def test_empty_plugins_allowed(self) -> None:
        assert parse_config("plugins: {}\n").projects == {}

    def test_null_plugins_allowed(self) -> None:
        assert parse_config("plugins:\n").projects == {}

    def test_numeric_name_becomes_string(self) -> None:
        text = "plugins:\n  404:\n    git: https://e/404.git\n    svn: https://d/404\n"
        assert list(parse_config(text).projects) == ["404"]

    def test_missing_plugins_key(self) -> None:
        with pytest.raises(ConfigError, match="plugins"):
            parse_config("other: 1\n")

    def test_plugins_must_be_mapping(self) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            parse_config("plugins:\n  - a\n  - b\n")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ConfigError, match="Invalid YAML"):
            parse_config("plugins: [unclosed\n")

    def test_missing_svn_field(self) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            parse_config("plugins:\n  demo:\n    git: https://e/demo.git\n")

    def test_bad_git_value_names_plugin(self) -> None:
        text = "plugins:\n  demo:\n    git: a b c\n    svn: https://d/demo\n"
        with pytest.raises(ConfigError, match="'demo'"):
            parse_config(text)

    def test_path_like_name_rejected(self) -> None:
        text = "plugins:\n  ../evil:\n    git: https://e/x.git\n    svn: https://d/x\n"
        with pytest.raises(ConfigError, match="Invalid project name"):
            parse_config(text)


class TestLoadConfig:
    def test_load_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text(_BASIC_YAML, encoding="utf-8")
        config = load_config(path)
        assert len(config.projects) == 2
        assert config.source == path

    def test_load_from_string_path(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text(_BASIC_YAML, encoding="utf-8")
        assert "zeta-plugin" in load_config(str(path)).projects

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="seems to be missing"):
            load_config(tmp_path / "config.yml")
