"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and error mapping
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from whatsupdoc.config.loader import GLOBAL_CONFIG_PATH, _deep_merge, _load_yaml, load_config
from whatsupdoc.core.errors import ConfigError, ErrorCode


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("parser:\n  tab_width: 8\n")

        assert _load_yaml(yaml_file) == {"parser": {"tab_width": 8}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("parser: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_merge(self) -> None:
        base = {"parser": {"tab_width": 4, "max_workers": 2}}
        override = {"parser": {"tab_width": 8}}
        assert _deep_merge(base, override) == {"parser": {"tab_width": 8, "max_workers": 2}}

    def test_does_not_mutate_base(self) -> None:
        base = {"parser": {"tab_width": 4}}
        _deep_merge(base, {"parser": {"tab_width": 8}})
        assert base == {"parser": {"tab_width": 4}}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_default_config_when_no_files(self, tmp_path: Path) -> None:
        with patch("whatsupdoc.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)
        assert config.parser.tab_width == 4
        assert config.logging.level == "WARNING"

    def test_loads_project_config(self, tmp_path: Path) -> None:
        (tmp_path / ".whatsupdoc.yaml").write_text("parser:\n  tab_width: 2\n")

        with patch("whatsupdoc.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)
        assert config.parser.tab_width == 2

    def test_project_config_overrides_global(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("parser:\n  tab_width: 2\n  max_workers: 1\n")
        project = tmp_path / "project"
        project.mkdir()
        (project / ".whatsupdoc.yaml").write_text("parser:\n  tab_width: 8\n")

        with patch("whatsupdoc.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(project)
        assert config.parser.tab_width == 8
        assert config.parser.max_workers == 1

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        (tmp_path / ".whatsupdoc.yaml").write_text("logging:\n  level: ERROR\n")

        with (
            patch("whatsupdoc.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"WHATSUPDOC__LOGGING__LEVEL": "DEBUG"}),
        ):
            config = load_config(tmp_path)
        assert config.logging.level == "DEBUG"

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        (tmp_path / ".whatsupdoc.yaml").write_text("parser:\n  tab_width: 2\n")

        with patch("whatsupdoc.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path, parser={"tab_width": 8})
        assert config.parser.tab_width == 8

    def test_raises_config_error_for_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / ".whatsupdoc.yaml").write_text("parser:\n  tab_width: 99\n")

        with (
            patch("whatsupdoc.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError) as exc_info,
        ):
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "tab_width" in exc_info.value.details["field"]

    def test_raises_file_not_found_for_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing")
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND


class TestGlobalConfigPath:
    def test_is_in_user_config(self) -> None:
        assert GLOBAL_CONFIG_PATH.parts[-2:] == ("whatsupdoc", "config.yaml")
