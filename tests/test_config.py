"""Tests for configuration loading."""

from pathlib import Path

import pytest

from riviere.config import (
    CONFIG_FILENAME,
    DEFAULT_CONFIG,
    find_config_file,
    get_config,
    load_config,
    merge_configs,
    parse_toml_document,
    validate_config,
)
from riviere.errors import ConfigError


class TestFindConfigFile:
    def test_finds_file_in_start_directory(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert find_config_file(tmp_path) == (tmp_path / CONFIG_FILENAME).resolve()

    def test_walks_up_to_ancestor(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == (tmp_path / CONFIG_FILENAME).resolve()

    def test_nearest_wins(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("")
        nested = tmp_path / "a"
        nested.mkdir()
        (nested / CONFIG_FILENAME).write_text("")

        assert find_config_file(nested) == (nested / CONFIG_FILENAME).resolve()


class TestParsing:
    def test_parse_returns_plain_containers(self):
        data = parse_toml_document('[graph]\npath = "out/g.json"\n')
        assert data == {"graph": {"path": "out/g.json"}}
        assert type(data["graph"]) is dict

    def test_parse_error(self):
        with pytest.raises(ConfigError, match="Invalid configuration"):
            parse_toml_document("[graph\npath = 1")

    def test_load_merges_over_defaults(self, tmp_path):
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[suggestions]\nlimit = 3\n")

        config = load_config(path)

        assert config["suggestions"] == {"threshold": 0.6, "limit": 3}
        assert config["graph"] == DEFAULT_CONFIG["graph"]

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read configuration file"):
            load_config(tmp_path / "missing.toml")


class TestMergeConfigs:
    def test_deep_merge_leaves_inputs_alone(self):
        defaults = {"a": {"x": 1, "y": 2}, "b": 1}
        user = {"a": {"y": 3}}

        merged = merge_configs(defaults, user)

        assert merged == {"a": {"x": 1, "y": 3}, "b": 1}
        assert defaults == {"a": {"x": 1, "y": 2}, "b": 1}

    def test_scalar_replaces_section(self):
        assert merge_configs({"a": {"x": 1}}, {"a": 5}) == {"a": 5}


class TestValidateConfig:
    def test_defaults_are_valid(self):
        assert validate_config(DEFAULT_CONFIG) == []

    def test_bad_values(self):
        config = merge_configs(
            DEFAULT_CONFIG,
            {"graph": {"path": ""}, "suggestions": {"threshold": 1.5, "limit": 0}},
        )
        assert validate_config(config) == [
            "graph.path must be a non-empty string",
            "suggestions.threshold must be between 0 and 1",
            "suggestions.limit must be a positive integer",
        ]

    def test_boolean_is_not_a_number(self):
        config = merge_configs(DEFAULT_CONFIG, {"suggestions": {"threshold": True}})
        assert validate_config(config) == ["suggestions.threshold must be a number"]


class TestGetConfig:
    def test_defaults_without_file(self, tmp_path):
        assert get_config(start=tmp_path / "missing-dir") == DEFAULT_CONFIG

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('[graph]\npath = "arch.json"\n')

        assert get_config(path)["graph"]["path"] == "arch.json"

    def test_discovered_from_start(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text("[output]\nindent = 4\n")
        assert get_config(start=tmp_path)["output"]["indent"] == 4

    def test_invalid_result_raises(self, tmp_path):
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[suggestions]\nlimit = -1\n")

        with pytest.raises(ConfigError, match="suggestions.limit"):
            get_config(Path(path))


class TestPublicApi:
    def test_exports_resolve(self):
        import riviere.config

        for name in riviere.config.__all__:
            assert hasattr(riviere.config, name), name

    def test_loader_helpers_not_reexported(self):
        import riviere.config

        assert not hasattr(riviere.config, "_try_parse_env_value")
