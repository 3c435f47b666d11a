"""Tests for RIVIERE_* environment variable overrides."""

from riviere.config import DEFAULT_CONFIG, apply_env_overrides, get_config
from riviere.config.loader import _try_parse_env_value


class TestTryParseEnvValue:
    def test_json_list_parsed(self):
        assert _try_parse_env_value('["a", "b"]') == ["a", "b"]

    def test_json_object_parsed(self):
        assert _try_parse_env_value('{"key": "value"}') == {"key": "value"}

    def test_booleans_case_insensitive(self):
        assert _try_parse_env_value("TRUE") is True
        assert _try_parse_env_value("False") is False

    def test_numbers(self):
        assert _try_parse_env_value("3") == 3
        assert _try_parse_env_value("0.75") == 0.75

    def test_plain_string_passthrough(self):
        assert _try_parse_env_value("graph.json") == "graph.json"

    def test_malformed_json_returns_string(self):
        assert _try_parse_env_value("[not valid json") == "[not valid json"


class TestApplyEnvOverrides:
    def test_sets_existing_key(self, monkeypatch):
        monkeypatch.setenv("RIVIERE_SUGGESTIONS_LIMIT", "5")
        config = apply_env_overrides({"suggestions": {"limit": 10}})
        assert config["suggestions"]["limit"] == 5

    def test_key_keeps_remaining_underscores(self, monkeypatch):
        monkeypatch.setenv("RIVIERE_OUTPUT_LINE_WIDTH", "80")
        config = apply_env_overrides({})
        assert config == {"output": {"line_width": 80}}

    def test_ignores_names_without_key(self, monkeypatch):
        monkeypatch.setenv("RIVIERE_GRAPH", "x")
        assert apply_env_overrides({}) == {}

    def test_override_wins_over_file(self, monkeypatch, tmp_path):
        path = tmp_path / "riviere.toml"
        path.write_text('[graph]\npath = "from-file.json"\n')
        monkeypatch.setenv("RIVIERE_GRAPH_PATH", "from-env.json")

        config = get_config(path)

        assert config["graph"]["path"] == "from-env.json"
        assert config["suggestions"] == DEFAULT_CONFIG["suggestions"]
