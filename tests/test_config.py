"""Tests for config loading and history path resolution."""

from pathlib import Path

import pytest
import yaml

from apitest.core import (
    ConfigError,
    default_history_path,
    home_dir,
    load_config,
    resolve_history_path,
)


class TestHomeDir:
    def test_home_env(self, tmp_path):
        assert home_dir({"HOME": str(tmp_path)}) == tmp_path

    def test_userprofile_fallback(self, tmp_path):
        assert home_dir({"USERPROFILE": str(tmp_path)}) == tmp_path

    def test_home_preferred_over_userprofile(self, tmp_path):
        env = {"HOME": str(tmp_path / "a"), "USERPROFILE": str(tmp_path / "b")}
        assert home_dir(env) == tmp_path / "a"

    def test_reads_os_environ(self, fake_home):
        assert home_dir() == fake_home

    def test_default_history_path(self, tmp_path):
        path = default_history_path({"HOME": str(tmp_path)})
        assert path == tmp_path / ".api_test_history.json"


class TestLoadConfig:
    def test_none(self):
        assert load_config(None) == {"defaults": {}}

    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == {"defaults": {}}

    def test_empty_file(self, tmp_path):
        cfg = tmp_path / "c.yaml"
        cfg.write_text("")
        assert load_config(cfg) == {"defaults": {}}

    def test_reads_defaults(self, tmp_path):
        cfg = tmp_path / "c.yaml"
        cfg.write_text(yaml.dump({"defaults": {"headers": {"Accept": "application/json"}}}))
        config = load_config(cfg)
        assert config["defaults"]["headers"] == {"Accept": "application/json"}

    def test_invalid_yaml(self, tmp_path):
        cfg = tmp_path / "c.yaml"
        cfg.write_text("defaults: [unclosed")
        with pytest.raises(ConfigError, match="Invalid config file"):
            load_config(cfg)

    def test_not_a_mapping(self, tmp_path):
        cfg = tmp_path / "c.yaml"
        cfg.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(cfg)

    def test_unreadable_path(self, tmp_path):
        cfg_dir = tmp_path / "conf.yaml"
        cfg_dir.mkdir()
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(cfg_dir)

    def test_headers_not_a_mapping(self, tmp_path):
        cfg = tmp_path / "c.yaml"
        cfg.write_text(yaml.dump({"defaults": {"headers": ["a"]}}))
        with pytest.raises(ConfigError, match="'headers' must be a mapping"):
            load_config(cfg)


class TestResolveHistoryPath:
    def test_cli_flag_wins(self, tmp_path):
        config = {"defaults": {"history_file": str(tmp_path / "cfg.json")}}
        path = resolve_history_path(str(tmp_path / "cli.json"), config)
        assert path == tmp_path / "cli.json"

    def test_config_value(self, tmp_path):
        config = {"defaults": {"history_file": str(tmp_path / "cfg.json")}}
        assert resolve_history_path(None, config) == tmp_path / "cfg.json"

    def test_config_value_expands_user(self, fake_home):
        config = {"defaults": {"history_file": "~/hist.json"}}
        assert resolve_history_path(None, config) == Path(fake_home) / "hist.json"

    def test_home_default(self, tmp_path):
        path = resolve_history_path(None, {"defaults": {}}, env={"HOME": str(tmp_path)})
        assert path == tmp_path / ".api_test_history.json"
