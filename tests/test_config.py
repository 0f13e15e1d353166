"""Tests for config module and config commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lindeps.cli import app
from lindeps.client import LINEAR_API_URL
from lindeps.config import (
    CONFIG_FILENAME,
    get_api_key,
    get_api_url,
    get_config_dir,
    get_config_path,
    get_default_team,
    load_config,
    mask_secret,
    save_config,
)

runner = CliRunner()


class TestConfigFile:
    """Test loading and saving config.toml."""

    def test_config_dir_from_env(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config
        assert get_config_path() == isolated_config / CONFIG_FILENAME

    def test_config_dir_default(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.delenv("LINDEPS_CONFIG_DIR")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        assert get_config_dir() == tmp_path / "xdg" / "lindeps"

    def test_missing_file_loads_empty(self) -> None:
        assert load_config() == {}

    def test_roundtrip(self) -> None:
        save_config({"default_team": "ENG", "api_key": "lin_api_123"})

        assert load_config() == {"default_team": "ENG", "api_key": "lin_api_123"}

    def test_malformed_file_loads_empty(self, isolated_config: Path) -> None:
        isolated_config.mkdir(parents=True)
        (isolated_config / CONFIG_FILENAME).write_text("not = [valid toml")

        assert load_config() == {}


class TestConfigValues:
    """Test typed accessors."""

    def test_api_key_env_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        save_config({"api_key": "from-file"})
        monkeypatch.setenv("LINEAR_API_KEY", "from-env")

        assert get_api_key() == "from-env"

    def test_api_key_from_file(self) -> None:
        save_config({"api_key": "from-file"})
        assert get_api_key() == "from-file"

    def test_api_key_missing(self) -> None:
        assert get_api_key() is None

    def test_default_team(self) -> None:
        assert get_default_team() is None
        save_config({"default_team": "ENG"})
        assert get_default_team() == "ENG"

    def test_api_url(self) -> None:
        assert get_api_url() == LINEAR_API_URL
        save_config({"api_url": "http://localhost:8080/graphql"})
        assert get_api_url() == "http://localhost:8080/graphql"

    def test_mask_secret(self) -> None:
        assert mask_secret("lin_api_abcdef") == "**********cdef"
        assert mask_secret("abc") == "***"


class TestConfigCommands:
    """Test the config sub-commands."""

    def test_set_and_get(self) -> None:
        result = runner.invoke(app, ["config", "set", "default_team", "ENG"])
        assert result.exit_code == 0
        assert "Set default_team = ENG" in result.output

        result = runner.invoke(app, ["config", "get", "default_team"])
        assert result.exit_code == 0
        assert result.output.strip() == "ENG"

    def test_set_unknown_key(self) -> None:
        result = runner.invoke(app, ["config", "set", "colour", "blue"])

        assert result.exit_code == 1
        assert "Unknown config key 'colour'" in result.output

    def test_get_missing_key(self) -> None:
        result = runner.invoke(app, ["config", "get", "default_team"])

        assert result.exit_code == 1
        assert "Key 'default_team' not found" in result.output

    def test_api_key_masked(self) -> None:
        runner.invoke(app, ["config", "set", "api_key", "lin_api_secret"])

        result = runner.invoke(app, ["config", "list"])

        assert result.exit_code == 0
        assert "lin_api_secret" not in result.output
        assert "api_key = **********cret" in result.output

    def test_list_json(self) -> None:
        save_config({"default_team": "ENG"})

        result = runner.invoke(app, ["config", "list", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"default_team": "ENG"}

    def test_list_empty(self) -> None:
        result = runner.invoke(app, ["config", "list"])

        assert result.exit_code == 0
        assert "No configuration values set" in result.output

    def test_keys_json(self) -> None:
        result = runner.invoke(app, ["config", "keys", "--json"])

        assert result.exit_code == 0
        assert set(json.loads(result.stdout)) == {"api_key", "default_team", "api_url"}
