"""Unit tests for configuration loading."""

import logging

import pytest

from app_release.config import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_STORE_BASE_URL,
    ReleaseInput,
    get_env,
    get_input,
    load_config,
    parse_release_id,
    parse_repository,
    setup_logging,
)
from app_release.errors import ConfigError


def _load(**overrides):
    kwargs = {
        "repository": "halo-dev/plugin-demo",
        "release_id": "123",
        "app_id": "app-abc",
        "assets_dir": "dist",
        "github_token": "gh-token",
        "store_token": "store-token",
    }
    kwargs.update(overrides)
    return load_config(**kwargs)


class TestLoadConfig:
    def test_builds_release_input(self):
        config = _load()
        assert isinstance(config, ReleaseInput)
        assert config.owner == "halo-dev"
        assert config.repo == "plugin-demo"
        assert config.repository == "halo-dev/plugin-demo"
        assert config.release_id == 123
        assert config.app_id == "app-abc"
        assert config.store_base_url == DEFAULT_STORE_BASE_URL
        assert config.github_api_url == DEFAULT_GITHUB_API_URL

    def test_base_url_override_strips_trailing_slash(self):
        config = _load(store_base_url="https://store.example.com/")
        assert config.store_base_url == "https://store.example.com"

    def test_missing_release_id_is_left_for_orchestrator(self):
        assert _load(release_id="").release_id is None
        assert _load(release_id=None).release_id is None

    def test_missing_required_inputs_are_named(self):
        with pytest.raises(ConfigError, match="github-token, app-id"):
            _load(github_token="", app_id="")

    def test_config_is_immutable(self):
        config = _load()
        with pytest.raises(AttributeError):
            config.app_id = "other"


class TestParseReleaseId:
    def test_numeric_string(self):
        assert parse_release_id("42") == 42

    def test_int_passthrough(self):
        assert parse_release_id(7) == 7

    def test_blank_is_none(self):
        assert parse_release_id("   ") is None

    def test_non_numeric_raises(self):
        with pytest.raises(ConfigError, match="numeric"):
            parse_release_id("v1.0")


class TestParseRepository:
    def test_owner_and_repo(self):
        assert parse_repository("owner/repo") == ("owner", "repo")

    @pytest.mark.parametrize("value", ["", "owner", "owner/", "/repo", "a/b/c"])
    def test_invalid_values(self, value):
        with pytest.raises(ConfigError, match="owner/repo"):
            parse_repository(value)


class TestEnvironmentInputs:
    def test_get_input_reads_action_input(self, monkeypatch):
        monkeypatch.setenv("INPUT_APP-ID", "app-from-action")
        assert get_input("app-id", "APP_ID") == "app-from-action"

    def test_get_input_falls_back(self, monkeypatch):
        monkeypatch.delenv("INPUT_APP-ID", raising=False)
        monkeypatch.setenv("APP_ID", "app-from-env")
        assert get_input("app-id", "APP_ID") == "app-from-env"

    def test_get_input_missing_returns_empty(self, monkeypatch):
        monkeypatch.delenv("INPUT_RELEASE-ID", raising=False)
        monkeypatch.delenv("RELEASE_ID", raising=False)
        assert get_input("release-id", "RELEASE_ID") == ""

    def test_get_env_first_non_blank(self, monkeypatch):
        monkeypatch.setenv("APP_RELEASE_FIRST", "  ")
        monkeypatch.setenv("APP_RELEASE_SECOND", "second")
        assert get_env("APP_RELEASE_FIRST", "APP_RELEASE_SECOND") == "second"

    def test_get_env_default(self, monkeypatch):
        monkeypatch.delenv("APP_RELEASE_TEST_VAR", raising=False)
        assert get_env("APP_RELEASE_TEST_VAR", default="fallback") == "fallback"


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_root_level(self):
        yield
        setup_logging("INFO")

    def test_sets_level(self):
        assert setup_logging("debug") == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        assert setup_logging() == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, capsys):
        assert setup_logging("verbose") == logging.INFO
        assert logging.getLogger().level == logging.INFO
        assert "Unknown log level 'VERBOSE', using INFO" in capsys.readouterr().out
