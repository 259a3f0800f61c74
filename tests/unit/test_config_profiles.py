"""
Unit tests for the YAML config layer and access-token profiles.

All state lives in the isolated config directory from conftest.
"""

import yaml

import pytest

from nylax.sdk import config, profiles
from nylax.sdk.exceptions import InvalidProfileNameError, ProfileNotFoundError


class TestConfig:

    def test_defaults_without_file(self, isolated_config):
        assert not isolated_config["config_file"].exists()
        settings = config.get_api_settings()
        assert settings == {
            "api_server": "https://api.nylas.com",
            "app_id": None,
            "app_secret": None,
            "timeout": 30.0,
        }

    def test_set_and_get_nested_value(self, isolated_config):
        config.set_config_value("api.app_id", "abc123")
        assert config.get_config_value("api.app_id") == "abc123"
        with open(isolated_config["config_file"]) as f:
            saved = yaml.safe_load(f)
        assert saved["api"]["app_id"] == "abc123"
        # untouched defaults are kept alongside
        assert saved["api"]["server"] == "https://api.nylas.com"

    def test_partial_file_is_merged_with_defaults(self, isolated_config):
        isolated_config["config_file"].write_text("api:\n  timeout: 5\n")
        settings = config.get_api_settings()
        assert settings["timeout"] == 5.0
        assert settings["api_server"] == "https://api.nylas.com"

    def test_environment_overrides_file(self, isolated_config, monkeypatch):
        config.set_config_value("api.server", "https://file.example")
        monkeypatch.setenv("NYLAS_API_SERVER", "https://env.example")
        assert config.get_api_settings()["api_server"] == "https://env.example"

    def test_broken_yaml_falls_back_to_defaults(self, isolated_config):
        isolated_config["config_file"].write_text("api: [unclosed\n")
        assert config.load_config() == config.DEFAULT_CONFIG

    def test_missing_key_returns_default(self, isolated_config):
        assert config.get_config_value("api.nope", "fallback") == "fallback"


class TestProfiles:

    def test_create_and_list(self, isolated_config):
        profiles.create_profile("work", "tok-1", email="me@work.example",
                                account_id="a1", provider="gmail")
        profiles.create_profile("home", "tok-2")

        listed = profiles.list_profiles()
        assert [p["name"] for p in listed] == ["home", "work"]
        work = listed[1]
        assert work["email"] == "me@work.example"
        assert work["provider"] == "gmail"
        assert work["last_validated"] is not None
        assert listed[0]["last_validated"] is None

        path = isolated_config["profiles_dir"] / "work" / "profile.yaml"
        assert yaml.safe_load(path.read_text())["access_token"] == "tok-1"

    def test_invalid_name(self, isolated_config):
        with pytest.raises(InvalidProfileNameError):
            profiles.create_profile("../escape", "tok")
        assert not profiles.is_valid_profile_name("-leading-dash")
        assert profiles.is_valid_profile_name("work_2")

    def test_use_and_active(self, isolated_config):
        profiles.create_profile("work", "tok-1")
        assert profiles.get_active_profile() is None
        assert profiles.set_active_profile("work") is True
        assert profiles.get_active_profile_name() == "work"
        assert profiles.get_active_profile()["is_active"] is True

    def test_use_unknown_profile(self, isolated_config):
        assert profiles.set_active_profile("ghost") is False
        assert profiles.get_active_profile_name() is None

    def test_status(self, isolated_config):
        profiles.create_profile("fresh", "tok")
        profiles.create_profile("checked", "tok", email="a@example.com")
        assert profiles.get_profile_status("fresh")["status"] == "unvalidated"
        assert profiles.get_profile_status("checked")["status"] == "valid"
        missing = profiles.get_profile_status("ghost")
        assert missing["status"] == "missing"
        assert missing["exists"] is False

    def test_update_metadata_marks_validated(self, isolated_config):
        profiles.create_profile("fresh", "tok")
        profiles.update_profile_metadata("fresh", email="b@example.com", provider="imap")
        metadata = profiles.load_profile_metadata("fresh")
        assert metadata["email"] == "b@example.com"
        assert metadata["access_token"] == "tok"
        assert profiles.get_profile_status("fresh")["valid"] is True

    def test_update_unknown_profile(self, isolated_config):
        with pytest.raises(ProfileNotFoundError):
            profiles.update_profile_metadata("ghost", email="x@example.com")

    def test_get_token(self, isolated_config):
        profiles.create_profile("work", "tok-1")
        assert profiles.get_profile_token("work") == "tok-1"
        with pytest.raises(ProfileNotFoundError):
            profiles.get_profile_token("ghost")

    def test_delete_active_profile_clears_selection(self, isolated_config):
        profiles.create_profile("work", "tok-1")
        profiles.set_active_profile("work")
        assert profiles.delete_profile("work") is True
        assert not (isolated_config["profiles_dir"] / "work").exists()
        assert profiles.get_active_profile_name() is None
        assert profiles.delete_profile("work") is False
