"""Tests for YAML config and credential loading."""

import pytest

from twilio_lookup.base import DEFAULT_LOOKUP_URL, ConfigurationError
from twilio_lookup.utils.config_loader import (
    PROJECT_ROOT,
    load_context_from_config,
    load_lookup_config,
    load_yaml_config,
)


@pytest.fixture(autouse=True)
def _no_twilio_env(monkeypatch):
    monkeypatch.delenv("TWILIO_ACCOUNT_SID", raising=False)
    monkeypatch.delenv("TWILIO_AUTH_TOKEN", raising=False)


@pytest.fixture
def config_files(tmp_path):
    config = tmp_path / "lookup_config.yaml"
    config.write_text(
        "lookup:\n  base_url: https://lookups.example.test\n  timeout: 3\n  default_type: carrier\n",
        encoding="utf-8",
    )
    keys = tmp_path / "api_keys.yaml"
    keys.write_text("twilio:\n  account_sid: ACfile\n  auth_token: tokenfile\n", encoding="utf-8")
    return config, keys


def test_repository_config_is_loadable() -> None:
    cfg = load_yaml_config("config/lookup_config.yaml")
    assert cfg["lookup"]["base_url"] == DEFAULT_LOOKUP_URL
    assert (PROJECT_ROOT / "config" / "lookup_config.yaml").exists()


def test_missing_yaml_raises_file_not_found(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_yaml_config(tmp_path / "absent.yaml")


def test_empty_yaml_returns_empty_dict(tmp_path) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert load_yaml_config(empty) == {}


def test_missing_lookup_config_uses_defaults(tmp_path) -> None:
    assert load_lookup_config(tmp_path / "absent.yaml") == {}


def test_context_from_files(config_files) -> None:
    config, keys = config_files

    context = load_context_from_config(config, keys)

    assert context.account_sid == "ACfile"
    assert context.auth_token == "tokenfile"
    assert context.lookup_url == "https://lookups.example.test"
    assert context.timeout == 3.0
    assert context.session is None


def test_environment_overrides_files(config_files, monkeypatch) -> None:
    config, keys = config_files
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "ACenv")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "tokenenv")

    context = load_context_from_config(config, keys)

    assert (context.account_sid, context.auth_token) == ("ACenv", "tokenenv")


def test_missing_credentials_raise(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        load_context_from_config(tmp_path / "absent.yaml", tmp_path / "absent_keys.yaml")


def test_non_mapping_lookup_section_raises(tmp_path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("lookup: [1, 2]\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_lookup_config(config)


def test_non_numeric_timeout_raises(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "ACenv")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "tokenenv")
    config = tmp_path / "lookup_config.yaml"
    config.write_text("lookup:\n  timeout: [1]\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_context_from_config(config, tmp_path / "absent_keys.yaml")


def test_null_timeout_means_no_timeout(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "ACenv")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "tokenenv")
    config = tmp_path / "lookup_config.yaml"
    config.write_text("lookup:\n  timeout: null\n", encoding="utf-8")

    assert load_context_from_config(config, tmp_path / "absent_keys.yaml").timeout is None


@pytest.mark.parametrize(
    "keys_text",
    [
        "- account_sid\n- auth_token\n",
        "twilio: ACfile\n",
        "twilio: {account_sid: [unclosed\n",
    ],
)
def test_unusable_api_keys_file_raises(tmp_path, keys_text) -> None:
    keys = tmp_path / "api_keys.yaml"
    keys.write_text(keys_text, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_context_from_config(tmp_path / "absent.yaml", keys)
