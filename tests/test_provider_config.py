"""Tests for settings resolution from the environment and key file."""

import logging

import pytest

from gemini_bridge.llm import provider_config
from gemini_bridge.llm.provider_config import (
    DEFAULT_REQUEST_TIMEOUT,
    GEMINI_API_BASE_URL,
    load_key,
    load_settings,
    resolve_default_model,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GEMINI_API_KEY", "GEMINI_DEFAULT_MODEL", "GEMINI_API_BASE_URL", "GEMINI_REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


def test_key_from_environment_wins_over_file(monkeypatch, tmp_path):
    key_file = tmp_path / "gemini.key"
    key_file.write_text("from-file\n", encoding="utf-8")
    monkeypatch.setenv("GEMINI_API_KEY", "  from-env ")

    assert load_key(str(key_file)) == "from-env"


def test_key_from_file(tmp_path):
    key_file = tmp_path / "gemini.key"
    key_file.write_text("from-file\n", encoding="utf-8")

    assert load_key(str(key_file)) == "from-file"


def test_missing_or_empty_key_file(tmp_path):
    empty = tmp_path / "gemini.key"
    empty.write_text("  \n", encoding="utf-8")

    assert load_key(str(tmp_path / "absent" / "gemini.key")) is None
    assert load_key(str(empty)) is None
    assert load_key(None) is None


def test_known_default_model_is_kept():
    assert resolve_default_model("gemini-2.5-flash") == "gemini-2.5-flash"


def test_unset_default_model_uses_fallback():
    assert resolve_default_model(None) == "gemini-3-pro-preview"


def test_unknown_default_model_warns_and_falls_back(caplog):
    with caplog.at_level(logging.WARNING, logger="gemini_bridge.llm.provider_config"):
        assert resolve_default_model("gemini-9-ultra") == "gemini-3-pro-preview"

    assert 'GEMINI_DEFAULT_MODEL="gemini-9-ultra" is not a known model' in caplog.text


def test_load_settings_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setattr(provider_config, "GEMINI_KEY_FILE", str(tmp_path / "gemini.key"))
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("GEMINI_DEFAULT_MODEL", "gemini-3-flash-preview")
    monkeypatch.setenv("GEMINI_API_BASE_URL", "http://localhost:9999/v1beta/")
    monkeypatch.setenv("GEMINI_REQUEST_TIMEOUT", "15")

    settings = load_settings()

    assert settings.api_key == "secret"
    assert settings.default_model == "gemini-3-flash-preview"
    assert settings.base_url == "http://localhost:9999/v1beta"
    assert settings.request_timeout == 15.0


def test_load_settings_defaults(monkeypatch, tmp_path):
    monkeypatch.setattr(provider_config, "GEMINI_KEY_FILE", str(tmp_path / "gemini.key"))

    settings = load_settings()

    assert settings.api_key is None
    assert settings.default_model == "gemini-3-pro-preview"
    assert settings.base_url == GEMINI_API_BASE_URL
    assert settings.request_timeout == DEFAULT_REQUEST_TIMEOUT


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_bad_timeout_falls_back(monkeypatch, tmp_path, raw):
    monkeypatch.setattr(provider_config, "GEMINI_KEY_FILE", str(tmp_path / "gemini.key"))
    monkeypatch.setenv("GEMINI_REQUEST_TIMEOUT", raw)

    assert load_settings().request_timeout == DEFAULT_REQUEST_TIMEOUT
