"""Tests for configuration loading and validation."""

from dataclasses import replace

import pytest

from sensei_bot.config import AppConfig, _safe_int, _safe_list, _validate_config


def _with(config: AppConfig, section: str, **changes) -> AppConfig:
    return replace(config, **{section: replace(getattr(config, section), **changes)})


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_checkout_url_must_be_absolute(self):
        config = _with(AppConfig(), "checkout", kata_url="coming-soon")
        with pytest.raises(ValueError, match="CHECKOUT_URL_KATA"):
            _validate_config(config)

    def test_checkout_url_must_be_http(self):
        config = _with(AppConfig(), "checkout", mind_url="ftp://files.example.com/mind")
        with pytest.raises(ValueError, match="CHECKOUT_URL_MIND"):
            _validate_config(config)

    def test_empty_campaign_rejected(self):
        config = _with(AppConfig(), "checkout", utm_campaign="")
        with pytest.raises(ValueError, match="UTM_CAMPAIGN"):
            _validate_config(config)

    def test_wildcard_origin_rejected(self):
        config = _with(AppConfig(), "server", allowed_origins=("*",))
        with pytest.raises(ValueError, match="ALLOWED_ORIGINS"):
            _validate_config(config)

    def test_origin_with_path_rejected(self):
        config = _with(AppConfig(), "server", allowed_origins=("https://dojo.example.com/chat",))
        with pytest.raises(ValueError, match="ALLOWED_ORIGINS"):
            _validate_config(config)

    def test_origin_with_port_accepted(self):
        config = _with(AppConfig(), "server", allowed_origins=("http://localhost:3000",))
        _validate_config(config)

    def test_invalid_port(self):
        config = _with(AppConfig(), "server", port=70000)
        with pytest.raises(ValueError, match="PORT"):
            _validate_config(config)

    def test_chat_path_needs_leading_slash(self):
        config = _with(AppConfig(), "server", chat_path="api/chat")
        with pytest.raises(ValueError, match="CHAT_PATH"):
            _validate_config(config)

    def test_unknown_store_backend(self):
        config = _with(AppConfig(), "store", backend="sqlite")
        with pytest.raises(ValueError, match="SESSION_STORE_BACKEND"):
            _validate_config(config)

    def test_redis_backend_needs_url(self):
        config = _with(AppConfig(), "store", backend="redis", redis_url="")
        with pytest.raises(ValueError, match="REDIS_URL"):
            _validate_config(config)

    def test_redis_backend_with_url(self):
        config = _with(AppConfig(), "store", backend="redis", redis_url="redis://localhost:6379/0")
        _validate_config(config)

    def test_ttl_must_be_positive(self):
        config = _with(AppConfig(), "store", ttl_seconds=0)
        with pytest.raises(ValueError, match="SESSION_TTL_SECONDS"):
            _validate_config(config)


class TestEnvParsing:
    def test_safe_int_default(self, monkeypatch):
        monkeypatch.delenv("SENSEI_TEST_INT", raising=False)
        assert _safe_int("SENSEI_TEST_INT", "42") == 42

    def test_safe_int_invalid(self, monkeypatch):
        monkeypatch.setenv("SENSEI_TEST_INT", "eighty")
        with pytest.raises(ValueError, match="SENSEI_TEST_INT"):
            _safe_int("SENSEI_TEST_INT", "80")

    def test_safe_list_strips_and_drops_empty(self, monkeypatch):
        monkeypatch.setenv("SENSEI_TEST_LIST", " https://a.example , ,https://b.example,")
        assert _safe_list("SENSEI_TEST_LIST", "") == ("https://a.example", "https://b.example")
