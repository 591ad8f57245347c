"""Tests for environment-driven settings."""

import pytest

from cloudlab.config import DEFAULT_TEXT_MODEL, DEFAULT_TIMEOUT, load_settings


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings({})
        assert settings.api_key == ""
        assert settings.text_model == DEFAULT_TEXT_MODEL
        assert settings.request_timeout == DEFAULT_TIMEOUT
        assert settings.log_level == "INFO"

    def test_gemini_key_wins_over_api_key(self):
        settings = load_settings({"GEMINI_API_KEY": " g-key ", "API_KEY": "fallback"})
        assert settings.api_key == "g-key"

    def test_api_key_fallback(self):
        assert load_settings({"API_KEY": "fallback"}).api_key == "fallback"

    def test_overrides(self):
        settings = load_settings({
            "CLOUDLAB_TEXT_MODEL": "gemini-2.5-pro",
            "CLOUDLAB_VISION_MODEL": "v",
            "CLOUDLAB_MAPS_MODEL": "m",
            "CLOUDLAB_TIMEOUT": "12.5",
            "LOG_LEVEL": "debug",
        })
        assert settings.text_model == "gemini-2.5-pro"
        assert (settings.vision_model, settings.maps_model) == ("v", "m")
        assert settings.request_timeout == 12.5
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("raw", ["abc", "0", "-5", ""])
    def test_bad_timeout_falls_back(self, raw):
        assert load_settings({"CLOUDLAB_TIMEOUT": raw}).request_timeout == DEFAULT_TIMEOUT
