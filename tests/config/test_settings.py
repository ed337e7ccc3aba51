"""
Tests for environment settings.
"""

from pathlib import Path

import pytest

from templify.config.settings import DEFAULT_HTTP_TIMEOUT, DEFAULT_MODEL, Settings
from templify.exceptions import ConfigError


class TestSettings:
    """Test cases for Settings.from_env."""

    def test_defaults(self):
        """Test an empty environment."""
        settings = Settings.from_env({})
        assert settings.model == DEFAULT_MODEL
        assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT
        assert settings.template_dir is None
        assert not settings.has_openai

    def test_values(self):
        """Test that every variable is read."""
        settings = Settings.from_env(
            {
                "OPENAI_API_KEY": " sk-test ",
                "TEMPLIFY_MODEL": "gpt-test",
                "TEMPLIFY_TEMPLATE_BASE_URL": "https://cdn.example.com",
                "TEMPLIFY_TEMPLATE_DIR": "/srv/templates",
                "TEMPLIFY_LAYOUT_DIR": "/srv/layouts",
                "TEMPLIFY_HTTP_TIMEOUT": "5",
            }
        )
        assert settings.openai_api_key == "sk-test"
        assert settings.has_openai
        assert settings.model == "gpt-test"
        assert settings.template_base_url == "https://cdn.example.com"
        assert settings.template_dir == Path("/srv/templates")
        assert settings.layout_dir == Path("/srv/layouts")
        assert settings.http_timeout == 5.0

    def test_blank_values_ignored(self):
        """Test that whitespace-only values fall back to defaults."""
        settings = Settings.from_env({"TEMPLIFY_MODEL": "  ", "TEMPLIFY_TEMPLATE_BASE_URL": ""})
        assert settings.model == DEFAULT_MODEL
        assert settings.template_base_url is None

    def test_invalid_timeout(self):
        """Test that a non-numeric timeout is a configuration error."""
        with pytest.raises(ConfigError) as exc_info:
            Settings.from_env({"TEMPLIFY_HTTP_TIMEOUT": "soon"})
        assert "TEMPLIFY_HTTP_TIMEOUT" in str(exc_info.value)
