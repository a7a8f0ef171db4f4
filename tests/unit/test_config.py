"""Tests for wallgen.core.config — defaults and environment overrides."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wallgen.core.config import WallgenConfig


class TestDefaults:
    """Test default values when no WALLGEN_* variables are set."""

    def test_model_defaults(self, test_config):
        assert test_config.gemini_model == "gemini-3-flash-preview"
        assert test_config.wallpaper_model == "fal-ai/flux-2-pro"
        assert test_config.generate_model == "fal-ai/flux/schnell"
        assert test_config.restyle_model == "fal-ai/image-editing/style-transfer"

    def test_upstream_defaults(self, test_config):
        assert test_config.gemini_api_url == "https://generativelanguage.googleapis.com/v1beta"
        assert test_config.fal_queue_url == "https://queue.fal.run"
        assert test_config.fal_run_url == "https://fal.run"
        assert test_config.fal_platform_url == "https://api.fal.ai/v1"
        assert test_config.fal_rest_url == "https://rest.alpha.fal.ai"
        assert test_config.http_timeout == 120.0

    def test_server_defaults(self, test_config):
        assert test_config.server_host == "0.0.0.0"
        assert test_config.server_port == 8787
        assert test_config.log_level == "INFO"

    def test_no_credential_fields(self, test_config):
        """Keys are per-request and never part of configuration."""
        fields = set(WallgenConfig.model_fields)
        assert not any("key" in name for name in fields)


class TestEnvironmentOverrides:
    """Test loading values from WALLGEN_* variables."""

    def test_override_models(self, test_config, monkeypatch):
        monkeypatch.setenv("WALLGEN_WALLPAPER_MODEL", "fal-ai/flux-pro/v1.1")
        monkeypatch.setenv("WALLGEN_GEMINI_MODEL", "gemini-2.5-flash")
        cfg = WallgenConfig(_env_file=None)
        assert cfg.wallpaper_model == "fal-ai/flux-pro/v1.1"
        assert cfg.gemini_model == "gemini-2.5-flash"

    def test_override_is_case_insensitive(self, test_config, monkeypatch):
        monkeypatch.setenv("wallgen_server_port", "9000")
        assert WallgenConfig(_env_file=None).server_port == 9000

    def test_timeout_is_coerced(self, test_config, monkeypatch):
        monkeypatch.setenv("WALLGEN_HTTP_TIMEOUT", "30")
        assert WallgenConfig(_env_file=None).http_timeout == 30.0

    @pytest.mark.parametrize("port", ["80", "70000"])
    def test_port_out_of_range(self, test_config, monkeypatch, port):
        monkeypatch.setenv("WALLGEN_SERVER_PORT", port)
        with pytest.raises(ValidationError):
            WallgenConfig(_env_file=None)

    def test_non_positive_timeout(self, test_config, monkeypatch):
        monkeypatch.setenv("WALLGEN_HTTP_TIMEOUT", "0")
        with pytest.raises(ValidationError):
            WallgenConfig(_env_file=None)

    def test_invalid_log_level(self, test_config, monkeypatch):
        monkeypatch.setenv("WALLGEN_LOG_LEVEL", "CHATTY")
        with pytest.raises(ValidationError):
            WallgenConfig(_env_file=None)
