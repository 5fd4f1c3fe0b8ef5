"""Tests for application configuration loading."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from qrtickets.core.config import Settings, get_settings


class TestSettingsDefaults:
    """Settings should load with sane defaults (no .env required)."""

    def test_settings_loads_without_env_file(self):
        with patch.dict(os.environ, {}, clear=True):
            s = Settings(_env_file=None)
        assert s.app_env == "development"
        assert s.database_path == "./tickets.db"
        assert s.app_port == 5000

    def test_default_env_is_development(self):
        s = Settings(_env_file=None)
        assert s.is_development is True
        assert s.is_production is False
        assert s.is_testing is False

    def test_database_defaults(self):
        s = Settings(_env_file=None)
        assert s.database_timeout == 5.0

    def test_qr_defaults(self):
        s = Settings(_env_file=None)
        assert s.qr_box_size == 10
        assert s.qr_border == 4

    def test_cors_defaults(self):
        s = Settings(_env_file=None)
        assert s.cors_origin_list == ["*"]

    def test_get_settings_returns_instance(self):
        assert isinstance(get_settings(), Settings)


class TestSettingsFromEnv:
    def test_override_via_env(self):
        overrides = {
            "APP_ENV": "production",
            "DATABASE_PATH": "/var/lib/qrtickets/tickets.db",
            "APP_PORT": "8080",
            "LOG_FORMAT": "json",
        }
        with patch.dict(os.environ, overrides, clear=False):
            s = Settings(_env_file=None)
        assert s.is_production is True
        assert s.database_path == "/var/lib/qrtickets/tickets.db"
        assert s.app_port == 8080
        assert s.log_format == "json"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("APP_ENV=testing\nQR_BOX_SIZE=6\n")
        s = Settings(_env_file=str(env_file))
        assert s.is_testing is True
        assert s.qr_box_size == 6

    def test_cors_origin_list_parsing(self):
        s = Settings(_env_file=None, cors_origins="https://a.example, https://b.example,")
        assert s.cors_origin_list == ["https://a.example", "https://b.example"]


class TestApiPrefix:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("", ""), ("/", ""), ("/api", "/api"), ("api/", "/api"), (" /api/v1/ ", "/api/v1")],
    )
    def test_normalized_api_prefix(self, raw, expected):
        assert Settings(_env_file=None, api_prefix=raw).normalized_api_prefix == expected
