"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from openkm_mcp.config import Settings
from openkm_mcp.config import load_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in [
        "OKM_BASE_URL",
        "OKM_USER",
        "OKM_PASS",
        "OKM_HTTP_TIMEOUT",
        "OKM_TOOL_VARIANT",
        "OKM_PDF_EXTRACTION",
        "OKM_METADATA_FALLBACK_ON_ANY_ERROR",
        "OKM_LOG_LEVEL",
    ]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.base_url == "http://localhost:9090/OpenKM"
        assert settings.user == "okmAdmin"
        assert settings.password.get_secret_value() == "admin"
        assert settings.tool_variant == "full"
        assert settings.read_only is False
        assert settings.pdf_extraction is True
        assert settings.metadata_fallback_on_any_error is False

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("OKM_BASE_URL", "https://dms.example.com/OpenKM/")
        clean_env.setenv("OKM_USER", "reader")
        clean_env.setenv("OKM_PASS", "s3cret")
        clean_env.setenv("OKM_TOOL_VARIANT", "read-only")
        clean_env.setenv("OKM_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.base_url == "https://dms.example.com/OpenKM"
        assert settings.user == "reader"
        assert settings.password.get_secret_value() == "s3cret"
        assert settings.read_only is True
        assert settings.log_level == "DEBUG"

    def test_password_is_not_shown(self, clean_env):
        settings = Settings(_env_file=None, password="hunter2")

        assert "hunter2" not in repr(settings)

    def test_invalid_variant_rejected(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, tool_variant="everything")

    def test_timeout_must_be_positive(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, http_timeout=0)

    def test_settings_are_immutable(self, clean_env):
        settings = Settings(_env_file=None)

        with pytest.raises(ValidationError):
            settings.user = "someone-else"

    def test_load_settings_applies_overrides(self, clean_env, tmp_path):
        clean_env.chdir(tmp_path)

        settings = load_settings(tool_variant="read-only")

        assert settings.read_only is True
