"""
Unit Tests for Configuration

Tests for settings and configuration management.
"""

from goalsportal.config import Settings


def test_settings_defaults():
    """Test default settings values."""
    settings = Settings()

    assert settings.ENVIRONMENT in ["local", "staging", "production"]
    assert settings.LOG_LEVEL in ["DEBUG", "INFO", "WARNING", "ERROR"]
    assert isinstance(settings.DATABASE_URL, str)
    assert settings.SESSION_COOKIE_NAME == "sb-access-token"


def test_identity_urls():
    """Identity and redirect URLs are derived from the base URLs."""
    settings = Settings(
        SUPABASE_URL="https://demo.supabase.co/", SITE_URL="https://portal.example.org/"
    )

    assert settings.SUPABASE_URL == "https://demo.supabase.co"
    assert settings.identity_base_url == "https://demo.supabase.co/auth/v1"
    assert settings.auth_redirect_url == "https://portal.example.org/auth/callback"


def test_settings_environment_specific():
    """Test environment-specific behavior."""
    # Local environment
    settings_local = Settings(ENVIRONMENT="local")
    assert settings_local.is_local is True
    assert settings_local.is_production is False

    # Production environment
    settings_prod = Settings(ENVIRONMENT="production")
    assert settings_prod.is_local is False
    assert settings_prod.is_production is True
