# =============================================================================
# tests/test_config.py - Settings Tests
# =============================================================================
# Unit tests for app/config.py defaults and computed properties.
#
# Run with: pytest tests/test_config.py -v
# =============================================================================

from app.config import Settings


class TestSettings:
    """Tests for the Settings class."""

    def test_environment_defaults_to_production(self, monkeypatch):
        """Stack traces stay hidden unless development is chosen explicitly."""
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        config = Settings(_env_file=None)

        assert config.ENVIRONMENT == "production"
        assert config.is_development is False

    def test_development_must_be_explicit(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")

        assert Settings(_env_file=None).is_development is True

    def test_cors_origins_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://books.example.com,")

        assert Settings(_env_file=None).cors_origins_list == [
            "http://localhost:3000",
            "https://books.example.com",
        ]
