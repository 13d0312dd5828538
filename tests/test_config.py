from core.config import Settings


def test_env_aliases_are_normalized():
    settings = Settings(ENV="Prod", JWT_SECRET_KEY="x" * 40)
    assert settings.env == "production"
    assert settings.is_production


def test_production_config_rejects_default_secret():
    settings = Settings(ENV="production", JWT_SECRET_KEY="CHANGE_ME", APP_URL="https://remedi.app")
    errors, _ = settings.validate_production_config()
    assert "JWT_SECRET_KEY must be set for production" in errors


def test_production_config_warnings():
    settings = Settings(
        ENV="production",
        JWT_SECRET_KEY="y" * 40,
        DATABASE_URL="sqlite:///remedi.db",
        MAINTENANCE_MODE=True,
    )
    errors, warnings = settings.validate_production_config()
    assert errors == []
    assert any("APP_URL" in warning for warning in warnings)
    assert any("SQLite" in warning for warning in warnings)
    assert any("MAINTENANCE_MODE" in warning for warning in warnings)


def test_cors_origins_are_deduplicated():
    settings = Settings(
        APP_URL="https://remedi.app/",
        CORS_ALLOWED_ORIGINS="https://remedi.app, https://admin.remedi.app,",
    )
    assert settings.cors_origins_list == [
        "https://remedi.app",
        "http://localhost:3000",
        "http://localhost:3001",
        "https://admin.remedi.app",
    ]
