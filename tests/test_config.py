import pytest

from dashboard.core.config import Settings
from dashboard.core.errors import ConfigError
from dashboard.main import create_app

ENV_VARS = (
    "JWT_SECRET",
    "STORE_BACKEND",
    "DATABASE_URL",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "PORT",
    "LOW_STOCK_THRESHOLD",
    "SEED_SAMPLE_DATA",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # keep a developer's .env out of the picture
    monkeypatch.setattr("dashboard.core.config.load_dotenv", lambda: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    settings = Settings.from_env()
    assert settings.store_backend == "sql"
    assert settings.database_url == "sqlite:///./dashboard.db"
    assert settings.port == 3001
    assert settings.low_stock_threshold == 30
    assert settings.seed_sample_data is True


def test_missing_jwt_secret_aborts():
    with pytest.raises(ConfigError, match="JWT_SECRET"):
        Settings.from_env()


def test_supabase_backend_needs_credentials(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("STORE_BACKEND", "supabase")
    with pytest.raises(ConfigError) as excinfo:
        Settings.from_env()
    assert "SUPABASE_URL" in str(excinfo.value)
    assert "SUPABASE_SERVICE_ROLE_KEY" in str(excinfo.value)


def test_unknown_backend(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("STORE_BACKEND", "mongo")
    with pytest.raises(ConfigError, match="STORE_BACKEND"):
        Settings.from_env()


def test_bad_integer(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("PORT", "eighty")
    with pytest.raises(ConfigError, match="PORT"):
        Settings.from_env()


def test_postgres_url_is_normalized(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("DATABASE_URL", "postgres://user:pw@db:5432/dash")
    monkeypatch.setenv("SEED_SAMPLE_DATA", "false")
    settings = Settings.from_env()
    assert settings.database_url == "postgresql://user:pw@db:5432/dash"
    assert settings.seed_sample_data is False


def test_create_app_refuses_broken_settings():
    with pytest.raises(ConfigError):
        create_app(settings=Settings(jwt_secret=None))
