# dashboard/core/config.py
import os
from typing import List, Optional

from dotenv import load_dotenv

from dashboard.core.errors import ConfigError

APP_NAME = "Inventory Dashboard API"

STORE_BACKENDS = ("sql", "supabase")
DEFAULT_DATABASE_URL = "sqlite:///./dashboard.db"


def _as_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def normalize_database_url(url: str) -> str:
    """Accept Heroku/Supabase style ``postgres://`` URLs."""
    url = url.strip()
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Settings:
    def __init__(
        self,
        *,
        jwt_secret: Optional[str],
        store_backend: str = "sql",
        database_url: str = DEFAULT_DATABASE_URL,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        jwt_algorithm: str = "HS256",
        access_token_expire_minutes: int = 60 * 24 * 7,
        low_stock_threshold: int = 30,
        seed_sample_data: bool = True,
        host: str = "0.0.0.0",
        port: int = 3001,
        log_level: str = "INFO",
        cors_origins: Optional[List[str]] = None,
    ):
        self.jwt_secret = jwt_secret
        self.store_backend = store_backend
        self.database_url = normalize_database_url(database_url)
        self.supabase_url = supabase_url
        self.supabase_key = supabase_key
        self.jwt_algorithm = jwt_algorithm
        self.access_token_expire_minutes = access_token_expire_minutes
        self.low_stock_threshold = low_stock_threshold
        self.seed_sample_data = seed_sample_data
        self.host = host
        self.port = port
        self.log_level = log_level.upper()
        self.cors_origins = cors_origins or ["*"]

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the environment (and a ``.env`` file, if present).

        Every problem is collected first so a broken deployment reports all
        of its missing values at once.
        """
        load_dotenv()
        problems = []

        def _int(name: str, default: int) -> int:
            raw = os.getenv(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                problems.append(f"{name} must be an integer (got {raw!r})")
                return default

        port = _int("PORT", 3001)
        expire = _int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7)
        threshold = _int("LOW_STOCK_THRESHOLD", 30)

        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

        settings = cls(
            jwt_secret=os.getenv("JWT_SECRET"),
            store_backend=os.getenv("STORE_BACKEND", "sql").strip().lower(),
            database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=expire,
            low_stock_threshold=threshold,
            seed_sample_data=_as_bool(os.getenv("SEED_SAMPLE_DATA"), True),
            host=os.getenv("HOST", "0.0.0.0"),
            port=port,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_origins=origins,
        )
        settings.validate(problems)
        return settings

    def validate(self, problems: Optional[List[str]] = None) -> None:
        problems = list(problems or [])
        if not self.jwt_secret:
            problems.append("JWT_SECRET is not set")
        if self.store_backend not in STORE_BACKENDS:
            problems.append(
                f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)} (got {self.store_backend!r})"
            )
        if self.store_backend == "supabase":
            if not self.supabase_url:
                problems.append("SUPABASE_URL is not set")
            if not self.supabase_key:
                problems.append("SUPABASE_SERVICE_ROLE_KEY is not set")
        if self.access_token_expire_minutes <= 0:
            problems.append("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        if self.low_stock_threshold < 0:
            problems.append("LOW_STOCK_THRESHOLD cannot be negative")
        if problems:
            raise ConfigError("Invalid configuration: " + "; ".join(problems) + ". Check your .env file.")
