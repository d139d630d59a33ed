import sys

import uvicorn

from dashboard.core.config import Settings
from dashboard.core.errors import ConfigError


def main() -> None:
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        sys.exit(f"Refusing to start: {exc}")

    uvicorn.run(
        "dashboard.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
