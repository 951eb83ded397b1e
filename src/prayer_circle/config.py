"""Configuration management."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

MEMORY_STORE = "memory"


def _get_default_store_path() -> Path:
    """Get default store path."""
    return Path.home() / ".local" / "share" / "prayer-circle" / "prayers.json"


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_store_path(value: str | None) -> Path | None:
    """``memory`` veya boş değer bellek içi depo demektir."""
    if value is None:
        return _get_default_store_path()
    if not value.strip() or value.strip().lower() == MEMORY_STORE:
        return None
    return Path(value).expanduser()


@dataclass
class AppConfig:
    """Application configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    # Storage (None = in-memory)
    store_path: Path | None = field(default_factory=_get_default_store_path)

    # Policies
    require_owner_for_update: bool = False
    require_owner_for_delete: bool = False
    recover_on_startup: bool = True

    @classmethod
    def from_env(cls) -> Self:
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("PRAYER_CIRCLE_HOST", "0.0.0.0"),
            port=int(os.getenv("PRAYER_CIRCLE_PORT", "8080")),
            log_level=os.getenv("PRAYER_CIRCLE_LOG_LEVEL", "INFO"),
            store_path=parse_store_path(os.getenv("PRAYER_CIRCLE_STORE_PATH")),
            require_owner_for_update=_parse_bool(
                os.getenv("PRAYER_CIRCLE_REQUIRE_OWNER_FOR_UPDATE"), False
            ),
            require_owner_for_delete=_parse_bool(
                os.getenv("PRAYER_CIRCLE_REQUIRE_OWNER_FOR_DELETE"), False
            ),
            recover_on_startup=_parse_bool(os.getenv("PRAYER_CIRCLE_RECOVER_ON_STARTUP"), True),
        )


_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get application configuration."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def setup_logging(level: str = "INFO") -> None:
    """Setup application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
