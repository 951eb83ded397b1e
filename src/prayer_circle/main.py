"""Run the Prayer Circle API with settings taken from the environment."""

import logging

import uvicorn

from prayer_circle.api.app import create_app
from prayer_circle.config import get_config, setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Start uvicorn with ``PRAYER_CIRCLE_*`` settings."""
    config = get_config()
    setup_logging(config.log_level)

    logger.info(f"Veri dosyası: {config.store_path or 'bellek içi'}")
    logger.info(
        "Sahiplik kontrolü: "
        f"güncelleme={'açık' if config.require_owner_for_update else 'kapalı'}, "
        f"silme={'açık' if config.require_owner_for_delete else 'kapalı'}"
    )

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
