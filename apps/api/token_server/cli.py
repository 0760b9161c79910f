"""Process entry point: load configuration, then serve."""
from __future__ import annotations

import logging
import sys

import uvicorn

from .core.config import StartupConfigurationError, get_settings
from .main import create_app

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    logging.getLogger().setLevel(level)


def main() -> int:
    """Run the token server; exit 1 before binding if credentials are missing."""

    configure_logging()
    try:
        settings = get_settings()
    except StartupConfigurationError as exc:
        logger.error("Error: %s", exc)
        return 1

    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Starting token server on %s:%s (app id %s)", settings.host, settings.port, settings.agora_app_id)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
