"""Process bootstrap — `python -m tracker` serves the API with uvicorn."""

import logging

import uvicorn

from tracker.config import get_settings
from tracker.infrastructure.observability import setup_logging

logger = logging.getLogger("tracker")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(f"Listening on {settings.host}:{settings.port}")
    uvicorn.run(
        "tracker.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
