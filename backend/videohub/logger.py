"""Logging configuration for VideoHub."""

import logging
import sys
from videohub.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format=LOG_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],
)

# The Supabase client talks through httpx; its per-request INFO lines drown
# out the upload logs.
for _noisy in ("httpx", "httpcore", "hpack"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger.

    Production runs at INFO; every other environment logs DEBUG so upload
    and cleanup steps are visible while developing.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO if settings.is_production else logging.DEBUG)
    return logger


app_logger = get_logger("app")
db_logger = get_logger("database")
redis_logger = get_logger("redis")
auth_logger = get_logger("auth")
api_logger = get_logger("api")
media_logger = get_logger("media")
