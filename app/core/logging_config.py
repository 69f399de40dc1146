"""Process-wide logging setup"""

import logging

from .config import settings


DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Configure the root logger once at startup."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=settings.LOG_FORMAT or DEFAULT_FORMAT)
    # Stripe's client logs every request at INFO
    logging.getLogger("stripe").setLevel(max(level, logging.WARNING))
