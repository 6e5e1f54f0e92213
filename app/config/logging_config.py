# app/config/logging_config.py
import logging

from app.config.settings import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    logging.getLogger("app").setLevel(getattr(logging, level, logging.INFO))
