import logging

from src.battle_core.config import EngineConfig

PACKAGE_LOGGER = "src.battle_core"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(config: EngineConfig, handler: logging.Handler | None = None) -> logging.Logger:
    """Attach a single handler to the package logger and set its level from config.

    Safe to call more than once; an existing handler is replaced rather than duplicated.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.log_level.upper())
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
