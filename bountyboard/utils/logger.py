from __future__ import annotations

import logging
from logging.config import dictConfig

ROOT_LOGGER = "bountyboard"


def setup_logging(level: str = "INFO") -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s %(name)s - %(message)s"
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": level.upper(),
                }
            },
            "loggers": {
                ROOT_LOGGER: {"level": level.upper(), "handlers": ["console"]},
            },
        }
    )
    get_logger("logging").debug(f"Logging configured: {level}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
