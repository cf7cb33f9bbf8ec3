import os
from logging import Logger, config, getLevelName, getLogger
from typing import Any

LOGGER_NAME = "geolocator"
DEFAULT_LOG_LEVEL = "INFO"


def build_log_config(level: str) -> dict[str, Any]:
    """Logging config sharing uvicorn's formatters between the library and the server.

    Library records carry the emitting logger name so provider and cache
    messages can be told apart from request logs.
    """
    level_no = getLevelName(level.upper())
    if not isinstance(level_no, int):
        level_no = getLevelName(DEFAULT_LOG_LEVEL)

    stderr_handler = {"class": "logging.StreamHandler", "formatter": "default", "stream": "ext://sys.stderr"}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(levelprefix)s %(asctime)s [%(name)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": '%(levelprefix)s %(asctime)s %(client_addr)s "%(request_line)s" %(status_code)s',
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": stderr_handler,
            "access": {"class": "logging.StreamHandler", "formatter": "access", "stream": "ext://sys.stdout"},
        },
        "loggers": {
            LOGGER_NAME: {"handlers": ["default"], "level": level_no, "propagate": False},
            "uvicorn": {"handlers": ["default"], "level": level_no, "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": level_no, "propagate": False},
        },
    }


def configure_logging(level: str | None = None) -> Logger:
    """Apply the config; the level falls back to LOG_LEVEL, then INFO."""
    config.dictConfig(build_log_config(level or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)))
    return getLogger(LOGGER_NAME)


logger = configure_logging()
