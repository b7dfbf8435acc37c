"""Logging setup shared by the web app and scripts.

Plain text for local runs, JSON lines (python-json-logger) when LOG_JSON is on.
"""

import logging
import logging.config


def build_logging_config(*, level: str = "INFO", json_output: bool = False) -> dict:
    formatter = "json" if json_output else "plain"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
            },
        },
        "loggers": {
            "kindergarten_attendance": {"level": level.upper()},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def configure_logging(*, level: str = "INFO", json_output: bool = False) -> None:
    logging.config.dictConfig(build_logging_config(level=level, json_output=json_output))
