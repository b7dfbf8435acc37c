from __future__ import annotations

import logging

from config.log_config import build_logging_config, configure_logging


def test_json_formatter_is_python_json_logger():
    cfg = build_logging_config(json_output=True)

    assert cfg["handlers"]["console"]["formatter"] == "json"
    assert cfg["formatters"]["json"]["()"] == "pythonjsonlogger.jsonlogger.JsonFormatter"


def test_configure_logging_sets_package_level():
    configure_logging(level="debug", json_output=True)

    assert logging.getLogger("kindergarten_attendance").level == logging.DEBUG
    configure_logging(level="INFO")
