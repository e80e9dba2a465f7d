"""Logging setup for the cinematch command line."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
_HTTP_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for CLI output.

    The HTTP stack logs every request at INFO; below DEBUG those loggers are
    capped at WARNING so download and resolution progress stays readable.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, force=force)
    if level > logging.DEBUG:
        for name in _HTTP_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
