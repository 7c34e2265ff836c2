"""Logging setup for the ``termbrot`` logger tree."""

import json
import logging

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record):
        data = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            data["error"] = self.formatException(record.exc_info)
        return json.dumps(data)


def init_log(level="info", fmt="text", file=""):
    """Configure the ``termbrot`` logger and return it.

    Unknown levels fall back to info, unknown formats to text. An empty
    ``file`` logs to stderr, keeping stdout free for output such as
    ``--dump``; otherwise the file is opened for appending.
    Raises OSError if the file cannot be opened.
    """
    logger = logging.getLogger("termbrot")
    logger.setLevel(LEVELS.get(level.strip().lower(), logging.INFO))

    if file:
        handler = logging.FileHandler(file, mode="a", encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    if fmt.strip().lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.propagate = False
    return logger
