"""Process-wide logging setup, done once at entry and undone by the returned handle."""

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "counter_client"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s %(name)s: %(message)s"


class LoggingHandle:
    def __init__(self, logger: logging.Logger, handler: logging.Handler) -> None:
        self._logger = logger
        self._handler = handler
        self._propagate = logger.propagate

    def close(self) -> None:
        if self._handler in self._logger.handlers:
            self._logger.removeHandler(self._handler)
            self._handler.close()
            self._logger.propagate = self._propagate

    def __enter__(self) -> "LoggingHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def init_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> LoggingHandle:
    logger = logging.getLogger(LOGGER_NAME)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    handle = LoggingHandle(logger, handler)
    logger.propagate = False
    return handle
