import logging
import sys

LOGGER_NAME = "tome_level_patcher"


class ConsoleFormatter(logging.Formatter):
    """Bare messages for INFO and below; WARNING and above keep their level."""

    def __init__(self) -> None:
        super().__init__('%(message)s')
        self._leveled = logging.Formatter('%(levelname)s - %(message)s')

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return self._leveled.format(record)
        return super().format(record)


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return the package logger.

    Safe to call more than once: the console handler is replaced, so it
    always writes to the current stdout.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for old in [h for h in logger.handlers if h.get_name() == LOGGER_NAME]:
        logger.removeHandler(old)
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(LOGGER_NAME)
    handler.setFormatter(ConsoleFormatter())
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
