"""Package logger setup for the command line front end."""
import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Route ``dotmorph.*`` records to stdout and, optionally, a file.

    ``level`` may be a number or a name such as ``"debug"``. Calling this
    again replaces (and closes) the handlers installed by the previous call.
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"unknown log level {name!r}")

    logger = logging.getLogger("dotmorph")
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging at %s%s", logging.getLevelName(level), f" to {log_file}" if log_file else "")
    return logger
