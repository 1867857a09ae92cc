"""
Logging Configuration
=====================
Session messages (key generation, resets) go through the 'matrixcipher'
logger. The playback controller logs every step at DEBUG on its own module
logger, which can be switched on, and split into a separate file, without
turning on DEBUG for the rest of the package.
"""
import logging
import sys
from typing import Optional

from matrixcipher.config import LoggingConfig

PACKAGE_LOGGER = "matrixcipher"
STEP_TRACE_LOGGER = "matrixcipher.controller.playback"

_FORMATTER = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)


def _replace_handlers(logger: logging.Logger, handlers: list[logging.Handler]) -> None:
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(_FORMATTER)
        logger.addHandler(handler)


def setup_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Configure the package logger and the playback step trace.

    Safe to call repeatedly; handlers from a previous call are closed.

    Returns:
        The 'matrixcipher' logger.
    """
    config = config or LoggingConfig()

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.level)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, mode='w', encoding='utf-8'))
    _replace_handlers(logger, handlers)

    # Records propagate to the package handlers without passing the package
    # logger's level, so the trace logger's own level decides what gets out.
    trace = logging.getLogger(STEP_TRACE_LOGGER)
    if config.trace_steps:
        trace.setLevel(logging.DEBUG)
    else:
        trace.setLevel(max(config.level, logging.INFO))

    if config.trace_steps and config.trace_file:
        _replace_handlers(trace, [logging.FileHandler(config.trace_file, mode='w', encoding='utf-8')])
        trace.propagate = False
    else:
        _replace_handlers(trace, [])
        trace.propagate = True

    logger.info("Logging initialized.")
    return logger
