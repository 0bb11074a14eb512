"""
Logging setup for command line use.

Library modules only create loggers; handlers are installed here, once,
by the entry point.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = 'INFO', stream=None) -> logging.Logger:
    """
    Install a human-readable handler on the package logger.
    
    Safe to call multiple times; the handler is replaced, not duplicated.
    """
    package_logger = logging.getLogger('collection_snapshot')
    
    for handler in list(package_logger.handlers):
        if getattr(handler, '_collection_snapshot', False):
            package_logger.removeHandler(handler)
    
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._collection_snapshot = True
    
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return package_logger
