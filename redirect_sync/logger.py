"""Logging for HelpScout Redirect Sync

Modules log through children of the ``helpscout_redirects`` logger;
``setup_logger`` attaches handlers to that root only.
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "helpscout_redirects"

FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Marks handlers installed here so a second call replaces them
_HANDLER_FLAG = '_redirect_sync_handler'


def _tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_FLAG, True)
    handler.setFormatter(logging.Formatter(fmt=FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logger(level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure the package root logger.

    Console output goes to stderr, leaving stdout to the CLI's results.
    With log_dir set, everything down to DEBUG is also written to
    redirects_YYYYMMDD.log there, whatever the console level.

    Calling it again replaces the handlers of the previous call, so the
    CLI can switch to --verbose after the web app configured logging.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_FLAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    console_level = getattr(logging, level.upper(), logging.INFO)
    console = _tag(logging.StreamHandler(sys.stderr))
    console.setLevel(console_level)
    logger.addHandler(console)

    if log_dir:
        log_dir_path = Path(log_dir)
        log_dir_path.mkdir(parents=True, exist_ok=True)
        file_path = log_dir_path / f"redirects_{date.today():%Y%m%d}.log"
        file_handler = _tag(logging.FileHandler(file_path, encoding='utf-8'))
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)

    return logger


def get_logger(module: str) -> logging.Logger:
    """Logger for a module, e.g. get_logger('core') -> helpscout_redirects.core"""
    return logging.getLogger(f"{ROOT_LOGGER}.{module}")
