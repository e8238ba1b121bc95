"""Library logger for httpmsg.

The logger is silent by default. Set ``HTTPMSG_DEBUG=true`` in the
environment to stream debug records to stderr.
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "#HTTPMSG# - %(asctime)s - %(levelname)s - %(message)s"

_loggers: dict[str, logging.Logger] = {}


def get_logger(name: str = "httpmsg") -> logging.Logger:
    """Return the httpmsg logger, configuring it on first use.

    The logger does not propagate to the root logger, so applications that
    configure logging globally are not flooded with grammar rejections.
    """
    if name not in _loggers:
        logger = logging.getLogger(name)
        logger.propagate = False
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        if os.environ.get("HTTPMSG_DEBUG", "").lower() == "true":
            logger.setLevel(logging.DEBUG)
        else:
            logger.setLevel(logging.CRITICAL)
        logger.addHandler(handler)
        _loggers[name] = logger
    return _loggers[name]
