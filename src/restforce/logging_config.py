from __future__ import annotations

import logging
from typing import Optional

LOGGER_NAME = "restforce"

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"


def configure_logging(
    level: Optional[int] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """Opt-in console logging for the ``restforce`` logger only.

    The root logger is never touched.  Calling this again adjusts the level
    and reuses the handler installed the first time, unless a new ``handler``
    is given, which replaces it.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level if level is not None else logging.WARNING)

    installed = [h for h in logger.handlers if getattr(h, "_restforce_handler", False)]
    if handler is None and installed:
        return logger

    for h in installed:
        logger.removeHandler(h)

    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FMT, _DEFAULT_DATEFMT))
    handler._restforce_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
