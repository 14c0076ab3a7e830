"""Debug logging switch for the SDK."""

import logging
import sys

PACKAGE_LOGGER = "jixi_sdk"
DEBUG_FORMAT = "[jixi-sdk] %(levelname)s %(name)s: %(message)s"


def enable_debug_logging() -> logging.Handler:
    """Send SDK log records at DEBUG and above to stderr.

    Idempotent: repeated calls reuse the handler installed by the first.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers:
        if getattr(handler, "_jixi_debug", False):
            return handler

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(DEBUG_FORMAT))
    handler._jixi_debug = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return handler
