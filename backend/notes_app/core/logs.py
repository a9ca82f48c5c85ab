"""
Logging setup for the notes services and the editing client.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Safe to call more than once (e.g. app factory called again in tests).
    """
    logger = logging.getLogger("notes_app")
    logger.setLevel(level.upper())

    if not any(getattr(h, "_notes_app", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._notes_app = True
        logger.addHandler(handler)

    return logger
