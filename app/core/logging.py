"""
Logging setup for the recipe search service.

Modules log through `logging.getLogger(__name__)` and prefix messages with
their component tag, e.g. "[CandidateRetriever] Vector search failed".
"""

import logging
import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once. Safe to call more than once."""
    global _configured
    if _configured:
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                }
            },
            "root": {"level": level.upper(), "handlers": ["console"]},
            # httpx logs every model call at INFO
            "loggers": {"httpx": {"level": "WARNING"}},
        }
    )
    _configured = True
