"""
Logging setup: console output with colored levels.
Every module logs through logging.getLogger(__name__); this only wires the handler.
"""

import logging
import logging.config

from nps_dashboard.config import LOG_LEVEL

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "colored": {
            "()": "colorlog.ColoredFormatter",
            "format": "%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "log_colors": {
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "colored",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "nps_dashboard": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

_configured = False


def setup_logging() -> None:
    """Install the logging config once per process (Streamlit reruns the script a lot)."""
    global _configured
    if _configured:
        return
    logging.config.dictConfig(LOGGING_CONFIG)
    _configured = True
    logging.getLogger(__name__).debug("Logging configured at level %s", LOG_LEVEL)
