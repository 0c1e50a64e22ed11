"""Process-wide logging setup for the API and its CLI entry point.

Everything goes to stdout as one line per record, e.g.
``2026-03-02 10:00:00 INFO lumbertrack.application.use_cases.pack.partial_finish_pack: Pack P-1 split``.
"""

import logging
import logging.config

QUIET_LOGGERS = ("uvicorn.access", "psycopg.pool")


def configure_logging(level: str = "INFO") -> None:
    """Route all records to stdout at ``level``; unknown names fall back to INFO."""
    name = level.upper()
    known = isinstance(logging.getLevelName(name), int)
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "line": {
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "line",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": name if known else "INFO", "handlers": ["stdout"]},
            "loggers": {quiet: {"level": "WARNING"} for quiet in QUIET_LOGGERS},
        }
    )
    if not known:
        logging.getLogger(__name__).warning("Unknown log level %r, using INFO", level)
