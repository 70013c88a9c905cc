"""
Logger configuration module for SquadStats.

All application loggers live under the ``squadstats`` namespace
(``squadstats.match_events``, ``squadstats.stat_cache``, ...). Match, team and
player ids passed through ``extra=`` are emitted as JSON fields so event and
cache log lines can be filtered per match or per team.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from app.utils.config import settings

APP_LOGGER = "squadstats"
CONTEXT_FIELDS = ("match_id", "team_id", "player_id")


class JsonFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def format(self, record):
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "line": record.lineno,
            "environment": settings.ENVIRONMENT,
            "statCacheMode": settings.STAT_CACHE_MODE,
        }

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_data)


class ContextFormatter(logging.Formatter):
    """Readable debug format with the match/team/player context appended."""

    def format(self, record):
        line = super().format(record)
        context = " ".join(
            f"{field}={getattr(record, field)}"
            for field in CONTEXT_FIELDS
            if getattr(record, field, None) is not None
        )
        return f"{line} [{context}]" if context else line


def setup_logging():
    """Send ``squadstats.*`` records to stdout in the format the environment asks for."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    if settings.APP_DEBUG:
        console_handler.setFormatter(ContextFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    else:
        console_handler.setFormatter(JsonFormatter())
    root_logger.addHandler(console_handler)

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(level)
    return app_logger


# Create the application logger
logger = setup_logging()
