"""Logging setup.

Call ``setup_logging()`` once at startup. Root and SQLAlchemy levels come
from settings so SQL echo can be silenced without touching app loggers.
"""
import logging
import sys

from conduit.config import settings

_SQL_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite")


def _parse_level(raw: str) -> int:
    numeric = getattr(logging, raw.upper(), None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def setup_logging() -> None:
    root = logging.getLogger()
    root.setLevel(_parse_level(settings.LOG_LEVEL))

    # uvicorn installs its own handlers; scripts and tests may not.
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
        root.addHandler(handler)

    sql_level = _parse_level(settings.LOG_LEVEL_SQL)
    for name in _SQL_LOGGERS:
        logging.getLogger(name).setLevel(sql_level)

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s sql=%s", settings.LOG_LEVEL, settings.LOG_LEVEL_SQL
    )
