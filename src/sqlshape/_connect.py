from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse

import psycopg

from ._config import ConnectionConfig
from ._dbapi import DBAPIConnection
from ._errors import DatabaseConnectionError

logger = logging.getLogger("sqlshape")


def _driver_kwargs(config: ConnectionConfig, defaults: dict[str, Any]) -> dict[str, Any]:
    if not config.apply_defaults:
        return dict(config.options)
    return {**defaults, **config.options}


def _open_sqlite(config: ConnectionConfig) -> sqlite3.Connection:
    # sqlite:// and sqlite:///:memory: are in-memory, sqlite:////abs/path is absolute
    database = urlparse(config.target).path[1:] or ":memory:"
    kwargs = _driver_kwargs(config, {"isolation_level": None})
    try:
        return sqlite3.connect(database, **kwargs)
    except sqlite3.Error as err:
        raise DatabaseConnectionError(config.redacted_target, str(err)) from err


def _open_postgresql(config: ConnectionConfig) -> psycopg.Connection:
    parsed = urlparse(config.target)
    conninfo = parsed._replace(scheme="postgresql").geturl()
    kwargs = _driver_kwargs(config, {"autocommit": True})
    if config.username is not None:
        kwargs["user"] = config.username
    if config.password is not None:
        kwargs["password"] = config.password
    try:
        return psycopg.connect(conninfo, **kwargs)
    except psycopg.Error as err:
        raise DatabaseConnectionError(config.redacted_target, str(err)) from err


_OPENERS: dict[str, Callable[[ConnectionConfig], DBAPIConnection]] = {
    "sqlite": _open_sqlite,
    "postgresql": _open_postgresql,
    "postgres": _open_postgresql,
    "postgresql+psycopg": _open_postgresql,
}


def open_connection(config: ConnectionConfig) -> DBAPIConnection:
    opener = _OPENERS.get(config.scheme)
    if opener is None:
        raise DatabaseConnectionError(
            config.redacted_target,
            f"unsupported scheme {config.scheme!r}",
        )
    conn = opener(config)
    logger.info("connected: %s", config.redacted_target)
    return conn
