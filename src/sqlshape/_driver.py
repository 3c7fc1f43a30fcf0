from __future__ import annotations

import sqlite3
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import psycopg
import sqlalchemy
from psycopg import sql as pgsql
from sqlalchemy.dialects import sqlite
from sqlalchemy.engine import Dialect
from sqlalchemy.engine.default import DefaultDialect


@dataclass(frozen=True)
class Driver:
    name: str
    errors: tuple[type[BaseException], ...]
    paramstyle: str
    literal: Callable[[Any, object], str]
    identifier: Callable[[Any, str], str]


def _dialect_literal(dialect: Dialect) -> Callable[[Any, object], str]:
    def render(conn: Any, value: object) -> str:  # noqa: ARG001
        clause = sqlalchemy.null() if value is None else sqlalchemy.literal(value)
        return str(
            clause.compile(dialect=dialect, compile_kwargs={"literal_binds": True})
        )

    return render


def _dialect_identifier(dialect: Dialect) -> Callable[[Any, str], str]:
    def render(conn: Any, name: str) -> str:  # noqa: ARG001
        return dialect.identifier_preparer.quote_identifier(name)

    return render


def _psycopg_literal(conn: psycopg.Connection, value: object) -> str:
    return pgsql.Literal(value).as_string(conn)


def _psycopg_identifier(conn: psycopg.Connection, name: str) -> str:
    return pgsql.Identifier(name).as_string(conn)


_SQLITE_DIALECT = sqlite.dialect()
_DEFAULT_DIALECT = DefaultDialect()

DRIVERS: dict[type, Driver] = {
    sqlite3.Connection: Driver(
        name="sqlite3",
        errors=(sqlite3.Error,),
        paramstyle=sqlite3.paramstyle,
        literal=_dialect_literal(_SQLITE_DIALECT),
        identifier=_dialect_identifier(_SQLITE_DIALECT),
    ),
    psycopg.Connection: Driver(
        name="psycopg",
        errors=(psycopg.Error,),
        paramstyle=psycopg.paramstyle,
        literal=_psycopg_literal,
        identifier=_psycopg_identifier,
    ),
}


def _module_attr(conn: object, name: str) -> Any:
    # Walk "pkg.sub.mod" -> "pkg.sub" -> "pkg" looking for a DB-API global.
    module = type(conn).__module__
    while module:
        value = getattr(sys.modules.get(module), name, None)
        if value is not None:
            return value
        module = module.rpartition(".")[0]
    return None


def _generic_driver(conn: object) -> Driver:
    error = getattr(conn, "Error", None) or _module_attr(conn, "Error")
    return Driver(
        name=type(conn).__module__.partition(".")[0],
        errors=(error,) if isinstance(error, type) else (Exception,),
        paramstyle=_module_attr(conn, "paramstyle") or "qmark",
        literal=_dialect_literal(_DEFAULT_DIALECT),
        identifier=_dialect_identifier(_DEFAULT_DIALECT),
    )


def driver_for(conn: object) -> Driver:
    for conn_type, driver in DRIVERS.items():
        if isinstance(conn, conn_type):
            return driver
    return _generic_driver(conn)
