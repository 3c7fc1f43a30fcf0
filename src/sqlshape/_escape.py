from __future__ import annotations

from enum import Enum

from ._dbapi import DBAPIConnection
from ._driver import driver_for


class ParamType(str, Enum):
    STR = "str"
    INT = "int"
    BOOL = "bool"
    NULL = "null"


_COERCE = {
    ParamType.STR: str,
    ParamType.INT: int,
    ParamType.BOOL: bool,
}


def escape(
    conn: DBAPIConnection,
    value: object,
    type_hint: ParamType = ParamType.STR,
) -> str:
    """Render ``value`` as a SQL literal for ``conn``'s dialect.

    Only for SQL that cannot take bound parameters. ``None`` and
    ``ParamType.NULL`` render ``NULL``.
    """
    driver = driver_for(conn)
    if value is None or type_hint is ParamType.NULL:
        return driver.literal(conn, None)
    return driver.literal(conn, _COERCE[type_hint](value))


def quote_identifier(conn: DBAPIConnection, name: str) -> str:
    return driver_for(conn).identifier(conn, name)
