from ._active import ActiveDatabase, activate, active, current, db, deactivate
from ._config import ConnectionConfig
from ._database import Database, connect
from ._errors import (
    ColumnOutOfRangeError,
    DatabaseConnectionError,
    ExecutionError,
    HydrationError,
    InvalidShapeError,
    NotInitializedError,
    SqlShapeError,
)
from ._escape import ParamType, escape, quote_identifier
from ._hydrate import FieldHydrator, Hydrator
from ._query import ColumnSelector, LegacyResult, Query

__all__ = [
    "ActiveDatabase",
    "ColumnOutOfRangeError",
    "ColumnSelector",
    "ConnectionConfig",
    "Database",
    "DatabaseConnectionError",
    "ExecutionError",
    "FieldHydrator",
    "HydrationError",
    "Hydrator",
    "InvalidShapeError",
    "LegacyResult",
    "NotInitializedError",
    "ParamType",
    "Query",
    "SqlShapeError",
    "activate",
    "active",
    "connect",
    "current",
    "db",
    "deactivate",
    "escape",
    "quote_identifier",
]
