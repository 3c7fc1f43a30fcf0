"""Process-wide "active" Database for call sites that cannot be handed one.

Prefer passing a :class:`~sqlshape.Database` explicitly. This module keeps a
single reference: the most recently constructed (or activated) facade
replaces the previous one, and nothing here is locked, so only one thread
should construct or activate facades at a time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._errors import NotInitializedError

if TYPE_CHECKING:
    from ._database import Database

_active: Database | None = None


def activate(database: Database) -> None:
    global _active  # noqa: PLW0603
    _active = database


def deactivate() -> None:
    global _active  # noqa: PLW0603
    _active = None


def active() -> Database | None:
    return _active


def current() -> Database:
    if _active is None:
        raise NotInitializedError
    return _active


class ActiveDatabase:
    """Forwards attribute access to :func:`current`.

    ``db.query_all(...)`` before any facade exists raises
    :class:`~sqlshape.NotInitializedError`.
    """

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return getattr(current(), name)

    def __repr__(self) -> str:
        return f"<ActiveDatabase {_active!r}>"


db = ActiveDatabase()
