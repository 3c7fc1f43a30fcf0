from __future__ import annotations

import sys
from typing import NamedTuple

__all__ = ["RenderedQuery", "Template", "render"]

if sys.version_info >= (3, 14):
    from string.templatelib import Template
else:  # pragma: no cover

    class Template:
        pass


class RenderedQuery(NamedTuple):
    sql: str
    params: tuple[object, ...]


def _placeholder(paramstyle: str, position: int) -> str:
    match paramstyle:
        case "qmark":
            return "?"
        case "format" | "pyformat":
            return "%s"
        case "numeric":
            return f":{position}"
    msg = f"t-string queries do not support paramstyle {paramstyle!r}"
    raise ValueError(msg)


def render(template: Template, paramstyle: str) -> RenderedQuery:
    parts: list[str] = []
    params: list[object] = []
    strings = template.strings  # type: ignore[attr-defined]
    interpolations = template.interpolations  # type: ignore[attr-defined]
    # drivers only parse "%" escapes when parameters are bound
    escape_percent = bool(interpolations) and paramstyle in ("format", "pyformat")
    for i, s in enumerate(strings):
        parts.append(s.replace("%", "%%") if escape_percent else s)
        if i < len(interpolations):
            parts.append(_placeholder(paramstyle, i + 1))
            params.append(interpolations[i].value)
    return RenderedQuery("".join(parts), tuple(params))
