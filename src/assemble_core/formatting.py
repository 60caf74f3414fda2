from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

ENTRY_SEPARATOR = ",\n"


def _render(value: object) -> str:
    if value is None:
        return "null"
    return str(value)


def join_values(values: Iterable[Any] | None, delimiter: str) -> str:
    """Join ``values`` with ``delimiter``, rendering ``None`` as ``"null"``."""
    if values is None:
        return "null"
    return delimiter.join(_render(value) for value in values)


def to_indented_string(values: Iterable[Any] | Mapping[Any, Any] | None) -> str:
    """Render one entry per line.

    Mappings render each entry as ``key=value``. ``None`` renders as
    ``"null"`` and an empty collection as ``""``.
    """
    if values is None:
        return "null"
    if isinstance(values, Mapping):
        entries = [f"{_render(key)}={_render(value)}" for key, value in values.items()]
        return ENTRY_SEPARATOR.join(entries)
    return join_values(values, ENTRY_SEPARATOR)


def name_id(obj: object) -> str:
    if obj is None:
        return "null"
    cls = type(obj)
    return f"{cls.__module__}.{cls.__qualname__}@{id(obj):x}"


def simple_name_id(obj: object) -> str:
    if obj is None:
        return "null"
    return f"{type(obj).__name__}@{id(obj):x}"
