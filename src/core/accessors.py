"""Field access that works on pydantic models, plain objects and raw dicts.

Records reach the pipeline either as validated models or as JSON dicts
straight from the API client. Missing fields never raise.
"""

from collections.abc import Callable, Mapping
from typing import Any

FieldGetter = Callable[[Any], Any]


def read_field(record: Any, name: str) -> Any:
    """Return ``record[name]`` or ``record.name``; None when absent."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def read_text(record: Any, name: str) -> str:
    """Return a field as text; None and missing fields become ''."""
    value = read_field(record, name)
    if value is None:
        return ""
    return str(value)


def field_getter(name: str) -> FieldGetter:
    """Build a key-extraction function for a named field."""

    def _get(record: Any) -> Any:
        return read_field(record, name)

    return _get
