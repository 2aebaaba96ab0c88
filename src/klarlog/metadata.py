"""
Structured metadata attached to log records.

``LogMetadata`` is an immutable mapping from string keys to a small set of
value types (str, int, float, bool, sequences and string-keyed mappings of
those). It renders either as human-readable ``key=value`` pairs or as a JSON
object; both renderings sort keys so output is deterministic regardless of
insertion order.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from types import MappingProxyType
from typing import Any, Iterator, Protocol, Union, runtime_checkable

import orjson

MetadataValue = Union[str, int, float, bool, tuple["MetadataValue", ...], Mapping[str, "MetadataValue"]]

_EMPTY_JSON = "{}"


@runtime_checkable
class MetadataConvertible(Protocol):
    """Objects that know how to express themselves as a metadata value."""

    def metadata_value(self) -> Any: ...


def to_metadata_value(value: Any) -> MetadataValue:
    """Normalise an arbitrary Python value into a ``MetadataValue``.

    Unsupported values degrade to their ``str()`` form so building metadata
    never fails at the log call site.
    """
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return value
    if isinstance(value, (str, int, float)):
        return value
    if isinstance(value, MetadataConvertible):
        return to_metadata_value(value.metadata_value())
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): to_metadata_value(v) for k, v in value.items()})
    if isinstance(value, (list, tuple, Set)):
        return tuple(to_metadata_value(item) for item in value)
    return str(value)


def _render(value: MetadataValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, Mapping):
        items = ", ".join(f"{key}: {_render(value[key])}" for key in sorted(value))
        return "{" + items + "}"
    items = ", ".join(_render(item) for item in value)
    return "[" + items + "]"


def _to_plain(value: MetadataValue) -> Any:
    if isinstance(value, Mapping):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_to_plain(item) for item in value]
    return value


class LogMetadata(Mapping[str, MetadataValue]):
    """Immutable key/value metadata for a single log call.

    Build it from a mapping, keyword arguments, or both (keywords win)::

        LogMetadata({"user_id": 42}, retry=True)
    """

    __slots__ = ("_storage",)

    def __init__(self, values: Mapping[str, Any] | None = None, /, **fields: Any) -> None:
        storage: dict[str, MetadataValue] = {}
        for source in (values or {}, fields):
            for key, value in source.items():
                storage[str(key)] = to_metadata_value(value)
        self._storage = MappingProxyType(storage)

    @classmethod
    def coerce(cls, value: LogMetadata | Mapping[str, Any] | None) -> LogMetadata | None:
        """Accept ``None``, an existing ``LogMetadata`` or a plain mapping."""
        if value is None or isinstance(value, LogMetadata):
            return value
        return cls(value)

    def __getitem__(self, key: str) -> MetadataValue:
        return self._storage[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LogMetadata):
            return self.as_dict() == other.as_dict()
        if isinstance(other, Mapping):
            return self.as_dict() == LogMetadata(other).as_dict()
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"LogMetadata({self.as_dict()!r})"

    @property
    def is_empty(self) -> bool:
        return not self._storage

    def merged(self, values: Mapping[str, Any]) -> LogMetadata:
        """Return a copy with ``values`` layered on top."""
        return LogMetadata({**self._storage, **values})

    def as_dict(self) -> dict[str, Any]:
        """Plain nested ``dict``/``list`` form, suitable for JSON encoders."""
        return {key: _to_plain(value) for key, value in self._storage.items()}

    def formatted(self) -> str:
        """Render as space-joined ``key=value`` pairs with keys sorted."""
        return " ".join(f"{key}={_render(self._storage[key])}" for key in sorted(self._storage))

    def to_json(self) -> str:
        """Render as a compact JSON object with sorted keys, or ``"{}"`` on failure."""
        try:
            return orjson.dumps(self.as_dict(), option=orjson.OPT_SORT_KEYS).decode()
        except (orjson.JSONEncodeError, TypeError):
            return _EMPTY_JSON
