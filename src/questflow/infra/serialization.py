from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from types import UnionType
from typing import Any, Tuple, Union, cast, get_args, get_origin, get_type_hints
from typing import Iterable as TypingIterable

# ---------- Encoding (Python -> JSON-friendly) ----------


def to_document(x: Any) -> Any:
    # Enums -> their .value so json can encode them
    if isinstance(x, Enum):
        return x.value

    # datetime -> ISO-8601 in UTC
    if isinstance(x, datetime):
        if x.tzinfo is None:
            x = x.replace(tzinfo=timezone.utc)
        return x.astimezone(timezone.utc).isoformat()

    # dataclasses -> dict (recurse)
    if is_dataclass(x) and not isinstance(x, type):
        return {f.name: to_document(getattr(x, f.name)) for f in fields(x)}

    # mappings / sequences -> recurse
    if isinstance(x, Mapping):
        items: Iterable[Tuple[Any, Any]] = cast(Iterable[Tuple[Any, Any]], x.items())
        return {to_document(k): to_document(v) for k, v in items}

    if isinstance(x, (frozenset, set)):
        return sorted(to_document(v) for v in x)

    if isinstance(x, (list, tuple)):
        seq: Iterable[Any] = cast(Iterable[Any], x)
        return [to_document(v) for v in seq]

    # everything else: pass through (int, float, str, bool, None)
    return x


# ---------- Decoding (JSON -> Python/dataclasses) ----------


def from_document(cls: type, doc: Any) -> Any:
    """
    Reconstruct a dataclass instance of type `cls` from a plain dict `doc`.
    Ignores keys that are not fields of `cls`.
    """
    if doc is None:
        return None

    if is_dataclass(cls):
        if not isinstance(doc, Mapping):
            raise TypeError(f"Expected an object for {cls.__name__}, got {type(doc).__name__}")
        kwargs = {}
        type_hints = get_type_hints(cls)
        for f in fields(cls):
            if f.name not in doc:
                continue
            expected_type = type_hints.get(f.name, f.type)
            kwargs[f.name] = _from_document_value(expected_type, doc[f.name])
        return cls(**kwargs)

    # Fallback: if a bare type was passed (not a dataclass), just coerce value
    return _from_document_value(cls, doc)


def _from_document_value(expected_type: Any, value: Any) -> Any:
    if value is None:
        return None

    # Handle typing.Optional[...] / Union[..., None]
    origin = get_origin(expected_type)
    args = get_args(expected_type)
    if origin in (Union, UnionType):
        # pick the first non-None type
        inner = next((a for a in args if a is not type(None)), Any)
        return _from_document_value(inner, value)

    # Mappings like Dict[K, V] / Mapping[K, V]
    if origin in (dict, Mapping):
        key_type, value_type = args if len(args) == 2 else (Any, Any)
        raw_map = cast(Mapping[Any, Any], value)
        return {
            _from_document_value(key_type, k): _from_document_value(value_type, v)
            for k, v in raw_map.items()
        }

    # Collections like List[T], Set[T], Tuple[T, ...]
    if origin in (list, set, frozenset, tuple):
        inner = args[0] if args else Any
        raw_iter: TypingIterable[Any] = cast(TypingIterable[Any], value or [])
        seq = [_from_document_value(inner, v) for v in raw_iter]
        if origin is list:
            return list(seq)
        if origin is set:
            return set(seq)
        if origin is frozenset:
            return frozenset(seq)
        return tuple(seq)

    # Recurse into nested dataclasses
    if isinstance(expected_type, type) and is_dataclass(expected_type):
        return from_document(expected_type, value)

    # Enums: reconstruct from their value
    if isinstance(expected_type, type) and issubclass_safe(expected_type, Enum):
        return expected_type(value)

    # Datetime: stored as ISO-8601; return UTC-aware
    if expected_type is datetime:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        else:
            parsed = datetime.fromisoformat(str(value))
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    if expected_type is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)

    # Primitive or already-correct type
    return value


def issubclass_safe(t: Any, base: type) -> bool:
    try:
        return issubclass(t, base)
    except TypeError:
        return False


__all__ = ["to_document", "from_document"]
