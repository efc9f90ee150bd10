"""Reflection helpers over mappings and plain objects."""

from __future__ import annotations

import inspect
from collections.abc import Mapping

from .collection import CollectionKind, as_collection, is_array, is_collection
from .errors import InvalidArgumentError


def keys(obj) -> list[object]:
    return list(as_collection(obj, where="keys").keys)


def values(obj) -> list[object]:
    return list(as_collection(obj, where="values").values)


def functions(obj) -> list[str]:
    """Sorted public method names of ``obj`` (or of ``obj`` itself when it is a class)."""
    cls = obj if isinstance(obj, type) else type(obj)
    return [name for name, _member in inspect.getmembers(cls, inspect.isroutine) if not name.startswith("_")]


def _as_mapping(value, *, where: str) -> dict[object, object]:
    collection = as_collection(value, where=where)
    if collection.kind is not CollectionKind.MAPPING:
        raise InvalidArgumentError(f"{where} expects a mapping or object, got {type(value).__name__}")
    return dict(collection.items())


def extend(*mappings) -> dict[object, object]:
    """Merge mappings left to right; later keys win."""
    merged: dict[object, object] = {}
    for index, mapping in enumerate(mappings):
        merged.update(_as_mapping(mapping, where=f"extend argument {index}"))
    return merged


def pick(mapping, *names) -> dict[object, object]:
    data = _as_mapping(mapping, where="pick")
    return {key: value for key, value in data.items() if key in names}


def defaults(mapping, fallback) -> dict[object, object]:
    result = _as_mapping(mapping, where="defaults")
    for key, value in _as_mapping(fallback, where="defaults").items():
        if key not in result:
            result[key] = value
    return result


def has(obj, key) -> bool | None:
    """Whether ``key`` is present in ``obj``; ``None`` when ``obj`` has no keys at all."""
    if isinstance(obj, Mapping):
        return key in obj
    if not is_collection(obj):
        return None
    collection = as_collection(obj, where="has")
    if collection.kind is CollectionKind.SEQUENCE:
        return isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(collection)
    return key in collection.keys


def get(obj, key, default=None):
    if not has(obj, key):
        return default
    if isinstance(obj, Mapping):
        return obj[key]
    collection = as_collection(obj, where="get")
    if collection.kind is CollectionKind.SEQUENCE:
        return collection.values[key]
    return getattr(obj, key)


def result(mapping, key):
    """Value at ``key``, called first when it is callable; ``None`` when missing."""
    value = get(mapping, key)
    if callable(value):
        return value()
    return value


def is_empty(value) -> bool:
    if is_array(value):
        return value.size == 0
    return not value
