"""Collection value model: the sequence/mapping variant decided once per traversal."""

from __future__ import annotations

import dataclasses
import numbers
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

import jax
import jax.numpy as jnp

from .errors import InvalidArgumentError


class CollectionKind(str, Enum):
    SEQUENCE = "sequence"
    MAPPING = "mapping"


@dataclass(frozen=True)
class CollectionInfo:
    kind: CollectionKind
    size: int
    source_type: str


_SCALAR_TYPES = (bool, numbers.Number, str, bytes, bytearray)


def is_array(value: object) -> bool:
    return isinstance(value, jax.Array)


def loose_equal(left: object, right: object) -> bool:
    """``==`` that also compares jax arrays whole, by shape and then elements.

    Lists and tuples are compared item by item so they can hold arrays, and a
    list matches an array row of the same length and values.
    """
    if is_array(right) and not is_array(left):
        left, right = right, left
    if not is_array(left):
        if (isinstance(left, list) and isinstance(right, list)) or (isinstance(left, tuple) and isinstance(right, tuple)):
            return len(left) == len(right) and all(loose_equal(a, b) for a, b in zip(left, right))
        return bool(left == right)
    if isinstance(right, (list, tuple)):
        if left.ndim == 0 or len(left) != len(right):
            return False
        return all(loose_equal(row, item) for row, item in zip(left, right))
    if not (is_array(right) or isinstance(right, numbers.Number)):
        return False
    if jnp.shape(left) != jnp.shape(right):
        return False
    return bool(jnp.array_equal(left, right))


def is_structured(value: object) -> bool:
    """Return True for values that can stand in as a call receiver.

    ``None``, numbers, booleans, text and 0-d arrays are primitives; any other
    object is structured.
    """
    if value is None or isinstance(value, _SCALAR_TYPES):
        return False
    if is_array(value) and value.ndim == 0:
        return False
    return True


def _public_fields(value: object) -> dict[str, object]:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        names = [field.name for field in dataclasses.fields(value)]
        return {name: getattr(value, name) for name in names if not name.startswith("_")}
    return {name: item for name, item in vars(value).items() if not name.startswith("_")}


def _classify(value: object) -> CollectionKind | None:
    if value is None or isinstance(value, _SCALAR_TYPES):
        return None
    if is_array(value):
        return CollectionKind.SEQUENCE if value.ndim >= 1 else None
    if isinstance(value, Mapping):
        return CollectionKind.MAPPING
    if isinstance(value, (Sequence, Iterable)):
        return CollectionKind.SEQUENCE
    if isinstance(value, type) or callable(value):
        return None
    if dataclasses.is_dataclass(value) or hasattr(value, "__dict__"):
        return CollectionKind.MAPPING
    return None


def is_collection(value: object) -> bool:
    return _classify(value) is not None


@dataclass(frozen=True)
class Collection:
    """Uniform ``(key, value)`` view over one input collection."""

    kind: CollectionKind
    keys: tuple[object, ...]
    values: tuple[object, ...]
    source: object

    def __len__(self) -> int:
        return len(self.values)

    def items(self):
        return zip(self.keys, self.values)

    def reversed_items(self):
        return zip(reversed(self.keys), reversed(self.values))

    @property
    def not_found(self) -> int | None:
        return -1 if self.kind is CollectionKind.SEQUENCE else None

    def rebuild(self, values: list[object]) -> object:
        """Pack per-element results back into the shape of the source."""
        if len(values) != len(self.keys):
            raise InvalidArgumentError(
                f"rebuild expects {len(self.keys)} values, got {len(values)}"
            )
        if self.kind is CollectionKind.MAPPING:
            return dict(zip(self.keys, values))
        if isinstance(self.source, tuple):
            return tuple(values)
        if is_array(self.source):
            return _pack_array(values, template=self.source)
        return list(values)


def _pack_array(items: list[object], *, template) -> object:
    if not items:
        return jnp.asarray([], dtype=template.dtype)

    if all(is_array(item) or isinstance(item, numbers.Number) for item in items):
        arrays = [jnp.asarray(item) for item in items]
        first_shape = arrays[0].shape
        if all(arr.shape == first_shape for arr in arrays):
            return jnp.stack(arrays, axis=0)
    return list(items)


def as_collection(value: object, *, where: str = "collection") -> Collection:
    kind = _classify(value)
    if kind is None:
        raise InvalidArgumentError(
            f"{where} expects a sequence, mapping or object, got {type(value).__name__}"
        )

    if kind is CollectionKind.MAPPING:
        data = value if isinstance(value, Mapping) else _public_fields(value)
        return Collection(kind=kind, keys=tuple(data.keys()), values=tuple(data.values()), source=value)

    if is_array(value):
        items = tuple(value[i] for i in range(value.shape[0]))
    else:
        items = tuple(value)
    return Collection(kind=kind, keys=tuple(range(len(items))), values=items, source=value)


def collection_info(value: object) -> CollectionInfo:
    collection = as_collection(value, where="collection_info")
    return CollectionInfo(kind=collection.kind, size=len(collection), source_type=type(value).__name__)
