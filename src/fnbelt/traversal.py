"""Traversal engine: each/map/reduce/find and friends over sequences and mappings.

Every operation classifies its input once through :func:`as_collection` and
then walks ``(key, value)`` pairs in order. Iterators are invoked through
:func:`fnbelt.invocation.call`, so a structured ``context`` becomes their
receiver. Iterator failures propagate immediately and abort the traversal.
"""

from __future__ import annotations

import operator
import os
from typing import Callable, Final

import jax.numpy as jnp

from .collection import Collection, CollectionKind, as_collection, is_array, loose_equal
from .errors import InvalidArgumentError, require_callable
from .invocation import call
from .objects import get, has
from .utility import identity

_USE_ARRAY_FAST_PATH: Final[bool] = os.environ.get("FNBELT_DISABLE_ARRAY_FAST_PATH", "0") != "1"

_NO_FAST_PATH: Final = object()
_MISSING: Final = object()


def _prepare(collection, iterator, *, where: str) -> Collection:
    require_callable(iterator, where=where)
    return as_collection(collection, where=where)


def _predicate(iterator, context, *, where: str) -> Callable[[object], object]:
    if iterator is None:
        return identity
    require_callable(iterator, where=where)

    def predicate(value):
        return call(iterator, context, value)

    return predicate


def each(collection, iterator, context=None) -> None:
    entries = _prepare(collection, iterator, where="each")
    for key, value in entries.items():
        call(iterator, context, value, key)


def map(collection, iterator, context=None):
    """Return a new collection of the same shape holding ``iterator(value, key)``."""
    entries = _prepare(collection, iterator, where="map")
    results = [call(iterator, context, value, key) for key, value in entries.items()]
    return entries.rebuild(results)


def reduce(collection, iterator, memo, context=None):
    entries = _prepare(collection, iterator, where="reduce")
    for value in entries.values:
        memo = call(iterator, context, memo, value)
    return memo


def reduce_right(collection, iterator, memo, context=None):
    entries = _prepare(collection, iterator, where="reduce_right")
    for value in reversed(entries.values):
        memo = call(iterator, context, memo, value)
    return memo


def find(collection, iterator, context=None):
    """First value for which ``iterator(value)`` is truthy, else ``None``."""
    entries = _prepare(collection, iterator, where="find")
    for value in entries.values:
        if call(iterator, context, value):
            return value
    return None


def filter(collection, iterator, context=None) -> list[object]:
    entries = _prepare(collection, iterator, where="filter")
    return [value for value in entries.values if call(iterator, context, value)]


def reject(collection, iterator, context=None) -> list[object]:
    entries = _prepare(collection, iterator, where="reject")
    return [value for value in entries.values if not call(iterator, context, value)]


def all(collection, iterator=None, context=None) -> bool:
    entries = as_collection(collection, where="all")
    predicate = _predicate(iterator, context, where="all")
    for value in entries.values:
        if not predicate(value):
            return False
    return True


def any(collection, iterator=None, context=None) -> bool:
    entries = as_collection(collection, where="any")
    predicate = _predicate(iterator, context, where="any")
    for value in entries.values:
        if predicate(value):
            return True
    return False


def contains(collection, value) -> bool:
    entries = as_collection(collection, where="contains")
    for item in entries.values:
        if loose_equal(item, value):
            return True
    return False


def invoke(collection, method_name: str) -> None:
    """Call ``item.<method_name>()`` on every value, in order."""
    if not isinstance(method_name, str):
        raise InvalidArgumentError(f"invoke requires a method name, got {type(method_name).__name__}")
    entries = as_collection(collection, where="invoke")
    for item in entries.values:
        call(getattr(item, method_name), None)


def pluck(collection, key) -> list[object]:
    entries = as_collection(collection, where="pluck")
    return [get(item, key) for item in entries.values if has(item, key)]


def _fast_array_extremum(entries: Collection, iterator, reducer):
    if not _USE_ARRAY_FAST_PATH or iterator is not None:
        return _NO_FAST_PATH
    source = entries.source
    if not is_array(source) or source.ndim != 1 or source.size == 0:
        return _NO_FAST_PATH
    if not jnp.issubdtype(source.dtype, jnp.number):
        return _NO_FAST_PATH
    # jnp.max/jnp.min propagate NaN; the comparison loop does not.
    if jnp.issubdtype(source.dtype, jnp.inexact) and bool(jnp.isnan(source).any()):
        return _NO_FAST_PATH
    return reducer(source)


def _extremum(entries: Collection, predicate, better):
    best = _MISSING
    for value in entries.values:
        candidate = predicate(value)
        if best is _MISSING or better(candidate, best):
            best = candidate
    if best is _MISSING:
        return None
    return best


def max(collection, iterator=None, context=None):
    """Largest ``iterator(value)``; ``None`` for an empty collection."""
    entries = as_collection(collection, where="max")
    fast = _fast_array_extremum(entries, iterator, jnp.max)
    if fast is not _NO_FAST_PATH:
        return fast
    return _extremum(entries, _predicate(iterator, context, where="max"), operator.gt)


def min(collection, iterator=None, context=None):
    """Smallest ``iterator(value)``; ``None`` for an empty collection."""
    entries = as_collection(collection, where="min")
    fast = _fast_array_extremum(entries, iterator, jnp.min)
    if fast is not _NO_FAST_PATH:
        return fast
    return _extremum(entries, _predicate(iterator, context, where="min"), operator.lt)


def index_of(collection, value):
    """Key of the first element equal to ``value``.

    Not found is ``-1`` for sequences and ``None`` for mappings.
    """
    entries = as_collection(collection, where="index_of")
    for key, item in entries.items():
        if loose_equal(item, value):
            return key
    return entries.not_found


def last_index_of(collection, value):
    entries = as_collection(collection, where="last_index_of")
    for key, item in entries.reversed_items():
        if loose_equal(item, value):
            return key
    return entries.not_found


def sort_by(collection, iterator, context=None) -> list[object]:
    """Values stably sorted by ``iterator(value)``."""
    entries = _prepare(collection, iterator, where="sort_by")
    ranks = [call(iterator, context, value) for value in entries.values]
    order = sorted(range(len(ranks)), key=ranks.__getitem__)
    return [entries.values[index] for index in order]


def group_by(collection, iterator, context=None) -> dict[object, list[object]]:
    entries = _prepare(collection, iterator, where="group_by")
    groups: dict[object, list[object]] = {}
    for value in entries.values:
        groups.setdefault(call(iterator, context, value), []).append(value)
    return groups


def sorted_index(sequence, value, iterator=None, context=None) -> int:
    """Leftmost position where ``value`` keeps ``sequence`` sorted."""
    entries = as_collection(sequence, where="sorted_index")
    if entries.kind is not CollectionKind.SEQUENCE:
        raise InvalidArgumentError("sorted_index requires a sequence")
    rank = _predicate(iterator, context, where="sorted_index")
    target = rank(value)
    lo, hi = 0, len(entries)
    while lo < hi:
        mid = (lo + hi) // 2
        if rank(entries.values[mid]) < target:
            lo = mid + 1
        else:
            hi = mid
    return lo
