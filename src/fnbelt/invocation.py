"""Callable invocation with receiver rebinding, plus stateful combinators."""

from __future__ import annotations

import dataclasses
import hashlib
import logging
import numbers
import os
import types
from collections.abc import Mapping
from typing import Callable, Final

from .collection import is_array, is_structured
from .errors import InvalidArgumentError, require_callable
from .utility import identity

logger = logging.getLogger(__name__)

_MEMO_KEY_DIGEST: Final[str] = os.environ.get("FNBELT_MEMO_KEY_DIGEST", "sha256")


def bind(func: Callable, context: object) -> Callable:
    """Return ``func`` with its receiver fixed to ``context``.

    Plain functions become methods of ``context`` (their first parameter is
    the receiver). Bound methods are re-bound. Callables without a rebindable
    receiver, and any call with a primitive or missing context, come back
    unchanged.
    """
    require_callable(func, where="bind")
    if not is_structured(context):
        return func
    if isinstance(func, types.MethodType):
        return types.MethodType(func.__func__, context)
    if isinstance(func, types.FunctionType):
        return types.MethodType(func, context)
    return func


def call(func: Callable, context: object, *args, **kwargs):
    return bind(func, context)(*args, **kwargs)


def apply(func: Callable, context: object, args=(), kwargs: Mapping[str, object] | None = None):
    """Like :func:`call`, with positional arguments passed as one sequence."""
    return bind(func, context)(*tuple(args), **dict(kwargs or {}))


def _freeze_for_key(value: object, _active: dict[int, int] | None = None) -> object:
    if isinstance(value, (str, bytes, int, float, complex, bool, type(None))):
        return value
    if _active is None:
        _active = {}
    # A node already on the current path closes a cycle; key it by how far back it sits.
    if id(value) in _active:
        return ("ref", len(_active) - _active[id(value)])
    _active[id(value)] = len(_active)
    try:
        return _freeze_compound(value, _active)
    finally:
        del _active[id(value)]


def _freeze_compound(value: object, active: dict[int, int]) -> object:
    if isinstance(value, tuple):
        return ("tuple", tuple(_freeze_for_key(item, active) for item in value))
    if isinstance(value, list):
        return ("list", tuple(_freeze_for_key(item, active) for item in value))
    if isinstance(value, (set, frozenset)):
        return ("set", tuple(sorted((_freeze_for_key(item, active) for item in value), key=repr)))
    if isinstance(value, Mapping):
        items = ((_freeze_for_key(k, active), _freeze_for_key(v, active)) for k, v in value.items())
        return ("mapping", tuple(sorted(items, key=repr)))
    if is_array(value) or (hasattr(value, "shape") and hasattr(value, "dtype") and hasattr(value, "tolist")):
        shape = tuple(int(d) for d in value.shape)
        return ("array", shape, str(value.dtype), _freeze_for_key(value.tolist(), active))
    if callable(value):
        name = getattr(value, "__qualname__", type(value).__qualname__)
        return ("callable", name, id(value))
    if dataclasses.is_dataclass(value):
        fields = tuple((f.name, _freeze_for_key(getattr(value, f.name), active)) for f in dataclasses.fields(value))
        return ("dataclass", type(value).__qualname__, fields)
    if hasattr(value, "__dict__"):
        return ("object", type(value).__qualname__, _freeze_for_key(vars(value), active))
    return (type(value).__qualname__, repr(value))


def memo_key(args: tuple[object, ...], kwargs: Mapping[str, object] | None = None) -> str:
    """Digest of the value-based, order-sensitive form of an argument list."""
    frozen = (_freeze_for_key(tuple(args)), _freeze_for_key(dict(kwargs or {})))
    return hashlib.new(_MEMO_KEY_DIGEST, repr(frozen).encode("utf-8")).hexdigest()


class Memoized:
    """Caches ``func`` results by argument value. The cache is never evicted."""

    def __init__(self, func: Callable) -> None:
        require_callable(func, where="memoize")
        self.func = func
        self.__wrapped__ = func
        self._cache: dict[str, object] = {}
        self._stats: dict[str, int] = {"hits": 0, "misses": 0}

    def __call__(self, *args, **kwargs):
        key = memo_key(args, kwargs)
        if key in self._cache:
            self._stats["hits"] += 1
            return self._cache[key]

        self._stats["misses"] += 1
        logger.debug("memo miss for %s (cache size %d)", _callable_name(self.func), len(self._cache))
        result = apply(self.func, None, args, kwargs)
        self._cache[key] = result
        return result

    def cache_stats(self) -> dict[str, float | int]:
        hits = self._stats["hits"]
        misses = self._stats["misses"]
        total = hits + misses
        return {
            "hits": hits,
            "misses": misses,
            "size": len(self._cache),
            "hit_rate": float(hits / total) if total else 0.0,
        }

    def __repr__(self) -> str:
        return f"Memoized({_callable_name(self.func)})"


class Once:
    """Runs ``func()`` on the first call only; later calls return that result."""

    def __init__(self, func: Callable) -> None:
        require_callable(func, where="once")
        self.func = func
        self.called = False
        self.result = None

    def __call__(self, *_args, **_kwargs):
        if not self.called:
            # Marked before the call so a re-entrant call does not run func twice.
            self.called = True
            self.result = self.func()
        return self.result


class After:
    """Runs ``func()`` on exactly the ``count``-th call and caches its result."""

    def __init__(self, count: int, func: Callable) -> None:
        if isinstance(count, bool) or not isinstance(count, numbers.Integral) or count < 1:
            raise InvalidArgumentError(f"after requires a positive integer count, got {count!r}")
        require_callable(func, where="after")
        self.count = int(count)
        self.func = func
        self.calls = 0
        self.result = None

    def __call__(self, *_args, **_kwargs):
        self.calls += 1
        if self.calls == self.count:
            logger.debug("after(%d) reached for %s", self.count, _callable_name(self.func))
            self.result = self.func()
        return self.result


def memoize(func: Callable) -> Memoized:
    return Memoized(func)


def once(func: Callable) -> Once:
    return Once(func)


def after(count: int, func: Callable) -> After:
    return After(count, func)


def wrap(func: Callable, wrapper: Callable) -> Callable:
    """Return a callable that hands ``func`` (and any call arguments) to ``wrapper``."""
    require_callable(func, where="wrap")
    require_callable(wrapper, where="wrap")

    def wrapped(*args, **kwargs):
        return wrapper(func, *args, **kwargs)

    return wrapped


def compose(*funcs: Callable) -> Callable:
    """Thread one value through ``funcs`` from left to right."""
    for index, func in enumerate(funcs):
        require_callable(func, where=f"compose argument {index}")
    if not funcs:
        return identity

    def composed(value):
        for func in funcs:
            value = func(value)
        return value

    return composed


def _callable_name(func: object) -> str:
    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    if not isinstance(name, str):
        name = type(func).__name__
    return name
