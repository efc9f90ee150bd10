"""Small standalone helpers: identity, repetition, id generation, escaping, tracing."""

from __future__ import annotations

import html
import inspect
import logging
import numbers
from typing import Callable

from .errors import InvalidArgumentError, require_callable

logger = logging.getLogger(__name__)


def identity(value):
    return value


def times(count: int, func: Callable[[int], object]) -> list[object]:
    """Call ``func(index)`` ``count`` times and collect the results.

    A negative count runs nothing.
    """
    if isinstance(count, bool) or not isinstance(count, numbers.Integral):
        raise InvalidArgumentError(f"times requires an integer count, got {count!r}")
    require_callable(func, where="times")
    return [func(index) for index in range(int(count))]


class IdGenerator:
    """Per-prefix counters handing out increasing ids starting at 1."""

    def __init__(self) -> None:
        self._counters: dict[str | None, int] = {}

    def __call__(self, prefix: str | None = None) -> int | str:
        current = self._counters.get(prefix, 0) + 1
        self._counters[prefix] = current
        if prefix is None:
            return current
        return f"{prefix}{current}"


_DEFAULT_IDS = IdGenerator()


def unique_id(prefix: str | None = None) -> int | str:
    return _DEFAULT_IDS(prefix)


def escape(text: str) -> str:
    return html.escape(str(text), quote=True)


def beacon(label: str = "BEACON") -> str:
    """Log the caller's ``file:line`` with ``label`` at DEBUG and return the location."""
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        if caller is None:
            location = "<unknown>:0"
        else:
            location = f"{caller.f_code.co_filename}:{caller.f_lineno}"
    finally:
        del frame, caller
    logger.debug("%s ^%s^", location, label)
    return location
