"""Sequence and set-algebra helpers built on the traversal engine."""

from __future__ import annotations

import itertools
import numbers

from .collection import as_collection, loose_equal
from .errors import InvalidArgumentError
from .traversal import contains, filter, reduce, reject


def _count(n, *, where: str) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 0:
        raise InvalidArgumentError(f"{where} requires a non-negative integer count, got {n!r}")
    return int(n)


def _sequence_values(seq, *, where: str) -> tuple[object, ...]:
    return as_collection(seq, where=where).values


def first(seq, n: int = 1):
    """First value (``None`` when empty), or a list of the first ``n`` values."""
    values = _sequence_values(seq, where="first")
    if n == 1:
        return values[0] if values else None
    return list(values[: _count(n, where="first")])


def last(seq, n: int = 1):
    values = _sequence_values(seq, where="last")
    if n == 1:
        return values[-1] if values else None
    count = _count(n, where="last")
    return list(values[len(values) - count :]) if count else []


def rest(seq, n: int = 1) -> list[object]:
    return list(_sequence_values(seq, where="rest")[_count(n, where="rest") :])


def initial(seq, n: int = 1) -> list[object]:
    values = _sequence_values(seq, where="initial")
    return list(values[: max(len(values) - _count(n, where="initial"), 0)])


def compact(seq) -> list[object]:
    return filter(seq, bool)


def flatten(seq) -> list[object]:
    """Flatten nested lists and tuples to any depth."""

    def step(memo, value):
        if isinstance(value, (list, tuple)):
            memo.extend(flatten(value))
        else:
            memo.append(value)
        return memo

    return reduce(seq, step, [])


def _strictly_contains(pool, value) -> bool:
    for item in pool:
        if item is value or (type(item) is type(value) and loose_equal(item, value)):
            return True
    return False


def without(seq, *values) -> list[object]:
    """Drop every value strictly equal (same type and ``==``) to one of ``values``."""
    return reject(seq, lambda item: _strictly_contains(values, item))


def with_values(seq, *values) -> list[object]:
    """Append each of ``values`` not already strictly present."""

    def step(memo, value):
        if not _strictly_contains(memo, value):
            memo.append(value)
        return memo

    return reduce(values, step, list(_sequence_values(seq, where="with_values")))


def uniq(seq) -> list[object]:
    """Distinct values in first-seen order."""

    def step(memo, value):
        if not contains(memo, value):
            memo.append(value)
        return memo

    return reduce(seq, step, [])


def union(*seqs) -> list[object]:
    return uniq(concat(*[list(_sequence_values(seq, where="union")) for seq in seqs]))


def intersection(*seqs) -> list[object]:
    """Values of the first sequence present in every other one, duplicates kept."""
    if not seqs:
        return []
    head, *others = seqs
    return filter(head, lambda value: all(contains(other, value) for other in others))


def zip(*seqs) -> list[list[object]]:
    """Group values by position, padding shorter sequences with ``None``."""
    columns = [_sequence_values(seq, where="zip") for seq in seqs]
    return [list(row) for row in itertools.zip_longest(*columns)]


def concat(*values) -> list[object]:
    """Splice list and tuple arguments; append anything else as a single value."""
    result: list[object] = []
    for value in values:
        if isinstance(value, (list, tuple)):
            result.extend(value)
        else:
            result.append(value)
    return result
