"""fnbelt public API."""

import logging

from .collection import Collection, CollectionInfo, CollectionKind, as_collection, collection_info, is_structured, loose_equal
from .errors import FnBeltError, InvalidArgumentError, NotCallableError
from .invocation import After, Memoized, Once, after, apply, bind, call, compose, memo_key, memoize, once, wrap
from .traversal import (
    all,
    any,
    contains,
    each,
    filter,
    find,
    group_by,
    index_of,
    invoke,
    last_index_of,
    map,
    max,
    min,
    pluck,
    reduce,
    reduce_right,
    reject,
    sort_by,
    sorted_index,
)
from .arrays import compact, concat, first, flatten, initial, intersection, last, rest, union, uniq, with_values, without, zip
from .objects import defaults, extend, functions, get, has, is_empty, keys, pick, result, values
from .utility import IdGenerator, beacon, escape, identity, times, unique_id

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "bind",
    "call",
    "apply",
    "memoize",
    "once",
    "after",
    "wrap",
    "compose",
    "memo_key",
    "Memoized",
    "Once",
    "After",
    "each",
    "map",
    "reduce",
    "reduce_right",
    "find",
    "filter",
    "reject",
    "all",
    "any",
    "contains",
    "invoke",
    "pluck",
    "max",
    "min",
    "index_of",
    "last_index_of",
    "sort_by",
    "group_by",
    "sorted_index",
    "first",
    "last",
    "rest",
    "initial",
    "compact",
    "flatten",
    "without",
    "with_values",
    "union",
    "intersection",
    "uniq",
    "zip",
    "concat",
    "keys",
    "values",
    "functions",
    "extend",
    "pick",
    "defaults",
    "has",
    "get",
    "result",
    "is_empty",
    "identity",
    "times",
    "unique_id",
    "IdGenerator",
    "escape",
    "beacon",
    "Collection",
    "CollectionInfo",
    "CollectionKind",
    "as_collection",
    "collection_info",
    "is_structured",
    "loose_equal",
    "FnBeltError",
    "InvalidArgumentError",
    "NotCallableError",
]
