from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


class _Bag:
    def __init__(self) -> None:
        self.result = []


class _InvokeMe:
    def __init__(self) -> None:
        self.invoked = False

    def invoke(self, arg=True) -> None:
        self.invoked = arg


@unittest.skipUnless(JAX_AVAILABLE, "jax is required to import fnbelt")
class EachMapTests(unittest.TestCase):
    def test_each_passes_value_and_position(self) -> None:
        from fnbelt import each

        seen = []
        self.assertIsNone(each([1, 2], lambda value, index: seen.append(f"{value}-{index}")))
        self.assertEqual(seen, ["1-0", "2-1"])

    def test_each_on_empty_collection(self) -> None:
        from fnbelt import each

        seen = []
        each([], lambda value, index: seen.append(value))
        self.assertEqual(seen, [])

    def test_each_with_context(self) -> None:
        from fnbelt import each

        bag = _Bag()
        each([1, 2], lambda self, value, index: self.result.append(f"{value}-{index}"), bag)
        self.assertEqual(bag.result, ["1-0", "2-1"])

    def test_each_over_mapping_passes_keys(self) -> None:
        from fnbelt import each

        seen = []
        each({"b": 2, "a": 1}, lambda value, key: seen.append((key, value)))
        self.assertEqual(seen, [("b", 2), ("a", 1)])

    def test_each_over_object_attributes(self) -> None:
        from fnbelt import each

        class Point:
            def __init__(self) -> None:
                self.x = 1
                self.y = 2
                self._hidden = 3

        seen = []
        each(Point(), lambda value, key: seen.append((key, value)))
        self.assertEqual(seen, [("x", 1), ("y", 2)])

    def test_map_sequence_matches_pointwise(self) -> None:
        from fnbelt import map

        xs = [3, 1, 4, 1, 5]
        out = map(xs, lambda value, _index: value * 10)
        self.assertEqual(len(out), len(xs))
        for index, value in enumerate(xs):
            self.assertEqual(out[index], value * 10)

    def test_map_upper(self) -> None:
        from fnbelt import map

        self.assertEqual(map(["a", "b"], lambda value, _index: value.upper()), ["A", "B"])
        self.assertEqual(map([], lambda value, _index: value.upper()), [])

    def test_map_keeps_shape(self) -> None:
        from fnbelt import map

        self.assertEqual(map((1, 2), lambda value, _index: value + 1), (2, 3))
        self.assertEqual(map({"a": 1, "b": 2}, lambda value, key: f"{key}{value}"), {"a": "a1", "b": "b2"})

    def test_map_does_not_mutate_input(self) -> None:
        from fnbelt import map

        xs = [1, 2, 3]
        out = map(xs, lambda value, _index: value * 2)
        self.assertEqual(xs, [1, 2, 3])
        self.assertIsNot(out, xs)

    def test_map_failure_propagates(self) -> None:
        from fnbelt import map

        def explode(value, _index):
            if value == 2:
                raise ValueError("bad value")
            return value

        with self.assertRaises(ValueError):
            map([1, 2, 3], explode)

    def test_map_with_context(self) -> None:
        from fnbelt import map

        class Scale:
            factor = 3

        self.assertEqual(map([1, 2], lambda self, value, _index: value * self.factor, Scale()), [3, 6])


@unittest.skipUnless(JAX_AVAILABLE, "jax is required to import fnbelt")
class ReduceTests(unittest.TestCase):
    def test_reduce_sums(self) -> None:
        from fnbelt import reduce

        self.assertEqual(reduce([1, 2, 3, 4], lambda memo, value: memo + value, 0), 10)

    def test_reduce_empty_returns_memo(self) -> None:
        from fnbelt import reduce, reduce_right

        marker = object()
        self.assertIs(reduce([], lambda memo, value: 1 / 0, marker), marker)
        self.assertIs(reduce_right([], lambda memo, value: 1 / 0, marker), marker)

    def test_reduce_and_reduce_right_mirror(self) -> None:
        from fnbelt import reduce, reduce_right

        concat = lambda memo, value: f"{memo}{value}"
        self.assertEqual(reduce([1, 2, 3], concat, ""), "123")
        self.assertEqual(reduce_right([1, 2, 3], concat, ""), "321")

    def test_reduce_folds_falsy_elements(self) -> None:
        from fnbelt import reduce, reduce_right

        collect = lambda memo, value: memo + [value]
        self.assertEqual(reduce([1, 0, None, 2], collect, []), [1, 0, None, 2])
        self.assertEqual(reduce_right([1, 0, None, 2], collect, []), [2, None, 0, 1])

    def test_reduce_over_mapping_uses_values(self) -> None:
        from fnbelt import reduce

        self.assertEqual(reduce({"a": 1, "b": 2}, lambda memo, value: memo + value, 10), 13)


@unittest.skipUnless(JAX_AVAILABLE, "jax is required to import fnbelt")
class SearchTests(unittest.TestCase):
    def test_find_returns_first_match(self) -> None:
        from fnbelt import find

        self.assertEqual(find([1, 2, 3, 4], lambda value: value % 2 == 0), 2)
        self.assertIsNone(find([1, 3], lambda value: value % 2 == 0))
        self.assertIsNone(find([], lambda value: True))

    def test_find_short_circuits(self) -> None:
        from fnbelt import find

        calls = []

        def is_target(value):
            calls.append(value)
            return value == "k"

        values = ["a", "b", "k", "x", "y", "z"]
        self.assertEqual(find(values, is_target), "k")
        self.assertEqual(len(calls), 3)

    def test_filter_and_reject_partition(self) -> None:
        from fnbelt import filter, reject

        values = [1, "a", 2]
        is_integer = lambda value: isinstance(value, int)
        kept = filter(values, is_integer)
        dropped = reject(values, is_integer)
        self.assertEqual(kept, [1, 2])
        self.assertEqual(dropped, ["a"])
        self.assertEqual(sorted(map(repr, kept + dropped)), sorted(map(repr, values)))

    def test_filter_over_mapping_returns_list(self) -> None:
        from fnbelt import filter

        self.assertEqual(filter({"a": 1, "b": 2, "c": 3}, lambda value: value > 1), [2, 3])

    def test_all_and_any(self) -> None:
        from fnbelt import all, any

        self.assertTrue(all([1, 2, 3]))
        self.assertFalse(all([1, 0, 3]))
        self.assertTrue(any([0, 0, 3]))
        self.assertFalse(any([0, None, ""]))
        self.assertTrue(all([2, 4], lambda value: value % 2 == 0))
        self.assertFalse(any([1, 3], lambda value: value % 2 == 0))

    def test_all_and_any_are_vacuous_on_empty(self) -> None:
        from fnbelt import all, any

        never = lambda value: 1 / 0
        self.assertTrue(all([]))
        self.assertTrue(all([], never))
        self.assertFalse(any([]))
        self.assertFalse(any({}, never))

    def test_all_and_any_short_circuit(self) -> None:
        from fnbelt import all, any

        seen = []

        def track(value):
            seen.append(value)
            return value

        self.assertFalse(all([1, 0, 1, 1], track))
        self.assertEqual(seen, [1, 0])
        seen.clear()
        self.assertTrue(any([0, 1, 0, 0], track))
        self.assertEqual(seen, [0, 1])

    def test_default_iterator_ignores_context(self) -> None:
        from fnbelt import all

        self.assertTrue(all([1, 2], None, _Bag()))

    def test_contains_uses_loose_equality(self) -> None:
        from fnbelt import contains

        self.assertTrue(contains([1, 2, 3], 2))
        self.assertTrue(contains([1.0, 2.0], 1))
        self.assertTrue(contains({"a": "x"}, "x"))
        self.assertFalse(contains([1, 2], 3))
        self.assertFalse(contains([], 1))

    def test_index_of_and_last_index_of(self) -> None:
        from fnbelt import index_of, last_index_of

        values = [0, 1, 2, 1]
        self.assertEqual(index_of(values, 1), 1)
        self.assertEqual(last_index_of(values, 1), 3)
        self.assertEqual(index_of(values, 9), -1)
        self.assertEqual(last_index_of(values, 9), -1)

    def test_last_index_of_matches_reverse_linear_scan(self) -> None:
        from fnbelt import last_index_of

        values = [3, 1, 3, 2, 1, 3, 2]
        for target in (1, 2, 3):
            expected = max(index for index, value in enumerate(values) if value == target)
            self.assertEqual(last_index_of(values, target), expected)

    def test_index_of_over_mapping(self) -> None:
        from fnbelt import index_of, last_index_of

        data = {"a": 1, "b": 2, "c": 1}
        self.assertEqual(index_of(data, 1), "a")
        self.assertEqual(last_index_of(data, 1), "c")
        self.assertIsNone(index_of(data, 9))
        self.assertIsNone(last_index_of(data, 9))


@unittest.skipUnless(JAX_AVAILABLE, "jax is required to import fnbelt")
class AggregateTests(unittest.TestCase):
    def test_invoke_calls_named_method(self) -> None:
        from fnbelt import invoke

        items = [_InvokeMe(), _InvokeMe()]
        self.assertIsNone(invoke(items, "invoke"))
        self.assertTrue(all(item.invoked for item in items))

    def test_invoke_rejects_non_string_name(self) -> None:
        from fnbelt import InvalidArgumentError, invoke

        with self.assertRaises(InvalidArgumentError):
            invoke([_InvokeMe()], 3)

    def test_invoke_missing_method_propagates(self) -> None:
        from fnbelt import invoke

        with self.assertRaises(AttributeError):
            invoke([object()], "invoke")

    def test_pluck_skips_items_without_key(self) -> None:
        from fnbelt import pluck

        rows = [{"name": "moe", "age": 40}, {"age": 50}, {"name": "curly", "age": 60}]
        self.assertEqual(pluck(rows, "name"), ["moe", "curly"])
        self.assertEqual(pluck(rows, "age"), [40, 50, 60])

    def test_pluck_reads_object_attributes(self) -> None:
        from fnbelt import pluck

        first = _InvokeMe()
        second = _InvokeMe()
        second.invoked = "yes"
        self.assertEqual(pluck([first, second, 5], "invoked"), [False, "yes"])

    def test_max_and_min(self) -> None:
        from fnbelt import max, min

        self.assertEqual(max([1, 5, 3]), 5)
        self.assertEqual(min([4, 2, 8]), 2)
        self.assertEqual(max(["aa", "b", "cccc"], len), 4)
        self.assertEqual(min({"a": 3, "b": -2}), -2)

    def test_max_uses_true_extremum_for_negative_values(self) -> None:
        from fnbelt import max

        self.assertEqual(max([-5, -3, -9]), -3)

    def test_max_and_min_of_empty_are_none(self) -> None:
        from fnbelt import max, min

        self.assertIsNone(max([]))
        self.assertIsNone(min([]))

    def test_iterator_failures_propagate(self) -> None:
        from fnbelt import each, filter, find, reduce

        def boom(*_args):
            raise LookupError("iterator failed")

        for operation, args in (
            (each, ([1], boom)),
            (filter, ([1], boom)),
            (find, ([1], boom)),
            (reduce, ([1], boom, 0)),
        ):
            with self.subTest(operation=operation.__name__):
                with self.assertRaises(LookupError):
                    operation(*args)

    def test_non_collections_are_rejected(self) -> None:
        from fnbelt import InvalidArgumentError, each

        for bad in (None, 3, "text", b"bytes"):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidArgumentError):
                    each(bad, lambda value, key: None)

    def test_non_callable_iterator_is_rejected(self) -> None:
        from fnbelt import NotCallableError, map

        with self.assertRaises(NotCallableError):
            map([1], "upper")


@unittest.skipUnless(JAX_AVAILABLE, "jax is required to import fnbelt")
class OrderingTests(unittest.TestCase):
    def test_sort_by_is_stable(self) -> None:
        from fnbelt import sort_by

        words = ["bb", "a", "cc", "d", "eee"]
        self.assertEqual(sort_by(words, len), ["a", "d", "bb", "cc", "eee"])

    def test_group_by_keeps_first_seen_order(self) -> None:
        from fnbelt import group_by

        groups = group_by([1.3, 2.1, 2.4, 1.9], int)
        self.assertEqual(list(groups), [1, 2])
        self.assertEqual(groups[1], [1.3, 1.9])
        self.assertEqual(groups[2], [2.1, 2.4])

    def test_sorted_index(self) -> None:
        from fnbelt import sorted_index

        self.assertEqual(sorted_index([10, 20, 30, 40], 35), 3)
        self.assertEqual(sorted_index([10, 20, 30], 20), 1)
        self.assertEqual(sorted_index([], 5), 0)
        self.assertEqual(sorted_index(["a", "bbb"], "cc", len), 1)

    def test_sorted_index_rejects_mappings(self) -> None:
        from fnbelt import InvalidArgumentError, sorted_index

        with self.assertRaises(InvalidArgumentError):
            sorted_index({"a": 1}, 1)


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for array traversal tests")
class ArrayTraversalTests(unittest.TestCase):
    def test_map_over_array_returns_array(self) -> None:
        import jax
        import jax.numpy as jnp

        from fnbelt import map

        out = map(jnp.asarray([1, 2, 3]), lambda value, _index: value * 2)
        self.assertIsInstance(out, jax.Array)
        self.assertEqual(out.tolist(), [2, 4, 6])

    def test_map_over_array_with_non_numeric_results_returns_list(self) -> None:
        import jax.numpy as jnp

        from fnbelt import map

        out = map(jnp.asarray([1, 2]), lambda value, index: f"{index}:{int(value)}")
        self.assertEqual(out, ["0:1", "1:2"])

    def test_reduce_over_array(self) -> None:
        import jax.numpy as jnp

        from fnbelt import reduce

        self.assertEqual(int(reduce(jnp.arange(5), lambda memo, value: memo + value, 0)), 10)

    def test_max_min_fast_path_matches_loop(self) -> None:
        import jax.numpy as jnp

        from fnbelt import max, min

        arr = jnp.asarray([-4.0, -1.5, -7.0])
        self.assertEqual(float(max(arr)), -1.5)
        self.assertEqual(float(min(arr)), -7.0)
        self.assertEqual(float(max(arr, lambda value: value)), -1.5)
        self.assertEqual(float(min(arr, lambda value: value)), -7.0)

    def test_max_min_fast_path_skips_nan(self) -> None:
        import math

        import jax.numpy as jnp

        from fnbelt import max, min

        arr = jnp.asarray([1.0, math.nan, 3.0, -2.0])
        self.assertEqual(float(max(arr)), float(max(arr, lambda value: value)))
        self.assertEqual(float(min(arr)), float(min(arr, lambda value: value)))
        self.assertEqual(float(max(arr)), 3.0)
        self.assertEqual(float(min(arr)), -2.0)

    def test_contains_and_index_of_over_matrix_rows(self) -> None:
        import jax.numpy as jnp

        from fnbelt import contains, index_of, last_index_of

        matrix = jnp.asarray([[1, 2], [3, 4], [1, 2]])
        self.assertTrue(contains(matrix, jnp.asarray([3, 4])))
        self.assertTrue(contains(matrix, [3, 4]))
        self.assertFalse(contains(matrix, jnp.asarray([4, 3])))
        self.assertFalse(contains(matrix, jnp.asarray([1, 2, 3])))
        self.assertFalse(contains(matrix, 3))
        self.assertEqual(index_of(matrix, jnp.asarray([1, 2])), 0)
        self.assertEqual(last_index_of(matrix, [1, 2]), 2)
        self.assertEqual(index_of(matrix, [9, 9]), -1)

    def test_membership_over_mixed_arrays_and_lists(self) -> None:
        import jax.numpy as jnp

        from fnbelt import contains, index_of, last_index_of, uniq, without

        mixed = [[1, 2], jnp.asarray([3, 4]), "x", None]
        self.assertEqual(index_of(mixed, [3, 4]), 1)
        self.assertEqual(index_of(mixed, jnp.asarray([1, 2])), 0)
        self.assertEqual(last_index_of(mixed, "x"), 2)
        self.assertTrue(contains(mixed, None))
        self.assertFalse(contains(mixed, [5, 6]))
        self.assertEqual(len(uniq([jnp.asarray([1, 2]), [1, 2], jnp.asarray([1, 2])])), 1)
        kept = without(mixed, "x", None)
        self.assertEqual(len(kept), 2)
        self.assertEqual(kept[0], [1, 2])
        self.assertIs(kept[1], mixed[1])

    def test_index_of_over_array(self) -> None:
        import jax.numpy as jnp

        from fnbelt import index_of, last_index_of

        arr = jnp.asarray([0, 1, 2, 1])
        self.assertEqual(index_of(arr, 1), 1)
        self.assertEqual(last_index_of(arr, 1), 3)
        self.assertEqual(index_of(arr, 5), -1)


if __name__ == "__main__":
    unittest.main()
