"""Builtins operating on `array` values."""

import functools
from typing import Any, Dict, List

from gomix.builtin_function import Builtin
from gomix.types import (
    NIL, ArrayVal, ErrorVal, ListVal, TupleVal, is_error, is_number, to_string,
    values_equal,
)
from .checks import argument_error, arity_error, call_predicate, check_arity, is_callable


class ComparatorFailed(Exception):
    """Aborts a sort when the user comparator returns an error."""
    def __init__(self, error: ErrorVal):
        super().__init__(error.message)
        self.error = error


def natural_key(value: Any):
    # numbers sort numerically ahead of everything else, which sorts by display form
    if is_number(value):
        return (0, value, '')
    return (1, 0, to_string(value))


def sort_with_comparator(runtime, items: List[Any], fn: Any) -> Any:
    """Sort `items` in place using a GoMix `less(a, b)` function."""
    def compare(a, b):
        for x, y, outcome in ((a, b, -1), (b, a, 1)):
            res = runtime.call_function(fn, x, y)
            if is_error(res):
                raise ComparatorFailed(res)
            if res is True:
                return outcome
        return 0

    try:
        items.sort(key=functools.cmp_to_key(compare))
    except ComparatorFailed as e:
        return e.error
    return None


def populate_array_builtins() -> Dict[str, Builtin]:

    def expect_array(name, args, want):
        err = check_arity(args, want)
        if err:
            return err
        if not isinstance(args[0], ArrayVal):
            return argument_error(name, 'an array', args[0], None if want == 1 else 0)
        return None

    def expect_callback(name, args):
        err = expect_array(name, args, 2)
        if err:
            return err
        if not is_callable(args[1]):
            return argument_error(name, 'a function', args[1], 1)
        return None

    def std_push_array(runtime, writer, *args):
        err = expect_array('push_array', args, 2)
        if err:
            return err
        args[0].items.append(args[1])
        return args[0]

    def std_pop_array(runtime, writer, *args):
        err = expect_array('pop_array', args, 1)
        if err:
            return err
        if not args[0].items:
            return ErrorVal('cannot pop from empty array')
        return args[0].items.pop()

    def std_shift_array(runtime, writer, *args):
        err = expect_array('shift_array', args, 1)
        if err:
            return err
        if not args[0].items:
            return ErrorVal('cannot shift from empty array')
        return args[0].items.pop(0)

    def std_unshift_array(runtime, writer, *args):
        err = expect_array('unshift_array', args, 2)
        if err:
            return err
        args[0].items.insert(0, args[1])
        return args[0]

    def sort_flags(name, args):
        if len(args) not in (1, 2):
            return None, arity_error(args, '1 or 2')
        if not isinstance(args[0], ArrayVal):
            return None, argument_error(name, 'an array', args[0], 0)
        if len(args) == 2:
            if not isinstance(args[1], bool):
                return None, argument_error(name, 'a boolean', args[1], 1)
            return args[1], None
        return False, None

    def std_sort_array(runtime, writer, *args):
        reverse, err = sort_flags('sort_array', args)
        if err:
            return err
        args[0].items.sort(key=natural_key, reverse=reverse)
        return args[0]

    def std_sorted_array(runtime, writer, *args):
        reverse, err = sort_flags('sorted_array', args)
        if err:
            return err
        return ArrayVal(sorted(args[0].items, key=natural_key, reverse=reverse))

    def std_csort_array(runtime, writer, *args):
        err = expect_callback('csort_array', args)
        if err:
            return err
        failed = sort_with_comparator(runtime, args[0].items, args[1])
        return failed if failed is not None else args[0]

    def std_csorted_array(runtime, writer, *args):
        err = expect_callback('csorted_array', args)
        if err:
            return err
        items = list(args[0].items)
        failed = sort_with_comparator(runtime, items, args[1])
        return failed if failed is not None else ArrayVal(items)

    def std_reverse_array(runtime, writer, *args):
        err = expect_array('reverse_array', args, 1)
        if err:
            return err
        return ArrayVal(list(reversed(args[0].items)))

    def std_clone_array(runtime, writer, *args):
        err = expect_array('clone_array', args, 1)
        if err:
            return err
        return ArrayVal(list(args[0].items))

    def std_contains_array(runtime, writer, *args):
        err = expect_array('contains_array', args, 2)
        if err:
            return err
        return any(values_equal(item, args[1]) for item in args[0].items)

    def std_index_array(runtime, writer, *args):
        err = expect_array('index_array', args, 2)
        if err:
            return err
        for i, item in enumerate(args[0].items):
            if values_equal(item, args[1]):
                return i
        return -1

    def std_find_array(runtime, writer, *args):
        err = expect_callback('find_array', args)
        if err:
            return err
        for item in list(args[0].items):
            found = call_predicate(runtime, args[1], item)
            if is_error(found):
                return found
            if found:
                return item
        return NIL

    def std_some_array(runtime, writer, *args):
        err = expect_callback('some_array', args)
        if err:
            return err
        for item in list(args[0].items):
            hit = call_predicate(runtime, args[1], item)
            if is_error(hit) or hit:
                return hit
        return False

    def std_every_array(runtime, writer, *args):
        err = expect_callback('every_array', args)
        if err:
            return err
        for item in list(args[0].items):
            hit = call_predicate(runtime, args[1], item)
            if is_error(hit) or not hit:
                return hit
        return True

    def std_map_array(runtime, writer, *args):
        err = expect_callback('map_array', args)
        if err:
            return err
        result = []
        for item in list(args[0].items):
            res = runtime.call_function(args[1], item)
            if is_error(res):
                return res
            result.append(res)
        return ArrayVal(result)

    def std_filter_array(runtime, writer, *args):
        err = expect_callback('filter_array', args)
        if err:
            return err
        result = []
        for item in list(args[0].items):
            keep = call_predicate(runtime, args[1], item)
            if is_error(keep):
                return keep
            if keep:
                result.append(item)
        return ArrayVal(result)

    def std_reduce_array(runtime, writer, *args):
        if len(args) not in (2, 3):
            return arity_error(args, '2 or 3')
        arr, fn = args[0], args[1]
        if not isinstance(arr, ArrayVal):
            return argument_error('reduce_array', 'an array', arr, 0)
        if not is_callable(fn):
            return argument_error('reduce_array', 'a function', fn, 1)
        items = list(arr.items)
        if len(args) == 3:
            acc = args[2]
        elif items:
            acc = items.pop(0)
        else:
            return ErrorVal('cannot reduce an empty array without an initial value')
        for item in items:
            acc = runtime.call_function(fn, acc, item)
            if is_error(acc):
                return acc
        return acc

    def std_size_array(runtime, writer, *args):
        err = expect_array('size_array', args, 1)
        if err:
            return err
        return len(args[0].items)

    def std_to_array(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        value = args[0]
        if isinstance(value, ArrayVal):
            return value
        if isinstance(value, (ListVal, TupleVal)):
            return ArrayVal(list(value.items))
        return argument_error('to_array', 'a list or tuple', value)

    builtins = {
        'push_array': std_push_array,
        'pop_array': std_pop_array,
        'shift_array': std_shift_array,
        'unshift_array': std_unshift_array,
        'sort_array': std_sort_array,
        'sorted_array': std_sorted_array,
        'csort_array': std_csort_array,
        'csorted_array': std_csorted_array,
        'reverse_array': std_reverse_array,
        'clone_array': std_clone_array,
        'contains_array': std_contains_array,
        'index_array': std_index_array,
        'find_array': std_find_array,
        'some_array': std_some_array,
        'every_array': std_every_array,
        'map_array': std_map_array,
        'filter_array': std_filter_array,
        'reduce_array': std_reduce_array,
        'size_array': std_size_array,
        'to_array': std_to_array,
    }
    return {name: Builtin(name, fn) for name, fn in builtins.items()}
