"""Builtins operating on `list` values.

Every mutator checks for a ListVal explicitly, so tuples (and arrays) are
rejected with an error instead of being modified.
"""

from typing import Dict

from gomix.builtin_function import Builtin
from gomix.types import (
    NIL, ArrayVal, ErrorVal, ListVal, TupleVal, is_error, is_int, values_equal,
)
from .checks import argument_error, arity_error, call_predicate, check_arity, is_callable


def resolve_index(index: int, length: int, allow_end: bool = False):
    """Translate a possibly negative index; None when it is out of bounds."""
    if index < 0:
        index += length
    upper = length if allow_end else length - 1
    if index < 0 or index > upper:
        return None
    return index


def populate_list_builtins() -> Dict[str, Builtin]:

    def expect_list(name, args, want):
        err = check_arity(args, want)
        if err:
            return err
        if not isinstance(args[0], ListVal):
            return argument_error(name, 'a list', args[0], None if want == 1 else 0)
        return None

    def expect_callback(name, args):
        if len(args) != 2:
            return arity_error(args, 2)
        if not isinstance(args[0], ListVal):
            return argument_error(name, 'a list', args[0], 0)
        if not is_callable(args[1]):
            return argument_error(name, 'a function', args[1], 1)
        return None

    def std_pushback_list(runtime, writer, *args):
        err = expect_list('pushback_list', args, 2)
        if err:
            return err
        args[0].items.append(args[1])
        return args[0]

    def std_pushfront_list(runtime, writer, *args):
        err = expect_list('pushfront_list', args, 2)
        if err:
            return err
        args[0].items.insert(0, args[1])
        return args[0]

    def std_popback_list(runtime, writer, *args):
        err = expect_list('popback_list', args, 1)
        if err:
            return err
        if not args[0].items:
            return ErrorVal('cannot pop from empty list')
        return args[0].items.pop()

    def std_popfront_list(runtime, writer, *args):
        err = expect_list('popfront_list', args, 1)
        if err:
            return err
        if not args[0].items:
            return ErrorVal('cannot pop from empty list')
        return args[0].items.pop(0)

    def std_peekback_list(runtime, writer, *args):
        err = expect_list('peekback_list', args, 1)
        if err:
            return err
        if not args[0].items:
            return ErrorVal('cannot peek from empty list')
        return args[0].items[-1]

    def std_peekfront_list(runtime, writer, *args):
        err = expect_list('peekfront_list', args, 1)
        if err:
            return err
        if not args[0].items:
            return ErrorVal('cannot peek from empty list')
        return args[0].items[0]

    def std_insert_list(runtime, writer, *args):
        err = expect_list('insert_list', args, 3)
        if err:
            return err
        lst, index, value = args
        if not is_int(index):
            return argument_error('insert_list', 'an integer', index, 1)
        pos = resolve_index(index, len(lst.items), allow_end=True)
        if pos is None:
            return ErrorVal(f"list index out of bounds: index={index}, length={len(lst.items)}")
        lst.items.insert(pos, value)
        return lst

    def std_remove_list(runtime, writer, *args):
        err = expect_list('remove_list', args, 2)
        if err:
            return err
        lst, index = args
        if not is_int(index):
            return argument_error('remove_list', 'an integer', index, 1)
        if not lst.items:
            return ErrorVal('cannot remove from empty list')
        pos = resolve_index(index, len(lst.items))
        if pos is None:
            return ErrorVal(f"list index out of bounds: index={index}, length={len(lst.items)}")
        return lst.items.pop(pos)

    def std_contains_list(runtime, writer, *args):
        err = expect_list('contains_list', args, 2)
        if err:
            return err
        return any(values_equal(item, args[1]) for item in args[0].items)

    def std_size_list(runtime, writer, *args):
        err = expect_list('size_list', args, 1)
        if err:
            return err
        return len(args[0].items)

    def std_map_list(runtime, writer, *args):
        err = expect_callback('map_list', args)
        if err:
            return err
        result = []
        for item in list(args[0].items):
            res = runtime.call_function(args[1], item)
            if is_error(res):
                return res
            result.append(res)
        return ListVal(result)

    def std_filter_list(runtime, writer, *args):
        err = expect_callback('filter_list', args)
        if err:
            return err
        result = []
        for item in list(args[0].items):
            keep = call_predicate(runtime, args[1], item)
            if is_error(keep):
                return keep
            if keep:
                result.append(item)
        return ListVal(result)

    def std_reduce_list(runtime, writer, *args):
        if len(args) not in (2, 3):
            return arity_error(args, '2 or 3')
        lst, fn = args[0], args[1]
        if not isinstance(lst, ListVal):
            return argument_error('reduce_list', 'a list', lst, 0)
        if not is_callable(fn):
            return argument_error('reduce_list', 'a function', fn, 1)
        items = list(lst.items)
        if len(args) == 3:
            acc = args[2]
        elif items:
            acc = items.pop(0)
        else:
            return ErrorVal('cannot reduce an empty list without an initial value')
        for item in items:
            acc = runtime.call_function(fn, acc, item)
            if is_error(acc):
                return acc
        return acc

    def std_find_list(runtime, writer, *args):
        err = expect_callback('find_list', args)
        if err:
            return err
        for item in list(args[0].items):
            found = call_predicate(runtime, args[1], item)
            if is_error(found):
                return found
            if found:
                return item
        return NIL

    def std_some_list(runtime, writer, *args):
        err = expect_callback('some_list', args)
        if err:
            return err
        for item in list(args[0].items):
            hit = call_predicate(runtime, args[1], item)
            if is_error(hit) or hit:
                return hit
        return False

    def std_every_list(runtime, writer, *args):
        err = expect_callback('every_list', args)
        if err:
            return err
        for item in list(args[0].items):
            hit = call_predicate(runtime, args[1], item)
            if is_error(hit) or not hit:
                return hit
        return True

    def std_to_list(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        value = args[0]
        if isinstance(value, ListVal):
            return value
        if isinstance(value, (ArrayVal, TupleVal)):
            return ListVal(list(value.items))
        return argument_error('to_list', 'an array or tuple', value)

    builtins = {
        'pushback_list': std_pushback_list,
        'pushfront_list': std_pushfront_list,
        'popback_list': std_popback_list,
        'popfront_list': std_popfront_list,
        'peekback_list': std_peekback_list,
        'peekfront_list': std_peekfront_list,
        'insert_list': std_insert_list,
        'remove_list': std_remove_list,
        'contains_list': std_contains_list,
        'size_list': std_size_list,
        'map_list': std_map_list,
        'filter_list': std_filter_list,
        'reduce_list': std_reduce_list,
        'find_list': std_find_list,
        'some_list': std_some_list,
        'every_list': std_every_list,
        'to_list': std_to_list,
    }
    return {name: Builtin(name, fn) for name, fn in builtins.items()}
