"""Builtins for `map` and `set` values.

Keys are always stored under their display form, so `insert_map(m, 1, v)`
and `m["1"]` address the same entry.
"""

from typing import Dict

from gomix.builtin_function import Builtin
from gomix.types import ArrayVal, MapVal, SetVal, map_key
from .checks import argument_error, arity_error, check_arity


def populate_map_builtins() -> Dict[str, Builtin]:

    def expect_map(name, args, want):
        err = check_arity(args, want)
        if err:
            return err
        if not isinstance(args[0], MapVal):
            return argument_error(name, 'a map', args[0], None if want == 1 else 0)
        return None

    def std_make_map(runtime, writer, *args):
        if len(args) % 2 != 0:
            return arity_error(args, 'an even number')
        result = MapVal()
        for i in range(0, len(args), 2):
            result.put(map_key(args[i]), args[i + 1])
        return result

    def std_insert_map(runtime, writer, *args):
        err = expect_map('insert_map', args, 3)
        if err:
            return err
        args[0].put(map_key(args[1]), args[2])
        return args[0]

    def std_remove_map(runtime, writer, *args):
        err = expect_map('remove_map', args, 2)
        if err:
            return err
        key = map_key(args[1])
        value = args[0].get(key)
        args[0].remove(key)
        return value

    def std_contains_map(runtime, writer, *args):
        err = expect_map('contains_map', args, 2)
        if err:
            return err
        return map_key(args[1]) in args[0].pairs

    def std_keys_map(runtime, writer, *args):
        err = expect_map('keys_map', args, 1)
        if err:
            return err
        return ArrayVal(list(args[0].keys))

    def std_values_map(runtime, writer, *args):
        err = expect_map('values_map', args, 1)
        if err:
            return err
        return ArrayVal([args[0].pairs[k] for k in args[0].keys])

    def std_enumerate_map(runtime, writer, *args):
        err = expect_map('enumerate_map', args, 1)
        if err:
            return err
        return ArrayVal([ArrayVal([k, args[0].pairs[k]]) for k in args[0].keys])

    def std_size_map(runtime, writer, *args):
        err = expect_map('size_map', args, 1)
        if err:
            return err
        return len(args[0])

    builtins = {
        'make_map': std_make_map,
        'insert_map': std_insert_map,
        'remove_map': std_remove_map,
        'contains_map': std_contains_map,
        'keys_map': std_keys_map,
        'values_map': std_values_map,
        'enumerate_map': std_enumerate_map,
        'size_map': std_size_map,
    }
    return {name: Builtin(name, fn) for name, fn in builtins.items()}


def populate_set_builtins() -> Dict[str, Builtin]:

    def expect_set(name, args, want):
        err = check_arity(args, want)
        if err:
            return err
        if not isinstance(args[0], SetVal):
            return argument_error(name, 'a set', args[0], None if want == 1 else 0)
        return None

    def std_make_set(runtime, writer, *args):
        result = SetVal()
        for value in args:
            result.add(value)
        return result

    def std_insert_set(runtime, writer, *args):
        err = expect_set('insert_set', args, 2)
        if err:
            return err
        args[0].add(args[1])
        return args[0]

    def std_remove_set(runtime, writer, *args):
        err = expect_set('remove_set', args, 2)
        if err:
            return err
        return args[0].discard(args[1])

    def std_contains_set(runtime, writer, *args):
        err = expect_set('contains_set', args, 2)
        if err:
            return err
        return args[1] in args[0]

    def std_values_set(runtime, writer, *args):
        err = expect_set('values_set', args, 1)
        if err:
            return err
        return ArrayVal(args[0].values())

    def std_size_set(runtime, writer, *args):
        err = expect_set('size_set', args, 1)
        if err:
            return err
        return len(args[0])

    builtins = {
        'make_set': std_make_set,
        'insert_set': std_insert_set,
        'remove_set': std_remove_set,
        'contains_set': std_contains_set,
        'values_set': std_values_set,
        'size_set': std_size_set,
    }
    return {name: Builtin(name, fn) for name, fn in builtins.items()}
