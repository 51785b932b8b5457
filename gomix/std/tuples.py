"""Read-only builtins for `tuple` values."""

from typing import Dict

from gomix.builtin_function import Builtin
from gomix.types import ArrayVal, ErrorVal, ListVal, TupleVal, values_equal
from .checks import argument_error, check_arity


def populate_tuple_builtins() -> Dict[str, Builtin]:

    def expect_tuple(name, args, want):
        err = check_arity(args, want)
        if err:
            return err
        if not isinstance(args[0], TupleVal):
            return argument_error(name, 'a tuple', args[0], None if want == 1 else 0)
        return None

    def std_size_tuple(runtime, writer, *args):
        err = expect_tuple('size_tuple', args, 1)
        if err:
            return err
        return len(args[0].items)

    def std_peekback_tuple(runtime, writer, *args):
        err = expect_tuple('peekback_tuple', args, 1)
        if err:
            return err
        if not args[0].items:
            return ErrorVal('cannot peek from empty tuple')
        return args[0].items[-1]

    def std_peekfront_tuple(runtime, writer, *args):
        err = expect_tuple('peekfront_tuple', args, 1)
        if err:
            return err
        if not args[0].items:
            return ErrorVal('cannot peek from empty tuple')
        return args[0].items[0]

    def std_contains_tuple(runtime, writer, *args):
        err = expect_tuple('contains_tuple', args, 2)
        if err:
            return err
        return any(values_equal(item, args[1]) for item in args[0].items)

    def std_to_tuple(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        value = args[0]
        if isinstance(value, TupleVal):
            return value
        if isinstance(value, (ArrayVal, ListVal)):
            return TupleVal(tuple(value.items))
        return argument_error('to_tuple', 'an array or list', value)

    builtins = {
        'size_tuple': std_size_tuple,
        'peekback_tuple': std_peekback_tuple,
        'peekfront_tuple': std_peekfront_tuple,
        'contains_tuple': std_contains_tuple,
        'to_tuple': std_to_tuple,
    }
    return {name: Builtin(name, fn) for name, fn in builtins.items()}
