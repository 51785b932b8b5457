"""General purpose builtins: printing, conversion and collection constructors."""

from typing import Any, Dict

from gomix.builtin_function import Builtin
from gomix.types import (
    NIL, ArrayVal, ErrorVal, ListVal, MapVal, NilVal, RangeVal, SetVal,
    TupleVal, is_int, to_string, type_name,
)
from .checks import argument_error, arity_error, check_arity, sequence_items

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


def format_arg(value: Any) -> Any:
    """Raw Python value handed to %-formatting."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float, str)):
        return value
    return to_string(value)


def populate_common_builtins() -> Dict[str, Builtin]:

    def std_print(runtime, writer, *args):
        if not args:
            return arity_error(args, '1 or more')
        writer.write(' '.join(to_string(a) for a in args))
        writer.flush()
        return NIL

    def std_println(runtime, writer, *args):
        if not args:
            return arity_error(args, '1 or more')
        writer.write(' '.join(to_string(a) for a in args) + '\n')
        writer.flush()
        return NIL

    def std_printf(runtime, writer, *args):
        if not args:
            return arity_error(args, '1 or more')
        fmt = args[0]
        if not isinstance(fmt, str):
            return argument_error('printf', 'a string', fmt, 0)
        values = tuple(format_arg(a) for a in args[1:])
        try:
            text = fmt.replace('%v', '%s') % values
        except (TypeError, ValueError) as e:
            return ErrorVal(f"printf: bad format: {e}")
        writer.write(text)
        writer.flush()
        return NIL

    def std_length(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        value = args[0]
        if isinstance(value, str):
            return len(value)
        if isinstance(value, (ArrayVal, ListVal, TupleVal)):
            return len(value.items)
        if isinstance(value, (MapVal, SetVal, RangeVal)):
            return len(value)
        return argument_error('length', 'a string or a collection', value)

    def std_to_string(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        return to_string(args[0])

    def std_typeof(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        return type_name(args[0])

    def std_range(runtime, writer, *args):
        err = check_arity(args, 2)
        if err:
            return err
        for i, bound in enumerate(args):
            if not is_int(bound):
                return argument_error('range', 'an integer', bound, i)
        return RangeVal(args[0], args[1])

    def std_array(runtime, writer, *args):
        if len(args) == 1:
            items = sequence_items(args[0])
            if items is not None:
                return ArrayVal(items)
        return ArrayVal(list(args))

    def std_list(runtime, writer, *args):
        return ListVal(list(args))

    def std_tuple(runtime, writer, *args):
        return TupleVal(tuple(args))

    def std_addr(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        if isinstance(args[0], NilVal):
            return 0
        return id(args[0])

    def std_is_same_ref(runtime, writer, *args):
        err = check_arity(args, 2)
        if err:
            return err
        a, b = args
        if isinstance(a, (bool, int, float, str)) or isinstance(b, (bool, int, float, str)):
            return False
        return a is b

    def std_error(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        return ErrorVal(to_string(args[0]))

    def std_to_int(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        value = args[0]
        if isinstance(value, bool):
            return 1 if value else 0
        if is_int(value):
            return value
        if not isinstance(value, (float, str)):
            return argument_error('to_int', 'a number, string or bool', value)
        try:
            result = int(value) if isinstance(value, float) else int(value.strip(), 0)
        except (OverflowError, ValueError):
            return ErrorVal(f"cannot convert '{to_string(value)}' to int")
        if not INT64_MIN <= result <= INT64_MAX:
            return ErrorVal(f"cannot convert '{to_string(value)}' to int: out of range")
        return result

    def std_to_float(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        value = args[0]
        if isinstance(value, bool):
            return 1.0 if value else 0.0
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return ErrorVal(f"cannot convert '{value}' to float")
        return argument_error('to_float', 'a number, string or bool', value)

    def std_to_bool(runtime, writer, *args):
        err = check_arity(args, 1)
        if err:
            return err
        value = args[0]
        if isinstance(value, str):
            if value in ('true', 'false'):
                return value == 'true'
            return ErrorVal(f"cannot convert '{value}' to bool")
        if isinstance(value, (bool, int, float)):
            return value != 0
        return not isinstance(value, NilVal)

    builtins = {
        'print': std_print,
        'println': std_println,
        'printf': std_printf,
        'length': std_length,
        'size': std_length,
        'to_string': std_to_string,
        'typeof': std_typeof,
        'range': std_range,
        'array': std_array,
        'list': std_list,
        'tuple': std_tuple,
        'addr': std_addr,
        'is_same_ref': std_is_same_ref,
        'error': std_error,
        'to_int': std_to_int,
        'to_float': std_to_float,
        'to_bool': std_to_bool,
    }
    return {name: Builtin(name, fn) for name, fn in builtins.items()}
