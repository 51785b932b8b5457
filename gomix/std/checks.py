"""Argument checking shared by the builtin modules."""

from typing import Any, List, Optional

from gomix.types import (
    ArrayVal, ErrorVal, FunctionValue, ListVal, RangeVal, SetVal, TupleVal,
    is_error, type_name,
)
from gomix.builtin_function import Builtin

ORDINALS = ('first', 'second', 'third', 'fourth')


def arity_error(args: List[Any], want: Any) -> ErrorVal:
    return ErrorVal(f"wrong number of arguments. got={len(args)}, want={want}")


def check_arity(args: List[Any], want: int) -> Optional[ErrorVal]:
    if len(args) != want:
        return arity_error(args, want)
    return None


def argument_error(name: str, expected: str, value: Any, position: Optional[int] = None) -> ErrorVal:
    """Build the error for an argument of the wrong type.

    `position` is the zero-based argument index, or None when the builtin
    takes a single argument.
    """
    which = 'argument' if position is None else f"{ORDINALS[position]} argument"
    return ErrorVal(f"{which} to `{name}` must be {expected}, got '{type_name(value)}'")


def is_callable(value: Any) -> bool:
    return isinstance(value, (FunctionValue, Builtin))


def call_predicate(runtime: Any, fn: Any, *args: Any) -> Any:
    """Call `fn` and reduce its result to a Python bool, passing errors through."""
    res = runtime.call_function(fn, *args)
    if is_error(res):
        return res
    return res is True


def sequence_items(value: Any) -> Optional[List[Any]]:
    """Elements of an iterable collection, or None for anything else."""
    if isinstance(value, (ArrayVal, ListVal, TupleVal)):
        return list(value.items)
    if isinstance(value, RangeVal):
        return list(value)
    if isinstance(value, SetVal):
        return value.values()
    return None
