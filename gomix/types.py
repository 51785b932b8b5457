"""Runtime value model for GoMix.

Primitive values are represented directly by Python objects: ``int`` for
Integer, ``float`` for Float, ``str`` for String and ``bool`` for Boolean.
Everything else has a dedicated class defined here. Collection classes use
identity equality (``eq=False``) because GoMix compares them by reference
and aliasing must be observable.

Map and Set keep a side list of keys in insertion order. Iteration and
display always walk that list, never the backing dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from .builtin_function import Builtin, Package


class NilVal:
    """Marker object for the GoMix `nil` value."""
    _instance: Optional['NilVal'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()


@dataclass
class ErrorVal:
    """Represents a GoMix error value.

    Errors are first-class values: they are returned through the normal
    value path, may be stored in variables, passed to functions and
    inspected with ``typeof``. Operators, indexing and member access stop
    as soon as an operand is an error, and that error becomes their result.
    """
    message: str

    def __repr__(self) -> str:
        return f"Error({self.message!r})"


@dataclass(eq=False)
class ArrayVal:
    """Ordered, mutable sequence created by ``[a, b, ...]`` or ``array(...)``."""
    items: List[Any]

    def __repr__(self) -> str:
        return f"Array({self.items!r})"


@dataclass(eq=False)
class ListVal:
    """Ordered, mutable, heterogeneous sequence created by ``list(...)``."""
    items: List[Any]

    def __repr__(self) -> str:
        return f"List({self.items!r})"


@dataclass(eq=False)
class TupleVal:
    """Ordered, immutable sequence created by ``tuple(...)``.

    The elements are held in a Python tuple; no operation mutates them.
    """
    items: Tuple[Any, ...]

    def __repr__(self) -> str:
        return f"Tuple({self.items!r})"


@dataclass(eq=False)
class MapVal:
    """Insertion-ordered map with string keys."""
    keys: List[str] = field(default_factory=list)
    pairs: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Any:
        return self.pairs.get(key, NIL)

    def put(self, key: str, value: Any) -> None:
        if key not in self.pairs:
            self.keys.append(key)
        self.pairs[key] = value

    def remove(self, key: str) -> bool:
        if key not in self.pairs:
            return False
        del self.pairs[key]
        self.keys.remove(key)
        return True

    def __len__(self) -> int:
        return len(self.keys)


@dataclass(eq=False)
class SetVal:
    """Insertion-ordered set of unique members, keyed by display form."""
    keys: List[str] = field(default_factory=list)
    members: Dict[str, Any] = field(default_factory=dict)

    def add(self, value: Any) -> bool:
        key = map_key(value)
        if key in self.members:
            return False
        self.keys.append(key)
        self.members[key] = value
        return True

    def discard(self, value: Any) -> bool:
        key = map_key(value)
        if key not in self.members:
            return False
        del self.members[key]
        self.keys.remove(key)
        return True

    def __contains__(self, value: Any) -> bool:
        return map_key(value) in self.members

    def values(self) -> List[Any]:
        return [self.members[k] for k in self.keys]

    def __len__(self) -> int:
        return len(self.keys)


@dataclass(frozen=True)
class RangeVal:
    """Inclusive integer range ``start...end``; may count downwards."""
    start: int
    end: int

    def __iter__(self):
        step = 1 if self.start <= self.end else -1
        return iter(range(self.start, self.end + step, step))

    def __len__(self) -> int:
        return abs(self.end - self.start) + 1


class FunctionValue:
    """Represents a user-defined GoMix function.

    `env` is the scope the function closes over. Named declarations keep a
    live reference to their defining scope; function literals carry a
    snapshot taken when the literal is evaluated.
    """
    def __init__(self, name: str, params: List[str], body: Any, env: Any):
        self.name = name
        self.params = params
        self.body = body
        self.env = env

    def __repr__(self) -> str:
        return f"<function {self.name}>"


class StructType:
    """A user-defined struct type.

    Class (static) fields live in `class_fields`. `const_fields` and
    `let_types` record the declaration-time annotations of those fields so
    writes can be checked independently of the stored values.
    """
    def __init__(self, name: str, env: Any):
        self.name = name
        self.env = env
        self.methods: Dict[str, FunctionValue] = {}
        self.class_fields: Dict[str, Any] = {}
        self.const_fields: Set[str] = set()
        self.let_types: Dict[str, str] = {}

    def constructor(self) -> Optional[FunctionValue]:
        return self.methods.get('init')

    def __repr__(self) -> str:
        return f"<struct {self.name}>"


class ObjectInstance:
    """An instance of a StructType with its own field table."""
    def __init__(self, struct: StructType):
        self.struct = struct
        self.fields: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"<object {self.struct.name}>"


class EnumType:
    """A named group of integer constants."""
    def __init__(self, name: str):
        self.name = name
        self.members: Dict[str, int] = {}

    def __repr__(self) -> str:
        return f"<enum {self.name}>"


###############################################################################
# Control-flow sentinels
###############################################################################


class BreakSignal:
    def __repr__(self) -> str:
        return 'break'


class ContinueSignal:
    def __repr__(self) -> str:
        return 'continue'


BREAK = BreakSignal()
CONTINUE = ContinueSignal()


@dataclass
class ReturnValue:
    """Wraps the payload of a `return` until the enclosing call unwraps it."""
    value: Any


def is_signal(value: Any) -> bool:
    return isinstance(value, (BreakSignal, ContinueSignal, ReturnValue))


def is_error(value: Any) -> bool:
    return isinstance(value, ErrorVal)


###############################################################################
# Helpers
###############################################################################


def is_int(value: Any) -> bool:
    # bool is a subclass of int in Python but a distinct GoMix type
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    return is_int(value) or isinstance(value, float)


def type_name(value: Any) -> str:
    """Return the GoMix type name of a runtime value, as `typeof` reports it."""
    if isinstance(value, bool):
        return 'bool'
    if isinstance(value, int):
        return 'int'
    if isinstance(value, float):
        return 'float'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, NilVal):
        return 'nil'
    if isinstance(value, ErrorVal):
        return 'error'
    if isinstance(value, ArrayVal):
        return 'array'
    if isinstance(value, ListVal):
        return 'list'
    if isinstance(value, TupleVal):
        return 'tuple'
    if isinstance(value, MapVal):
        return 'map'
    if isinstance(value, SetVal):
        return 'set'
    if isinstance(value, RangeVal):
        return 'range'
    if isinstance(value, (FunctionValue, Builtin)):
        return 'func'
    if isinstance(value, StructType):
        return 'struct'
    if isinstance(value, ObjectInstance):
        return 'object'
    if isinstance(value, EnumType):
        return 'enum'
    if isinstance(value, Package):
        return 'package'
    if isinstance(value, BreakSignal):
        return 'break'
    if isinstance(value, ContinueSignal):
        return 'continue'
    if isinstance(value, ReturnValue):
        return type_name(value.value)
    return type(value).__name__


def to_string(value: Any) -> str:
    """Convert a value to its display form (what `print` writes)."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:f}"
    if isinstance(value, str):
        return value
    if isinstance(value, NilVal):
        return 'nil'
    if isinstance(value, ErrorVal):
        return value.message
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_string(v) for v in value.items) + ']'
    if isinstance(value, ListVal):
        return 'list(' + ', '.join(to_string(v) for v in value.items) + ')'
    if isinstance(value, TupleVal):
        return 'tuple(' + ', '.join(to_string(v) for v in value.items) + ')'
    if isinstance(value, MapVal):
        return 'map{' + ', '.join(f"{k}: {to_string(value.pairs[k])}" for k in value.keys) + '}'
    if isinstance(value, SetVal):
        return 'set{' + ', '.join(value.keys) + '}'
    if isinstance(value, RangeVal):
        return f"range({value.start},{value.end})"
    if isinstance(value, FunctionValue):
        return f"func({value.name})"
    if isinstance(value, Builtin):
        return f"builtin({value.name})"
    if isinstance(value, StructType):
        return f"struct({value.name})"
    if isinstance(value, ObjectInstance):
        return f"object({value.struct.name})"
    if isinstance(value, EnumType):
        return f"enum({value.name})"
    if isinstance(value, Package):
        return f"package({value.name})"
    if isinstance(value, ReturnValue):
        return to_string(value.value)
    return repr(value)


def map_key(value: Any) -> str:
    """Key under which `value` is stored in a map or set."""
    return to_string(value)


def values_equal(a: Any, b: Any) -> bool:
    """GoMix `==`: numbers numerically, other primitives by value and
    everything else by reference identity."""
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, bool) and isinstance(b, bool):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    if isinstance(a, NilVal) or isinstance(b, NilVal):
        return a is b
    if isinstance(a, ErrorVal) and isinstance(b, ErrorVal):
        return a.message == b.message
    if isinstance(a, RangeVal) and isinstance(b, RangeVal):
        return a == b
    return a is b
