"""Tree-walking evaluator for the GoMix language.

The :class:`Interpreter` executes the AST produced by :mod:`gomix.parser`
against a chain of :class:`~gomix.environment.Environment` scopes. Every
evaluation step returns a runtime value; nothing is raised for language
level failures.

Two kinds of values get special treatment while walking the tree:

* Control sentinels (``BREAK``, ``CONTINUE`` and :class:`ReturnValue`) stop
  the enclosing block immediately and travel upward until a loop or a
  function call consumes them.
* :class:`ErrorVal` results stop any operation that needs to use them
  (operators, indexing, member access, conditions, iteration) and an
  expression statement that evaluates to an error ends its block. Errors
  can still be bound by a declaration and passed to functions, so
  programs may inspect them with ``typeof``.

Only genuine interpreter bugs surface as Python exceptions; the CLI
catches those once and reports them as runtime faults.
"""

from __future__ import annotations

import sys
from typing import Any, Dict, List, Optional, TextIO

from .ast import (
    Program, Block, VarDecl, Assign, ReturnStmt, BreakStmt, ContinueStmt,
    ExprStmt, IfStmt, WhileStmt, ForStmt, ForEachStmt, FuncDecl, FuncExpr,
    StructDecl, EnumDecl, ImportStmt, SwitchStmt, NewExpr, Call, Member,
    Index, Slice, BinaryOp, UnaryOp, Paren, RangeLit, ArrayLit, MapLit,
    SetLit, Ident, Literal, Node,
)
from .builtin_function import Builtin, Package
from .environment import Environment
from .errors import GomixFault
from .parser import parse_program
from .std import load_builtins, load_packages
from .types import (
    NIL, BREAK, CONTINUE, NilVal, ErrorVal, ArrayVal, ListVal, TupleVal,
    MapVal, SetVal, RangeVal, FunctionValue, StructType, ObjectInstance,
    EnumType, BreakSignal, ContinueSignal, ReturnValue, is_error, is_int,
    is_number, is_signal, map_key, to_string, type_name, values_equal,
)

MAX_CALL_DEPTH = 1000
INT64_MIN = -2 ** 63
INT64_RANGE = 2 ** 64


def wrap_int(value: int) -> int:
    """Wrap an integer result into the signed 64-bit range."""
    return (value - INT64_MIN) % INT64_RANGE + INT64_MIN


def truncated_divmod(a: int, b: int):
    """Integer quotient and remainder truncated toward zero."""
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - b * q


###############################################################################
# Interpreter implementation
###############################################################################


class Interpreter:
    """Core interpreter that executes a GoMix AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 output: Optional[TextIO] = None, input_reader: Optional[TextIO] = None):
        self.global_env = Environment()
        self.builtins: Dict[str, Builtin] = {}
        self.packages: Dict[str, Package] = {}
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        self._output = output
        self._input = input_reader
        self.call_depth = 0
        if sys.getrecursionlimit() < 20 * MAX_CALL_DEPTH:
            sys.setrecursionlimit(20 * MAX_CALL_DEPTH)
        self.load_standard_module()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def load_standard_module(self):
        self.builtins = load_builtins()
        self.packages = load_packages()
        if self.debug_level >= 1:
            self.debug(f"loaded {len(self.builtins)} builtins, packages: {', '.join(sorted(self.packages))}")

    # Runtime capability handed to builtins

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    def get_input_reader(self) -> TextIO:
        return self._input if self._input is not None else sys.stdin

    def call_function(self, fn: Any, *args: Any) -> Any:
        return self.invoke(fn, list(args))

    # Public API

    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Execute `program` and return the value of its last statement."""
        if env is None:
            env = self.global_env
        if self.debug_level >= 1:
            self.debug(f"run program with {len(program.body)} statements")
        result = self.execute_block(program.body, env)
        if isinstance(result, ReturnValue):
            result = result.value
        elif isinstance(result, (BreakSignal, ContinueSignal)):
            result = ErrorVal(f"{type_name(result)} statement outside of loop")
        if self.debug_level >= 1:
            self.debug(f"program finished: {type_name(result)} {to_string(result)}")
        return result

    def error(self, node: Node, message: str) -> ErrorVal:
        return ErrorVal(f"[{node.line}:{node.column}] {message}")

    # Statements

    def execute_block(self, statements: List[Node], env: Environment) -> Any:
        result: Any = NIL
        for stmt in statements:
            result = self.execute(stmt, env)
            if is_signal(result) or is_error(result):
                return result
        return result

    def execute(self, node: Node, env: Environment) -> Any:
        if isinstance(node, ExprStmt):
            return self.evaluate(node.expr, env)
        if isinstance(node, VarDecl):
            return self.execute_declaration(node, env)
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(parent=env))
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            if is_error(cond):
                return cond
            truthy = self.is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                return self.execute(node.then_block, env)
            if node.else_block is not None:
                return self.execute(node.else_block, env)
            return NIL
        if isinstance(node, WhileStmt):
            return self.execute_while(node, env)
        if isinstance(node, ForStmt):
            return self.execute_for(node, env)
        if isinstance(node, ForEachStmt):
            return self.execute_foreach(node, env)
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else NIL
            return ReturnValue(value)
        if isinstance(node, BreakStmt):
            return BREAK
        if isinstance(node, ContinueStmt):
            return CONTINUE
        if isinstance(node, FuncDecl):
            func_value = FunctionValue(node.name, node.params, node.body, env)
            if env.bind(node.name, func_value):
                return self.error(node, f"identifier redeclaration found: {node.name}")
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return NIL
        if isinstance(node, StructDecl):
            return self.execute_struct(node, env)
        if isinstance(node, EnumDecl):
            return self.execute_enum(node, env)
        if isinstance(node, ImportStmt):
            return self.execute_import(node, env)
        if isinstance(node, SwitchStmt):
            return self.execute_switch(node, env)
        # expressions used directly as statements
        return self.evaluate(node, env)

    def execute_declaration(self, node: VarDecl, env: Environment) -> Any:
        value = self.evaluate(node.expr, env)
        if node.name in env.values:
            return self.error(node, f"identifier redeclaration found: {node.name}")
        if node.kind == 'const':
            env.bind_const(node.name, value)
        elif node.kind == 'let':
            env.bind_let(node.name, value, type_name(value))
        else:
            env.bind(node.name, value)
        if self.debug_level >= 2:
            self.debug(f"declare {node.kind} {node.name}: {type_name(value)} = {to_string(value)}")
        # a stored error is handled by the program, so the block keeps going
        return NIL if is_error(value) else value

    def execute_while(self, node: WhileStmt, env: Environment) -> Any:
        loop_env = Environment(parent=env)
        iteration = 0
        while True:
            for condition in node.conditions:
                cond = self.evaluate(condition, loop_env)
                if is_error(cond):
                    return cond
                if not self.is_truthy(cond):
                    return NIL
            iteration += 1
            if self.debug_level >= 3:
                self.debug(f"while iteration {iteration}")
            res = self.execute_block(node.body.statements, Environment(parent=loop_env))
            if is_error(res) or isinstance(res, ReturnValue):
                return res
            if isinstance(res, BreakSignal):
                return NIL

    def execute_for(self, node: ForStmt, env: Environment) -> Any:
        loop_env = Environment(parent=env)
        for init in node.init:
            res = self.execute(init, loop_env)
            if is_error(res):
                return res
        iteration = 0
        while True:
            if node.condition is not None:
                cond = self.evaluate(node.condition, loop_env)
                if is_error(cond):
                    return cond
                if not self.is_truthy(cond):
                    return NIL
            iteration += 1
            if self.debug_level >= 3:
                self.debug(f"for iteration {iteration}")
            # each iteration sees its own copy of the loop variables
            iteration_env = loop_env.snapshot()
            res = self.execute_block(node.body.statements, Environment(parent=iteration_env))
            loop_env.values.update(iteration_env.values)
            loop_env.let_types.update(iteration_env.let_types)
            if is_error(res) or isinstance(res, ReturnValue):
                return res
            if isinstance(res, BreakSignal):
                return NIL
            for update in node.updates:
                upd = self.execute(update, loop_env)
                if is_error(upd):
                    return upd

    def execute_foreach(self, node: ForEachStmt, env: Environment) -> Any:
        iterable = self.evaluate(node.iterable, env)
        if is_error(iterable):
            return iterable
        if isinstance(iterable, RangeVal):
            items: Any = iter(iterable)
        elif isinstance(iterable, (ArrayVal, ListVal, TupleVal)):
            items = list(iterable.items)
        else:
            return self.error(node, f"foreach expects a range, array, list or tuple, got ({type_name(iterable)})")
        loop_env = Environment(parent=env)
        for item in items:
            if self.debug_level >= 3:
                self.debug(f"foreach {node.name} = {to_string(item)}")
            iteration_env = Environment(parent=loop_env)
            iteration_env.bind(node.name, item)
            res = self.execute_block(node.body.statements, iteration_env)
            if is_error(res) or isinstance(res, ReturnValue):
                return res
            if isinstance(res, BreakSignal):
                break
        return NIL

    def execute_struct(self, node: StructDecl, env: Environment) -> Any:
        struct = StructType(node.name, env)
        for decl in node.fields:
            value = self.evaluate(decl.expr, env)
            if is_error(value):
                return value
            if decl.name in struct.class_fields:
                return self.error(decl, f"duplicate field ({decl.name}) in struct ({node.name})")
            struct.class_fields[decl.name] = value
            if decl.kind == 'const':
                struct.const_fields.add(decl.name)
            elif decl.kind == 'let':
                struct.let_types[decl.name] = type_name(value)
        for method in node.methods:
            if method.name in struct.methods:
                return self.error(method, f"duplicate method ({method.name}) in struct ({node.name})")
            struct.methods[method.name] = FunctionValue(method.name, method.params, method.body, env)
        if env.bind(node.name, struct):
            return self.error(node, f"identifier redeclaration found: {node.name}")
        if self.debug_level >= 2:
            self.debug(f"define struct {node.name} fields={list(struct.class_fields)} methods={list(struct.methods)}")
        return NIL

    def execute_enum(self, node: EnumDecl, env: Environment) -> Any:
        enum = EnumType(node.name)
        next_value = 0
        for member, expr in node.members:
            if expr is not None:
                value = self.evaluate(expr, env)
                if is_error(value):
                    return value
                if not is_int(value):
                    return self.error(expr, f"enum member ({member}) must be an int, got ({type_name(value)})")
                next_value = value
            if member in enum.members:
                return self.error(node, f"duplicate member ({member}) in enum ({node.name})")
            enum.members[member] = next_value
            next_value += 1
        if env.bind_const(node.name, enum):
            return self.error(node, f"identifier redeclaration found: {node.name}")
        return NIL

    def execute_import(self, node: ImportStmt, env: Environment) -> Any:
        package = self.packages.get(node.name)
        if package is None:
            return self.error(node, f"package not found: {node.name}")
        name = node.alias or node.name
        existing, found = env.lookup(name)
        if found and existing is package:
            return NIL
        if name in env.values:
            return self.error(node, f"identifier redeclaration found: {name}")
        env.bind_const(name, package)
        if self.debug_level >= 1:
            self.debug(f"import {node.name} as {name}")
        return NIL

    def execute_switch(self, node: SwitchStmt, env: Environment) -> Any:
        subject = self.evaluate(node.subject, env)
        if is_error(subject):
            return subject
        start: Optional[int] = None
        default_index: Optional[int] = None
        for i, case in enumerate(node.cases):
            if case.is_default:
                default_index = i
                continue
            for value_node in case.values:
                value = self.evaluate(value_node, env)
                if is_error(value):
                    return value
                if values_equal(subject, value):
                    start = i
                    break
            if start is not None:
                break
        if start is None:
            start = default_index
        if start is None:
            return NIL
        switch_env = Environment(parent=env)
        result: Any = NIL
        for case in node.cases[start:]:
            result = self.execute_block(case.body, switch_env)
            if isinstance(result, BreakSignal):
                return NIL
            if is_error(result) or is_signal(result):
                return result
        return result

    # Expressions

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            return NIL if node.kind == 'nil' else node.value
        if isinstance(node, Ident):
            value, found = env.lookup(node.name)
            if found:
                return value
            builtin = self.builtins.get(node.name)
            if builtin is not None:
                return builtin
            return self.error(node, f"identifier not found: {node.name}")
        if isinstance(node, BinaryOp):
            return self.evaluate_binary(node, env)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            if is_error(operand):
                return operand
            return self.apply_unary_op(node, operand)
        if isinstance(node, Paren):
            return self.evaluate(node.expr, env)
        if isinstance(node, Call):
            return self.evaluate_call(node, env)
        if isinstance(node, Assign):
            return self.assign_lvalue(node, env)
        if isinstance(node, Index):
            target = self.evaluate(node.target, env)
            if is_error(target):
                return target
            index = self.evaluate(node.index, env)
            if is_error(index):
                return index
            return self.index_value(node, target, index)
        if isinstance(node, Slice):
            return self.evaluate_slice(node, env)
        if isinstance(node, Member):
            target = self.evaluate(node.target, env)
            if is_error(target):
                return target
            return self.member_value(node, target)
        if isinstance(node, RangeLit):
            start = self.evaluate(node.start, env)
            if is_error(start):
                return start
            end = self.evaluate(node.end, env)
            if is_error(end):
                return end
            if not (is_int(start) and is_int(end)):
                return self.error(node, f"range bounds must be int, got ({type_name(start)}) and ({type_name(end)})")
            return RangeVal(start, end)
        if isinstance(node, ArrayLit):
            items = self.evaluate_all(node.elements, env)
            if is_error(items):
                return items
            return ArrayVal(items)
        if isinstance(node, MapLit):
            result = MapVal()
            for key_node, value_node in node.entries:
                key = self.evaluate(key_node, env)
                if is_error(key):
                    return key
                value = self.evaluate(value_node, env)
                if is_error(value):
                    return value
                result.put(map_key(key), value)
            return result
        if isinstance(node, SetLit):
            items = self.evaluate_all(node.elements, env)
            if is_error(items):
                return items
            members = SetVal()
            for item in items:
                members.add(item)
            return members
        if isinstance(node, FuncExpr):
            return FunctionValue('anonymous', node.params, node.body, env.snapshot())
        if isinstance(node, NewExpr):
            return self.evaluate_new(node, env)
        raise GomixFault(f"evaluate: unexpected node type {type(node).__name__}")

    def evaluate_all(self, nodes: List[Node], env: Environment) -> Any:
        """Evaluate `nodes` left to right; the first error is returned instead of the list."""
        values = []
        for n in nodes:
            value = self.evaluate(n, env)
            if is_error(value):
                return value
            values.append(value)
        return values

    def evaluate_arguments(self, nodes: List[Node], env: Environment) -> List[Any]:
        # Errors are ordinary argument values; the callee decides what to do with them.
        return [self.evaluate(n, env) for n in nodes]

    def evaluate_binary(self, node: BinaryOp, env: Environment) -> Any:
        left = self.evaluate(node.left, env)
        if is_error(left):
            return left
        if node.op == '&&':
            if not self.is_truthy(left):
                return False
            right = self.evaluate(node.right, env)
            return right if is_error(right) else self.is_truthy(right)
        if node.op == '||':
            if self.is_truthy(left):
                return True
            right = self.evaluate(node.right, env)
            return right if is_error(right) else self.is_truthy(right)
        right = self.evaluate(node.right, env)
        if is_error(right):
            return right
        return self.apply_binary_op(node, node.op, left, right)

    def evaluate_call(self, node: Call, env: Environment) -> Any:
        callee_node = node.callee
        if isinstance(callee_node, Member):
            receiver = self.evaluate(callee_node.target, env)
            if is_error(receiver):
                return receiver
            fn = self.resolve_method(callee_node, receiver)
        elif isinstance(callee_node, Ident):
            fn, found = env.lookup(callee_node.name)
            if not found:
                fn = self.builtins.get(callee_node.name)
                if fn is None:
                    return self.error(callee_node, f"function not found: ({callee_node.name})")
        else:
            fn = self.evaluate(callee_node, env)
        if is_error(fn):
            return fn
        args = self.evaluate_arguments(node.args, env)
        if self.debug_level >= 2:
            self.debug(f"call {to_string(fn)} with ({', '.join(to_string(a) for a in args)})")
        return self.invoke(fn, args, node)

    def resolve_method(self, node: Member, receiver: Any) -> Any:
        """Find the callable named by `receiver.name(...)`."""
        if isinstance(receiver, Package):
            fn = receiver.functions.get(node.name)
            if fn is None:
                return self.error(node, f"function '{node.name}' not found in package '{receiver.name}'")
            return fn
        if isinstance(receiver, ObjectInstance):
            method = receiver.struct.methods.get(node.name)
            if method is not None:
                return self.bind_method(receiver.struct, receiver, method)
            if node.name in receiver.fields or node.name in receiver.struct.class_fields:
                return self.member_value(node, receiver)
            return self.error(node, f"method ({node.name}) not found in struct ({receiver.struct.name})")
        if isinstance(receiver, StructType):
            method = receiver.methods.get(node.name)
            if method is not None:
                return self.bind_method(receiver, NIL, method)
            if node.name in receiver.class_fields:
                return receiver.class_fields[node.name]
            return self.error(node, f"method ({node.name}) not found in struct ({receiver.name})")
        return self.member_value(node, receiver)

    def bind_method(self, struct: StructType, instance: Any, method: FunctionValue) -> FunctionValue:
        """Layer `this`/`self` over the method's defining scope."""
        receiver_env = Environment(parent=method.env)
        receiver_env.bind('this', instance)
        receiver_env.bind('self', struct)
        return FunctionValue(method.name, method.params, method.body, receiver_env)

    def evaluate_new(self, node: NewExpr, env: Environment) -> Any:
        struct, found = env.lookup(node.struct_name)
        if not found or not isinstance(struct, StructType):
            return self.error(node, f"struct type '{node.struct_name}' not defined")
        args = self.evaluate_arguments(node.args, env)
        instance = ObjectInstance(struct)
        init = struct.constructor()
        if init is None and args:
            return self.error(node, f"wrong number of arguments: expected 0, got {len(args)}")
        if init is not None:
            if self.debug_level >= 2:
                self.debug(f"construct {struct.name} with ({', '.join(to_string(a) for a in args)})")
            res = self.invoke(self.bind_method(struct, instance, init), args, node)
            if is_error(res):
                return res
        return instance

    def evaluate_slice(self, node: Slice, env: Environment) -> Any:
        target = self.evaluate(node.target, env)
        if is_error(target):
            return target
        bounds = []
        for bound in (node.start, node.end):
            if bound is None:
                bounds.append(None)
                continue
            value = self.evaluate(bound, env)
            if is_error(value):
                return value
            if not is_int(value):
                return self.error(node, f"slice bounds must be int, got ({type_name(value)})")
            bounds.append(value)
        if isinstance(target, str):
            seq: Any = target
        elif isinstance(target, (ArrayVal, ListVal, TupleVal)):
            seq = target.items
        else:
            return self.error(node, f"slice operator not supported for ({type_name(target)})")
        length = len(seq)
        start = self.clamp_bound(bounds[0], length, 0)
        end = self.clamp_bound(bounds[1], length, length)
        if start > end:
            start = end
        part = seq[start:end]
        if isinstance(target, str):
            return part
        if isinstance(target, ArrayVal):
            return ArrayVal(list(part))
        if isinstance(target, ListVal):
            return ListVal(list(part))
        return TupleVal(tuple(part))

    @staticmethod
    def clamp_bound(bound: Optional[int], length: int, default: int) -> int:
        if bound is None:
            return default
        if bound < 0:
            bound += length
        return max(0, min(bound, length))

    def index_value(self, node: Node, target: Any, index: Any) -> Any:
        if isinstance(target, MapVal):
            return target.get(map_key(index))
        if isinstance(target, (ArrayVal, ListVal, TupleVal, str, RangeVal)):
            if not is_int(index):
                return self.error(node, f"index must be int, got ({type_name(index)})")
            length = len(target.items) if isinstance(target, (ArrayVal, ListVal, TupleVal)) else len(target)
            i = index + length if index < 0 else index
            if i < 0 or i >= length:
                return self.error(node, f"index out of bounds: index {index}, length {length}")
            if isinstance(target, RangeVal):
                step = 1 if target.start <= target.end else -1
                return target.start + i * step
            if isinstance(target, str):
                return target[i]
            return target.items[i]
        return self.error(node, f"index operator not supported for ({type_name(target)})")

    def member_value(self, node: Member, target: Any) -> Any:
        name = node.name
        if isinstance(target, ObjectInstance):
            if name in target.fields:
                return target.fields[name]
            if name in target.struct.class_fields:
                return target.struct.class_fields[name]
            method = target.struct.methods.get(name)
            if method is not None:
                return self.bind_method(target.struct, target, method)
            return self.error(node, f"field ({name}) not found in struct ({target.struct.name})")
        if isinstance(target, StructType):
            if name in target.class_fields:
                return target.class_fields[name]
            method = target.methods.get(name)
            if method is not None:
                return self.bind_method(target, NIL, method)
            return self.error(node, f"field ({name}) not found in struct ({target.name})")
        if isinstance(target, EnumType):
            if name in target.members:
                return target.members[name]
            return self.error(node, f"member ({name}) not found in enum ({target.name})")
        if isinstance(target, Package):
            fn = target.functions.get(name)
            if fn is None:
                return self.error(node, f"function '{name}' not found in package '{target.name}'")
            return fn
        return self.error(node, f"cannot access member ({name}) of ({type_name(target)})")

    # Calls

    def invoke(self, fn: Any, args: List[Any], node: Optional[Node] = None) -> Any:
        if isinstance(fn, Builtin):
            result = fn.callback(self, self.output, *args)
            return NIL if result is None else result
        if isinstance(fn, FunctionValue):
            if len(args) != len(fn.params):
                message = f"wrong number of arguments: expected {len(fn.params)}, got {len(args)}"
                return self.error(node, message) if node is not None else ErrorVal(message)
            if self.call_depth >= MAX_CALL_DEPTH:
                return ErrorVal(f"stack overflow: maximum call depth ({MAX_CALL_DEPTH}) exceeded in ({fn.name})")
            call_env = Environment(parent=fn.env)
            for param, arg in zip(fn.params, args):
                call_env.bind(param, arg)
            self.call_depth += 1
            try:
                res = self.execute_block(fn.body.statements, call_env)
            finally:
                self.call_depth -= 1
            if isinstance(res, ReturnValue):
                return res.value
            if isinstance(res, (BreakSignal, ContinueSignal)):
                return ErrorVal(f"{type_name(res)} statement outside of loop in function ({fn.name})")
            if is_error(res):
                return res
            return NIL
        message = f"not a function: ({type_name(fn)})"
        return self.error(node, message) if node is not None else ErrorVal(message)

    # Assignment

    def assign_lvalue(self, node: Assign, env: Environment) -> Any:
        target = node.target
        compound = node.op[:-1] if node.op != '=' else None
        if isinstance(target, Ident):
            name = target.name
            if env.is_constant(name):
                return self.error(target, f"can't assign to constant ({name})")
            current, found = env.lookup(name)
            if not found:
                return self.error(target, f"identifier not found: {name}")
            value = self.evaluate(node.value, env)
            if is_error(value):
                return value
            if compound is not None:
                value = self.apply_binary_op(node, compound, current, value)
                if is_error(value):
                    return value
            locked = env.let_type(name)
            if locked is not None and locked != 'nil' and not isinstance(value, NilVal) and type_name(value) != locked:
                return self.error(target, f"can't assign `{type_name(value)}` to variable ({name}) of type `{locked}`")
            owner, _ = env.assign(name, value)
            if locked == 'nil' and owner is not None:
                owner.let_types[name] = type_name(value)
            if self.debug_level >= 2:
                self.debug(f"assign {name} = {to_string(value)}")
            return value
        if isinstance(target, Index):
            container = self.evaluate(target.target, env)
            if is_error(container):
                return container
            index = self.evaluate(target.index, env)
            if is_error(index):
                return index
            value = self.evaluate(node.value, env)
            if is_error(value):
                return value
            if compound is not None:
                current = self.index_value(target, container, index)
                if is_error(current):
                    return current
                value = self.apply_binary_op(node, compound, current, value)
                if is_error(value):
                    return value
            return self.assign_index(target, container, index, value)
        if isinstance(target, Member):
            obj = self.evaluate(target.target, env)
            if is_error(obj):
                return obj
            value = self.evaluate(node.value, env)
            if is_error(value):
                return value
            if compound is not None:
                current = self.member_value(target, obj)
                if is_error(current):
                    return current
                value = self.apply_binary_op(node, compound, current, value)
                if is_error(value):
                    return value
            return self.assign_member(target, obj, value)
        return self.error(node, 'invalid assignment target')

    def assign_index(self, node: Index, container: Any, index: Any, value: Any) -> Any:
        if isinstance(container, MapVal):
            container.put(map_key(index), value)
            return value
        if isinstance(container, (ArrayVal, ListVal)):
            if not is_int(index):
                return self.error(node, f"index must be int, got ({type_name(index)})")
            length = len(container.items)
            i = index + length if index < 0 else index
            if i < 0 or i >= length:
                return self.error(node, f"index out of bounds: index {index}, length {length}")
            container.items[i] = value
            return value
        if isinstance(container, TupleVal):
            return self.error(node, 'tuple elements cannot be modified')
        return self.error(node, f"index assignment not supported for ({type_name(container)})")

    def assign_member(self, node: Member, obj: Any, value: Any) -> Any:
        name = node.name
        if isinstance(obj, ObjectInstance):
            struct = obj.struct
            if name in struct.const_fields:
                return self.error(node, f"can't assign to constant field ({name}) in struct ({struct.name})")
            error = self.check_field_type(node, struct, name, value)
            if error is not None:
                return error
            obj.fields[name] = value
            return value
        if isinstance(obj, StructType):
            if name in obj.const_fields:
                return self.error(node, f"can't assign to constant field ({name}) in struct ({obj.name})")
            error = self.check_field_type(node, obj, name, value)
            if error is not None:
                return error
            obj.class_fields[name] = value
            return value
        if isinstance(obj, EnumType):
            return self.error(node, f"can't assign to enum member ({name}) of ({obj.name})")
        return self.error(node, f"cannot assign to member ({name}) of ({type_name(obj)})")

    def check_field_type(self, node: Member, struct: StructType, name: str, value: Any) -> Optional[ErrorVal]:
        expected = struct.let_types.get(name)
        if expected is None or expected == 'nil' or isinstance(value, NilVal):
            return None
        if type_name(value) != expected:
            return self.error(node, f"can't assign `{type_name(value)}` to field ({name}) of type `{expected}` in struct ({struct.name})")
        return None

    # Operators

    def is_truthy(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if is_int(value):
            return value != 0
        if isinstance(value, str):
            return len(value) > 0
        if isinstance(value, NilVal):
            return False
        return True

    def apply_unary_op(self, node: UnaryOp, operand: Any) -> Any:
        op = node.op
        if op == '!':
            return not self.is_truthy(operand)
        if op == '-':
            if is_int(operand):
                return wrap_int(-operand)
            if isinstance(operand, float):
                return -operand
        if op == '~' and is_int(operand):
            return ~operand
        return self.error(node, f"operator ({op}) not implemented for ({type_name(operand)})")

    def apply_binary_op(self, node: Node, op: str, a: Any, b: Any) -> Any:
        if op == '==':
            return values_equal(a, b)
        if op == '!=':
            return not values_equal(a, b)
        if op == '+' and (isinstance(a, str) or isinstance(b, str)):
            return to_string(a) + to_string(b)
        if is_int(a) and is_int(b):
            return self.apply_int_op(node, op, a, b)
        if is_number(a) and is_number(b):
            x, y = float(a), float(b)
            if op == '+':
                return x + y
            if op == '-':
                return x - y
            if op == '*':
                return x * y
            if op == '/':
                if y == 0.0:
                    return self.error(node, 'division by zero')
                return x / y
            if op in ('<', '<=', '>', '>='):
                return self.compare(op, x, y)
        if isinstance(a, str) and isinstance(b, str) and op in ('<', '<=', '>', '>='):
            return self.compare(op, a, b)
        if isinstance(a, bool) and isinstance(b, bool) and op in ('&', '|', '^'):
            if op == '&':
                return a and b
            if op == '|':
                return a or b
            return a != b
        return self.error(node, f"operator ({op}) not implemented for ({type_name(a)}) and ({type_name(b)})")

    def apply_int_op(self, node: Node, op: str, a: int, b: int) -> Any:
        if op == '+':
            return wrap_int(a + b)
        if op == '-':
            return wrap_int(a - b)
        if op == '*':
            return wrap_int(a * b)
        if op in ('/', '%'):
            if b == 0:
                return self.error(node, 'division by zero')
            quotient, remainder = truncated_divmod(a, b)
            return wrap_int(quotient) if op == '/' else remainder
        if op == '&':
            return a & b
        if op == '|':
            return a | b
        if op == '^':
            return a ^ b
        if op in ('<<', '>>'):
            if b < 0:
                return self.error(node, f"negative shift count: {b}")
            # every bit is shifted out of a 64-bit integer
            if b >= 64:
                return 0 if op == '<<' or a >= 0 else -1
            return wrap_int(a << b) if op == '<<' else a >> b
        if op in ('<', '<=', '>', '>='):
            return self.compare(op, a, b)
        return self.error(node, f"operator ({op}) not implemented for (int) and (int)")

    @staticmethod
    def compare(op: str, a: Any, b: Any) -> bool:
        if op == '<':
            return a < b
        if op == '<=':
            return a <= b
        if op == '>':
            return a > b
        return a >= b


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a GoMix program from a source string."""
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.run(ast_program)
    finally:
        interpreter.close()


def run_file(file_path: str, debug_level: int = 0) -> Any:
    """Parse and run a GoMix file, returning the program result."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level)
