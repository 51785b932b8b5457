"""Abstract Syntax Tree (AST) definitions for the GoMix language.

Every node records the line and column of the token that introduced it so
that parse and runtime errors can point back into the source. Statement
nodes and expression nodes share the :class:`Node` base; the interpreter
dispatches on the concrete class.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class Node:
    """Base class for all AST nodes."""
    line: int = field(default=0, kw_only=True, compare=False)
    column: int = field(default=0, kw_only=True, compare=False)


@dataclass
class Program(Node):
    body: List[Node]


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class VarDecl(Node):
    kind: str  # 'var', 'let' or 'const'
    name: str
    expr: Node


@dataclass
class Assign(Node):
    target: Node
    op: str  # '=' or a compound operator such as '+='
    value: Node


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class ContinueStmt(Node):
    pass


@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_block: Optional[Node]  # Block or a nested IfStmt for `else if`


@dataclass
class WhileStmt(Node):
    conditions: List[Node]
    body: Block


@dataclass
class ForStmt(Node):
    init: List[Node]
    condition: Optional[Node]
    updates: List[Node]
    body: Block


@dataclass
class ForEachStmt(Node):
    name: str
    iterable: Node
    body: Block


@dataclass
class FuncDecl(Node):
    name: str
    params: List[str]
    body: Block


@dataclass
class FuncExpr(Node):
    params: List[str]
    body: Block


@dataclass
class StructDecl(Node):
    name: str
    fields: List[VarDecl]
    methods: List[FuncDecl]


@dataclass
class EnumDecl(Node):
    name: str
    members: List[Tuple[str, Optional[Node]]]


@dataclass
class ImportStmt(Node):
    name: str
    alias: Optional[str]


@dataclass
class SwitchCase(Node):
    values: List[Node]  # empty for the default clause
    body: List[Node]
    is_default: bool = False


@dataclass
class SwitchStmt(Node):
    subject: Node
    cases: List[SwitchCase]


@dataclass
class NewExpr(Node):
    struct_name: str
    args: List[Node]


@dataclass
class Call(Node):
    callee: Node
    args: List[Node]


@dataclass
class Member(Node):
    target: Node
    name: str


@dataclass
class Index(Node):
    target: Node
    index: Node


@dataclass
class Slice(Node):
    target: Node
    start: Optional[Node]
    end: Optional[Node]


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass
class Paren(Node):
    expr: Node


@dataclass
class RangeLit(Node):
    start: Node
    end: Node


@dataclass
class ArrayLit(Node):
    elements: List[Node]


@dataclass
class MapLit(Node):
    entries: List[Tuple[Node, Node]]


@dataclass
class SetLit(Node):
    elements: List[Node]


@dataclass
class Ident(Node):
    name: str


@dataclass
class Literal(Node):
    value: object  # int, float, str, bool or None (nil)
    kind: str  # 'int', 'float', 'string', 'bool', 'nil'
