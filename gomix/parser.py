"""Parser for the GoMix language.

The parser pulls tokens from :class:`gomix.lexer.TokenStream` and builds the
AST defined in :mod:`gomix.ast`. Statements are recognized by their leading
token; expressions use precedence climbing over the binary operator table
below, with unary, postfix and primary forms handled by recursive descent.

Syntax errors never escape :meth:`Parser.parse`. When a statement fails to
parse, the error is recorded with its position and the parser skips ahead
to the next statement boundary (``;``, ``}`` or a statement keyword) so
that later errors are reported in the same pass. The returned Program
contains every statement that did parse.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .ast import (
    Program, Block, VarDecl, Assign, ReturnStmt, BreakStmt, ContinueStmt,
    ExprStmt, IfStmt, WhileStmt, ForStmt, ForEachStmt, FuncDecl, FuncExpr,
    StructDecl, EnumDecl, ImportStmt, SwitchCase, SwitchStmt, NewExpr, Call,
    Member, Index, Slice, BinaryOp, UnaryOp, Paren, RangeLit, ArrayLit,
    MapLit, SetLit, Ident, Literal, Node,
)
from .errors import ParseIssue, ParseFailure
from .lexer import (
    Token, TokenStream, IDENT, INT, FLOAT, STRING, CHAR, EOF, ILLEGAL,
    KEYWORDS, STATEMENT_KEYWORDS,
)

###############################################################################
# Operator table
###############################################################################

LOWEST = 0
OR = 40
AND = 50
BIT_OR = 60
BIT_XOR = 70
BIT_AND = 80
EQUALITY = 90
RELATIONAL = 100
RANGE = 105
SHIFT = 110
ADDITIVE = 120
MULTIPLICATIVE = 130

BINARY_PRECEDENCE = {
    '||': OR,
    '&&': AND,
    '|': BIT_OR,
    '^': BIT_XOR,
    '&': BIT_AND,
    '==': EQUALITY, '!=': EQUALITY,
    '<': RELATIONAL, '<=': RELATIONAL, '>': RELATIONAL, '>=': RELATIONAL,
    '...': RANGE,
    '<<': SHIFT, '>>': SHIFT,
    '+': ADDITIVE, '-': ADDITIVE,
    '*': MULTIPLICATIVE, '/': MULTIPLICATIVE, '%': MULTIPLICATIVE,
}

ASSIGN_OPS = ('=', '+=', '-=', '*=', '/=', '%=', '&=', '|=', '^=', '<<=', '>>=')
UNARY_OPS = ('!', '-', '~')
DECL_KEYWORDS = ('var', 'let', 'const')

INT64_MAX = 2 ** 63 - 1


def describe(token: Token) -> str:
    if token.kind == EOF:
        return 'end of input'
    if token.kind == STRING:
        return f'string "{token.literal}"'
    return f"'{token.literal}'"


class ParseError(Exception):
    """Unwinds a failed statement back to the recovery point."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


###############################################################################
# Parser implementation
###############################################################################


class Parser:
    def __init__(self, source: str):
        self.stream = TokenStream(source)
        self.current = self.stream.next()
        self.errors: List[ParseIssue] = []

    # Token helpers

    def peek(self) -> Token:
        return self.current

    def peek_next(self) -> Token:
        return self.stream.peek()

    def advance(self) -> Token:
        token = self.current
        self.current = self.stream.next()
        return token

    def match(self, *kinds: str) -> bool:
        return self.current.kind in kinds

    def consume(self, kind: str, context: str = '') -> Token:
        if self.current.kind != kind:
            where = f" {context}" if context else ''
            self.fail(f"expected '{kind}'{where}, got {describe(self.current)}")
        return self.advance()

    def consume_name(self, context: str) -> Token:
        if self.current.kind != IDENT:
            self.fail(f"expected identifier {context}, got {describe(self.current)}")
        return self.advance()

    def fail(self, message: str, token: Optional[Token] = None):
        raise ParseError(token or self.current, message)

    def has_errors(self) -> bool:
        return bool(self.errors)

    @staticmethod
    def pos(token: Token) -> dict:
        return {'line': token.line, 'column': token.column}

    # Error recovery

    def record(self, error: ParseError):
        token = error.token
        self.errors.append(ParseIssue(token.line, token.column, error.message))

    def synchronize(self, start: Token):
        if self.current is start and not self.match('}', EOF):
            self.advance()
        while not self.match(';', '}', 'case', 'default', EOF) and self.current.kind not in STATEMENT_KEYWORDS:
            self.advance()
        if self.match(';'):
            self.advance()

    def parse_statement_list(self, terminators: Tuple[str, ...]) -> List[Node]:
        statements: List[Node] = []
        while not self.match(EOF, *terminators):
            if self.match(';'):
                self.advance()
                continue
            start = self.current
            try:
                statements.append(self.parse_statement())
            except ParseError as e:
                self.record(e)
                self.synchronize(start)
                continue
            if self.match(';'):
                self.advance()
        return statements

    # Statements

    def parse(self) -> Program:
        body: List[Node] = []
        while True:
            body.extend(self.parse_statement_list(('}',)))
            if self.match(EOF):
                break
            stray = self.advance()
            self.errors.append(ParseIssue(stray.line, stray.column, "unexpected '}'"))
        return Program(body, line=1, column=1)

    def parse_statement(self) -> Node:
        token = self.current
        kind = token.kind
        if kind in DECL_KEYWORDS:
            return self.parse_declaration()
        if kind == 'return':
            return self.parse_return_stmt()
        if kind == 'break':
            self.advance()
            return BreakStmt(**self.pos(token))
        if kind == 'continue':
            self.advance()
            return ContinueStmt(**self.pos(token))
        if kind == '{':
            return self.parse_block()
        if kind == 'if':
            return self.parse_if_stmt()
        if kind == 'while':
            return self.parse_while_stmt()
        if kind == 'for':
            return self.parse_for_stmt()
        if kind == 'foreach':
            return self.parse_foreach_stmt()
        if kind == 'func' and self.peek_next().kind == IDENT:
            return self.parse_func_decl()
        if kind == 'struct':
            return self.parse_struct_decl()
        if kind == 'enum':
            return self.parse_enum_decl()
        if kind == 'import':
            return self.parse_import_stmt()
        if kind == 'switch':
            return self.parse_switch_stmt()
        expr = self.parse_expression()
        return ExprStmt(expr, **self.pos(token))

    def parse_declaration(self) -> VarDecl:
        kind_token = self.advance()
        return self.parse_declarator(kind_token.literal, kind_token)

    def parse_declarator(self, kind: str, pos_token: Token) -> VarDecl:
        name = self.consume_name(f"after '{kind}'")
        self.consume('=', f"after '{name.literal}' in declaration")
        expr = self.parse_expression()
        return VarDecl(kind, name.literal, expr, **self.pos(pos_token))

    def parse_return_stmt(self) -> ReturnStmt:
        token = self.advance()
        if self.match(';', '}', EOF):
            return ReturnStmt(None, **self.pos(token))
        return ReturnStmt(self.parse_expression(), **self.pos(token))

    def parse_block(self) -> Block:
        token = self.consume('{', 'to open block')
        statements = self.parse_statement_list(('}',))
        self.consume('}', 'to close block')
        return Block(statements, **self.pos(token))

    def parse_if_stmt(self) -> IfStmt:
        token = self.advance()
        if not self.match('('):
            self.fail(f"expected '(' after 'if', got {describe(self.current)}")
        condition = self.parse_expression()
        then_block = self.parse_block()
        else_block: Optional[Node] = None
        if self.match('else'):
            self.advance()
            if self.match('if'):
                else_block = self.parse_if_stmt()
            else:
                else_block = self.parse_block()
        return IfStmt(condition, then_block, else_block, **self.pos(token))

    def parse_while_stmt(self) -> WhileStmt:
        token = self.advance()
        self.consume('(', "after 'while'")
        conditions = [self.parse_expression()]
        while self.match(','):
            self.advance()
            conditions.append(self.parse_expression())
        self.consume(')', 'to close while conditions')
        body = self.parse_block()
        return WhileStmt(conditions, body, **self.pos(token))

    def parse_for_stmt(self) -> ForStmt:
        token = self.advance()
        self.consume('(', "after 'for'")
        init: List[Node] = []
        if not self.match(';'):
            decl_kind: Optional[str] = None
            while True:
                item_token = self.current
                if self.match(*DECL_KEYWORDS):
                    decl_kind = self.advance().literal
                    init.append(self.parse_declarator(decl_kind, item_token))
                elif decl_kind is not None and self.match(IDENT) and self.peek_next().kind == '=':
                    init.append(self.parse_declarator(decl_kind, item_token))
                else:
                    decl_kind = None
                    init.append(ExprStmt(self.parse_expression(), **self.pos(item_token)))
                if not self.match(','):
                    break
                self.advance()
        self.consume(';', 'after for-loop initializers')
        condition = None if self.match(';') else self.parse_expression()
        self.consume(';', 'after for-loop condition')
        updates: List[Node] = []
        if not self.match(')'):
            while True:
                item_token = self.current
                updates.append(ExprStmt(self.parse_expression(), **self.pos(item_token)))
                if not self.match(','):
                    break
                self.advance()
        self.consume(')', 'to close for-loop header')
        body = self.parse_block()
        return ForStmt(init, condition, updates, body, **self.pos(token))

    def parse_foreach_stmt(self) -> ForEachStmt:
        token = self.advance()
        name = self.consume_name("after 'foreach'")
        self.consume('in', f"after '{name.literal}' in foreach")
        iterable = self.parse_expression()
        body = self.parse_block()
        return ForEachStmt(name.literal, iterable, body, **self.pos(token))

    def parse_param_list(self) -> List[str]:
        self.consume('(', 'to open parameter list')
        params: List[str] = []
        if not self.match(')'):
            params.append(self.consume_name('in parameter list').literal)
            while self.match(','):
                self.advance()
                params.append(self.consume_name('in parameter list').literal)
        self.consume(')', 'to close parameter list')
        return params

    def parse_func_decl(self) -> FuncDecl:
        token = self.advance()
        name = self.consume_name("after 'func'")
        params = self.parse_param_list()
        body = self.parse_block()
        return FuncDecl(name.literal, params, body, **self.pos(token))

    def parse_struct_decl(self) -> StructDecl:
        token = self.advance()
        name = self.consume_name("after 'struct'")
        self.consume('{', f"to open struct '{name.literal}'")
        fields: List[VarDecl] = []
        methods: List[FuncDecl] = []
        while not self.match('}', EOF):
            if self.match(';'):
                self.advance()
            elif self.match(*DECL_KEYWORDS):
                fields.append(self.parse_declaration())
            elif self.match('func'):
                methods.append(self.parse_func_decl())
            else:
                self.fail(f"expected field or method in struct '{name.literal}', got {describe(self.current)}")
        self.consume('}', f"to close struct '{name.literal}'")
        return StructDecl(name.literal, fields, methods, **self.pos(token))

    def parse_enum_decl(self) -> EnumDecl:
        token = self.advance()
        name = self.consume_name("after 'enum'")
        self.consume('{', f"to open enum '{name.literal}'")
        members: List[Tuple[str, Optional[Node]]] = []
        while not self.match('}', EOF):
            member = self.consume_name(f"in enum '{name.literal}'")
            value: Optional[Node] = None
            if self.match('='):
                self.advance()
                value = self.parse_expression()
            members.append((member.literal, value))
            if not self.match(','):
                break
            self.advance()
        self.consume('}', f"to close enum '{name.literal}'")
        return EnumDecl(name.literal, members, **self.pos(token))

    def parse_import_stmt(self) -> ImportStmt:
        token = self.advance()
        if not self.match(IDENT, STRING):
            self.fail(f"expected package name after 'import', got {describe(self.current)}")
        name = self.advance().literal
        alias: Optional[str] = None
        if self.match('as'):
            self.advance()
            alias = self.consume_name("after 'as'").literal
        return ImportStmt(name, alias, **self.pos(token))

    def parse_switch_stmt(self) -> SwitchStmt:
        token = self.advance()
        if self.match(EOF):
            self.fail("unexpected end of input after 'switch'")
        subject = self.parse_expression()
        self.consume('{', 'to open switch body')
        cases: List[SwitchCase] = []
        seen_default = False
        while not self.match('}', EOF):
            clause = self.current
            if self.match('case'):
                self.advance()
                values = [self.parse_expression()]
                while self.match(','):
                    self.advance()
                    values.append(self.parse_expression())
                self.consume(':', 'after case value')
                body = self.parse_statement_list(('case', 'default', '}'))
                cases.append(SwitchCase(values, body, **self.pos(clause)))
            elif self.match('default'):
                if seen_default:
                    self.fail('switch statement can only have one default clause')
                seen_default = True
                self.advance()
                self.consume(':', "after 'default'")
                body = self.parse_statement_list(('case', 'default', '}'))
                cases.append(SwitchCase([], body, True, **self.pos(clause)))
            else:
                self.fail(f"expected 'case' or 'default' in switch, got {describe(self.current)}")
        self.consume('}', 'to close switch body')
        return SwitchStmt(subject, cases, **self.pos(token))

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_assignment()

    def parse_assignment(self) -> Node:
        left = self.parse_binary(LOWEST + 1)
        if self.current.kind in ASSIGN_OPS:
            op_token = self.advance()
            if not isinstance(left, (Ident, Index, Member)):
                self.fail(f"invalid assignment target for '{op_token.literal}'", op_token)
            value = self.parse_assignment()
            return Assign(left, op_token.literal, value, **self.pos(op_token))
        return left

    def parse_binary(self, min_precedence: int) -> Node:
        left = self.parse_unary()
        while True:
            op = self.current.kind
            precedence = BINARY_PRECEDENCE.get(op)
            if precedence is None or precedence < min_precedence:
                return left
            op_token = self.advance()
            right = self.parse_binary(precedence + 1)
            if op == '...':
                left = RangeLit(left, right, **self.pos(op_token))
            else:
                left = BinaryOp(op, left, right, **self.pos(op_token))

    def parse_unary(self) -> Node:
        if self.match(*UNARY_OPS):
            op_token = self.advance()
            operand = self.parse_unary()
            return UnaryOp(op_token.literal, operand, **self.pos(op_token))
        return self.parse_postfix()

    def parse_postfix(self) -> Node:
        node = self.parse_primary()
        while True:
            token = self.current
            if self.match('('):
                args = self.parse_arguments()
                node = Call(node, args, **self.pos(token))
                continue
            if self.match('['):
                self.advance()
                node = self.parse_index(node, token)
                continue
            if self.match('.'):
                self.advance()
                if self.current.kind != IDENT and self.current.kind not in KEYWORDS:
                    self.fail(f"expected member name after '.', got {describe(self.current)}")
                name = self.advance()
                node = Member(node, name.literal, **self.pos(name))
                continue
            return node

    def parse_arguments(self) -> List[Node]:
        self.consume('(', 'to open argument list')
        args: List[Node] = []
        if not self.match(')'):
            args.append(self.parse_expression())
            while self.match(','):
                self.advance()
                args.append(self.parse_expression())
        self.consume(')', 'to close argument list')
        return args

    def parse_index(self, target: Node, token: Token) -> Node:
        start: Optional[Node] = None
        if not self.match(':'):
            start = self.parse_expression()
            if self.match(']'):
                self.advance()
                return Index(target, start, **self.pos(token))
        self.consume(':', 'in slice')
        end = None if self.match(']') else self.parse_expression()
        self.consume(']', 'to close slice')
        return Slice(target, start, end, **self.pos(token))

    def parse_primary(self) -> Node:
        token = self.current
        kind = token.kind
        pos = self.pos(token)
        if kind == INT:
            self.advance()
            text = token.literal
            value = int(text, 16) if text[:2] in ('0x', '0X') else int(text)
            if value > INT64_MAX:
                self.fail(f"integer literal {text} out of range", token)
            return Literal(value, 'int', **pos)
        if kind == FLOAT:
            self.advance()
            return Literal(float(token.literal), 'float', **pos)
        if kind in (STRING, CHAR):
            self.advance()
            return Literal(token.literal, 'string', **pos)
        if kind in ('true', 'false'):
            self.advance()
            return Literal(kind == 'true', 'bool', **pos)
        if kind == 'nil':
            self.advance()
            return Literal(None, 'nil', **pos)
        if kind == IDENT:
            self.advance()
            return Ident(token.literal, **pos)
        if kind == '(':
            self.advance()
            expr = self.parse_expression()
            self.consume(')', 'to close parenthesized expression')
            return Paren(expr, **pos)
        if kind == '[':
            self.advance()
            elements = self.parse_sequence(']')
            return ArrayLit(elements, **pos)
        if kind == 'map':
            if self.peek_next().kind != '{':
                self.advance()
                return Ident(token.literal, **pos)
            self.advance()
            return self.parse_map_literal(token)
        if kind == 'set':
            if self.peek_next().kind != '{':
                self.advance()
                return Ident(token.literal, **pos)
            self.advance()
            self.advance()
            elements = self.parse_sequence('}')
            return SetLit(elements, **pos)
        if kind == 'func':
            self.advance()
            params = self.parse_param_list()
            body = self.parse_block()
            return FuncExpr(params, body, **pos)
        if kind == 'new':
            self.advance()
            name = self.consume_name("after 'new'")
            args = self.parse_arguments()
            return NewExpr(name.literal, args, **pos)
        if kind == ILLEGAL:
            self.fail(f"illegal character {token.literal!r}")
        self.fail(f"unexpected {describe(token)} in expression")

    def parse_sequence(self, closer: str) -> List[Node]:
        """Parse `e1, e2, ...` up to and including `closer`; a trailing comma is allowed."""
        elements: List[Node] = []
        while not self.match(closer):
            elements.append(self.parse_expression())
            if not self.match(','):
                break
            self.advance()
        self.consume(closer, 'to close literal')
        return elements

    def parse_map_literal(self, token: Token) -> MapLit:
        self.consume('{', "after 'map'")
        entries: List[Tuple[Node, Node]] = []
        while not self.match('}'):
            key = self.parse_expression()
            self.consume(':', 'between map key and value')
            value = self.parse_expression()
            entries.append((key, value))
            if not self.match(','):
                break
            self.advance()
        self.consume('}', 'to close map literal')
        return MapLit(entries, **self.pos(token))


def parse_source(source: str) -> Tuple[Program, List[ParseIssue]]:
    """Parse `source`, returning the (possibly partial) Program and every issue found."""
    parser = Parser(source)
    program = parser.parse()
    return program, parser.errors


def parse_program(source: str) -> Program:
    """Parse GoMix source code into an AST Program.

    Raises ParseFailure carrying all collected issues if the source has
    syntax errors.
    """
    program, issues = parse_source(source)
    if issues:
        raise ParseFailure(issues)
    return program
