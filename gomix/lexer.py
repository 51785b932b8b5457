"""Token stream for the GoMix language.

Source text is classified by a lexer-only Lark instance (no grammar rules,
just terminals) and then converted into immutable :class:`Token` records.
Identifiers that spell a reserved word are reclassified as keywords, string
and character literals have their escapes decoded, and the stream always
ends with a single ``EOF`` token.

The parser pulls tokens one at a time through :meth:`TokenStream.next`.
Characters the lexer cannot classify do not abort tokenization; they are
reported as ``ILLEGAL`` tokens so the parser can record a positioned error
and keep going.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from lark import Lark
from lark.exceptions import UnexpectedCharacters

###############################################################################
# Token kinds
###############################################################################

IDENT = 'IDENT'
INT = 'INT'
FLOAT = 'FLOAT'
STRING = 'STRING'
CHAR = 'CHAR'
EOF = 'EOF'
ILLEGAL = 'ILLEGAL'

KEYWORDS = frozenset({
    'func', 'new', 'return', 'var', 'let', 'const', 'true', 'false',
    'if', 'else', 'while', 'for', 'foreach', 'in', 'break', 'continue',
    'struct', 'nil', 'import', 'as', 'switch', 'case', 'default', 'enum',
    'map', 'set',
})

# Keywords that may begin a statement; the parser resynchronizes on these.
STATEMENT_KEYWORDS = frozenset({
    'var', 'let', 'const', 'return', 'break', 'continue', 'if', 'while',
    'for', 'foreach', 'func', 'struct', 'import', 'switch', 'enum',
})

# Operator and delimiter terminals. For these the token kind is the symbol
# itself, which keeps the parser's matching code readable.
SYMBOLS = {
    'ELLIPSIS': '...',
    'SHL_ASSIGN': '<<=', 'SHR_ASSIGN': '>>=',
    'PLUS_ASSIGN': '+=', 'MINUS_ASSIGN': '-=', 'STAR_ASSIGN': '*=',
    'SLASH_ASSIGN': '/=', 'PERCENT_ASSIGN': '%=', 'AMP_ASSIGN': '&=',
    'PIPE_ASSIGN': '|=', 'CARET_ASSIGN': '^=',
    'EQ': '==', 'NE': '!=', 'LE': '<=', 'GE': '>=', 'AND': '&&', 'OR': '||',
    'SHL': '<<', 'SHR': '>>',
    'PLUS': '+', 'MINUS': '-', 'STAR': '*', 'SLASH': '/', 'PERCENT': '%',
    'LT': '<', 'GT': '>', 'ASSIGN': '=', 'BANG': '!', 'TILDE': '~',
    'AMP': '&', 'PIPE': '|', 'CARET': '^',
    'LPAR': '(', 'RPAR': ')', 'LBRACE': '{', 'RBRACE': '}',
    'LSQB': '[', 'RSQB': ']', 'COMMA': ',', 'SEMICOLON': ';', 'COLON': ':',
    'DOT': '.',
}


def _symbol_terminals() -> str:
    lines = []
    for name, text in SYMBOLS.items():
        escaped = text.replace('\\', '\\\\').replace('"', '\\"')
        lines.append(f'{name}: "{escaped}"')
    return '\n'.join(lines)


GOMIX_TOKENS = r"""
    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    HEX_NUMBER.2: /0[xX][0-9a-fA-F]+/
    FLOAT_NUMBER.2: /\d+\.\d+([eE][+-]?\d+)?|\d+[eE][+-]?\d+/
    DEC_NUMBER: /\d+/
    STRING_LIT: /"(\\.|[^"\\])*"/
    CHAR_LIT: /'(\\.|[^'\\])*'/

    LINE_COMMENT: /\/\/[^\n]*/
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//
    WHITESPACE: /[ \t\f\r\n]+/
    %ignore LINE_COMMENT
    %ignore BLOCK_COMMENT
    %ignore WHITESPACE
""" + _symbol_terminals()


GOMIX_LEXER = Lark(GOMIX_TOKENS, parser=None, lexer='basic')


ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'f': '\f', 'v': '\v',
    '\\': '\\', '"': '"', "'": "'", '0': '\0',
}


def decode_escapes(body: str) -> str:
    """Decode backslash escapes inside a string or character literal.

    Unknown escapes are kept verbatim (backslash included).
    """
    out: List[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == '\\' and i + 1 < len(body):
            nxt = body[i + 1]
            if nxt in ESCAPES:
                out.append(ESCAPES[nxt])
            else:
                out.append(c + nxt)
            i += 2
            continue
        out.append(c)
        i += 1
    return ''.join(out)


@dataclass(frozen=True)
class Token:
    kind: str
    literal: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.literal!r}, {self.line}:{self.column})"


def _convert(tok, line_offset: int, column_offset: int) -> Token:
    line = tok.line + line_offset
    column = tok.column + (column_offset if tok.line == 1 else 0)
    kind = tok.type
    text = str(tok)
    if kind == 'NAME':
        return Token(text if text in KEYWORDS else IDENT, text, line, column)
    if kind in ('DEC_NUMBER', 'HEX_NUMBER'):
        return Token(INT, text, line, column)
    if kind == 'FLOAT_NUMBER':
        return Token(FLOAT, text, line, column)
    if kind == 'STRING_LIT':
        return Token(STRING, decode_escapes(text[1:-1]), line, column)
    if kind == 'CHAR_LIT':
        value = decode_escapes(text[1:-1])
        if len(value) != 1:
            return Token(ILLEGAL, text, line, column)
        return Token(CHAR, value, line, column)
    return Token(SYMBOLS[kind], text, line, column)


def tokenize(source: str) -> Iterator[Token]:
    """Yield every token of `source`, finishing with an EOF token.

    When Lark hits a character it cannot match, an ILLEGAL token is produced
    for it and lexing resumes on the remaining text with positions shifted
    so they still refer to the original source.
    """
    text = source
    line_offset = 0
    column_offset = 0
    while True:
        try:
            for tok in GOMIX_LEXER.lex(text):
                yield _convert(tok, line_offset, column_offset)
        except UnexpectedCharacters as e:
            line = e.line + line_offset
            column = e.column + (column_offset if e.line == 1 else 0)
            yield Token(ILLEGAL, text[e.pos_in_stream], line, column)
            column_offset = column
            line_offset = line - 1
            text = text[e.pos_in_stream + 1:]
            continue
        break
    last_line = source.count('\n') + 1
    last_column = len(source) - source.rfind('\n')
    yield Token(EOF, '', last_line, last_column)


class TokenStream:
    """Pull-based view over :func:`tokenize` with one token of lookahead."""

    def __init__(self, source: str):
        self._tokens = tokenize(source)
        self._peeked: Optional[Token] = None
        self._last: Optional[Token] = None

    def next(self) -> Token:
        if self._peeked is not None:
            tok, self._peeked = self._peeked, None
        else:
            tok = self._pull()
        return tok

    def peek(self) -> Token:
        if self._peeked is None:
            self._peeked = self._pull()
        return self._peeked

    def _pull(self) -> Token:
        if self._last is not None and self._last.kind == EOF:
            return self._last
        self._last = next(self._tokens)
        return self._last
