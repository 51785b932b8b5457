import pytest

from gomix.ast import (
    Assign, BinaryOp, ExprStmt, Ident, IfStmt, Literal, RangeLit, Slice, SwitchStmt, VarDecl,
)
from gomix.errors import ParseFailure
from gomix.lexer import tokenize, IDENT, INT, FLOAT, STRING, CHAR, EOF, ILLEGAL
from gomix.parser import parse_program, parse_source


def kinds(source):
    return [t.kind for t in tokenize(source)]


def test_tokenize_keywords_operators_and_literals():
    tokens = list(tokenize('let x = 0x1F + 2.5e1; // trailing'))
    assert [t.kind for t in tokens] == ['let', IDENT, '=', INT, '+', FLOAT, ';', EOF]
    assert tokens[3].literal == '0x1F'
    assert tokens[5].literal == '2.5e1'
    assert (tokens[1].line, tokens[1].column) == (1, 5)


def test_tokenize_strings_chars_and_comments():
    tokens = list(tokenize('"a\\tb" /* skip\nme */ \'z\''))
    assert [t.kind for t in tokens] == [STRING, CHAR, EOF]
    assert tokens[0].literal == 'a\tb'
    assert tokens[1].literal == 'z'
    assert tokens[1].line == 2


def test_tokenize_range_operator_between_integers():
    assert kinds('1...5') == [INT, '...', INT, EOF]
    assert kinds('a <<= 2') == [IDENT, '<<=', INT, EOF]


def test_illegal_character_keeps_positions():
    tokens = list(tokenize('var a = 1 @ 2;'))
    illegal = [t for t in tokens if t.kind == ILLEGAL]
    assert len(illegal) == 1
    assert (illegal[0].line, illegal[0].column) == (1, 11)
    two = [t for t in tokens if t.literal == '2'][0]
    assert two.column == 13


def test_precedence_climbing_builds_expected_tree():
    program = parse_program('1 + 2 * 3;')
    expected = BinaryOp('+', Literal(1, 'int'), BinaryOp('*', Literal(2, 'int'), Literal(3, 'int')))
    assert program.body == [ExprStmt(expected)]


def test_assignment_is_right_associative():
    program = parse_program('a = b += 3;')
    assert program.body[0].expr == Assign(Ident('a'), '=', Assign(Ident('b'), '+=', Literal(3, 'int')))


def test_range_and_slice_nodes():
    program = parse_program('1...n; a[1:];')
    assert program.body[0].expr == RangeLit(Literal(1, 'int'), Ident('n'))
    assert program.body[1].expr == Slice(Ident('a'), Literal(1, 'int'), None)


def test_else_if_chain_nests():
    program = parse_program('if (a) { 1; } else if (b) { 2; } else { 3; }')
    stmt = program.body[0]
    assert isinstance(stmt, IfStmt)
    assert isinstance(stmt.else_block, IfStmt)
    assert stmt.else_block.else_block is not None


def test_for_initializers_share_declaration_kind():
    program = parse_program('for (var i = 0, j = 5; i < j; i = i + 1, j = j - 1) { }')
    loop = program.body[0]
    assert [d.name for d in loop.init] == ['i', 'j']
    assert all(isinstance(d, VarDecl) and d.kind == 'var' for d in loop.init)
    assert len(loop.updates) == 2


def test_errors_are_collected_with_positions():
    program, issues = parse_source('var = 5;\nvar y = ;\nprintln(1);')
    assert [(i.line, i.column) for i in issues] == [(1, 5), (2, 9)]
    assert "expected identifier after 'var'" in issues[0].message
    assert str(issues[1]) == "[2:9] unexpected ';' in expression"
    # the statement after the errors still parses
    assert len(program.body) == 1


def test_illegal_character_reported_once():
    _, issues = parse_source('var a = 1 @ 2;')
    assert [str(i) for i in issues] == ["[1:11] illegal character '@'"]


def test_invalid_assignment_target_and_stray_brace():
    _, issues = parse_source('1 = 2;\n}')
    messages = [i.message for i in issues]
    assert "invalid assignment target for '='" in messages
    assert "unexpected '}'" in messages


def test_switch_allows_one_default():
    program = parse_program('switch x { case 1, 2: y; default: z; }')
    assert isinstance(program.body[0], SwitchStmt)
    assert program.body[0].cases[0].values == [Literal(1, 'int'), Literal(2, 'int')]
    _, issues = parse_source('switch x { default: 1; default: 2; }')
    assert any('only have one default' in i.message for i in issues)


def test_parse_program_raises_with_all_issues():
    with pytest.raises(ParseFailure) as exc:
        parse_program('var = 1; var = 2;')
    assert len(exc.value.issues) == 2


def test_integer_literal_out_of_range():
    _, issues = parse_source('var big = 9223372036854775808;')
    assert len(issues) == 1
    assert 'out of range' in issues[0].message
