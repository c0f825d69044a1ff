"""
Tests for the CPY parser.
"""
import pytest

from cpylang.exceptions import ErrorKind, ParseError
from cpylang.nodes import (
    ArrayAccess,
    ArrayAssignment,
    ArrayLiteral,
    Assignment,
    Binary,
    Block,
    For,
    If,
    Literal,
    Print,
    Unary,
    VarDecl,
    Variable,
    While,
)
from cpylang.operations import Op
from cpylang.values import Char
from cpylang.tests.utils import parse_source


def parse_expr_of(source: str):
    """Parse ``print(<source>);`` and return the printed expression."""
    stmt = parse_source(f"print({source});")[0]
    assert isinstance(stmt, Print)
    return stmt.expression


def test_declaration():
    stmts = parse_source("let x = 5;")
    assert len(stmts) == 1
    decl = stmts[0]
    assert isinstance(decl, VarDecl)
    assert decl.name == "x"
    assert decl.initializer == Literal(5.0, 1)
    assert decl.line == 1


def test_empty_program():
    assert parse_source("") == []
    assert parse_source("// only a comment\n") == []


def test_literals():
    assert parse_expr_of("3.5").value == 3.5
    assert parse_expr_of('"hi there"').value == "hi there"
    assert parse_expr_of("'c'").value == Char("c")


def test_multiplication_binds_tighter_than_addition():
    expr = parse_expr_of("1 + 2 * 3")
    assert isinstance(expr, Binary)
    assert expr.op == Op.ADD
    assert expr.left.value == 1.0
    assert isinstance(expr.right, Binary)
    assert expr.right.op == Op.MUL


def test_binary_operators_are_left_associative():
    expr = parse_expr_of("10 - 4 - 3")
    assert expr.op == Op.SUB
    assert isinstance(expr.left, Binary)
    assert expr.left.op == Op.SUB
    assert expr.right.value == 3.0


def test_logical_precedence():
    """``or`` is loosest, then ``and``, then equality, then comparison."""
    expr = parse_expr_of("a or b and c == d < e")
    assert expr.op == Op.OR
    and_expr = expr.right
    assert and_expr.op == Op.AND
    eq_expr = and_expr.right
    assert eq_expr.op == Op.EQ
    assert eq_expr.right.op == Op.LT


def test_grouping_overrides_precedence():
    expr = parse_expr_of("(1 + 2) * 3")
    assert expr.op == Op.MUL
    assert expr.left.op == Op.ADD


def test_unary_operators_stack():
    expr = parse_expr_of("not not -x")
    assert isinstance(expr, Unary) and expr.op == Op.NOT
    assert isinstance(expr.operand, Unary) and expr.operand.op == Op.NOT
    neg = expr.operand.operand
    assert neg.op == Op.NEG
    assert neg.operand == Variable("x", 1)


def test_bang_is_logical_not():
    assert parse_expr_of("!x").op == Op.NOT


def test_array_literal_and_access():
    arr = parse_expr_of("[1, 2, [3]]")
    assert isinstance(arr, ArrayLiteral)
    assert len(arr.elements) == 3
    assert isinstance(arr.elements[2], ArrayLiteral)
    assert parse_expr_of("[]") == ArrayLiteral((), 1)

    access = parse_expr_of("a[i + 1]")
    assert isinstance(access, ArrayAccess)
    assert access.name == "a"
    assert access.index.op == Op.ADD


def test_assignment_forms():
    plain, element = parse_source("x = 1;\na[0] = 2;")
    assert isinstance(plain, Assignment)
    assert plain.name == "x"
    assert isinstance(element, ArrayAssignment)
    assert element.name == "a"
    assert element.index.value == 0.0
    assert element.value.value == 2.0
    assert element.line == 2


def test_if_with_and_without_else():
    only_then, with_else = parse_source(
        "if (x) { print(1); }\nif (x) { print(1); } else { print(2); }"
    )
    assert isinstance(only_then, If)
    assert isinstance(only_then.then_branch, Block)
    assert only_then.else_branch is None
    assert isinstance(with_else.else_branch, Block)
    assert len(with_else.else_branch.statements) == 1


def test_while_loop():
    (loop,) = parse_source("while (i < 3) { i = i + 1; }")
    assert isinstance(loop, While)
    assert loop.condition.op == Op.LT
    assert isinstance(loop.body.statements[0], Assignment)


def test_for_loop_with_all_clauses():
    (loop,) = parse_source("for (let i = 0; i < 3; i = i + 1) { print(i); }")
    assert isinstance(loop, For)
    assert isinstance(loop.init, VarDecl)
    assert loop.condition.op == Op.LT
    assert isinstance(loop.increment, Assignment)
    assert loop.increment.name == "i"
    assert isinstance(loop.body.statements[0], Print)


def test_for_loop_with_empty_clauses():
    (loop,) = parse_source("for (;;) {}")
    assert loop.init is None
    assert loop.condition is None
    assert loop.increment is None
    assert loop.body.statements == ()


def test_for_loop_with_assignment_init():
    (loop,) = parse_source("for (i = 0; i < 1;) {}")
    assert isinstance(loop.init, Assignment)
    assert loop.increment is None


def test_nested_block_statement():
    (block,) = parse_source("{ let a = 1; { print(a); } }")
    assert isinstance(block, Block)
    assert isinstance(block.statements[1], Block)


@pytest.mark.parametrize(
    "source, message",
    [
        ("let = 5;", "Parse error: Expected variable name after 'let' (got '=' at line 1)"),
        ("let x 5;", "Parse error: Expected '=' after variable name (got '5' at line 1)"),
        ("let x = 5", "Parse error: Expected ';' after variable declaration (got '' at line 1)"),
        ("print(1 + );", "Parse error: Expected expression (got ')' at line 1)"),
        ("print((1;", "Parse error: Expected ')' after grouped expression (got ';' at line 1)"),
        ("let a = [1, 2;", "Parse error: Expected ']' after array literal (got ';' at line 1)"),
        ("if (x) print(x);", "Parse error: Expected '{' (got 'print' at line 1)"),
        ("while (x) {\n", "Parse error: Expected '}' (got '' at line 2)"),
        ("for (;; {}", "Parse error: Expected variable name in for increment (got '{' at line 1)"),
        ("5 = x;", "Parse error: Expected variable name (got '5' at line 1)"),
    ],
)
def test_parse_errors(source, message):
    with pytest.raises(ParseError) as exc:
        parse_source(source)
    assert str(exc.value) == message
    assert exc.value.kind == ErrorKind.PARSE


def test_else_requires_a_block():
    with pytest.raises(ParseError) as exc:
        parse_source("if (x) { } else if (y) { }")
    assert exc.value.expected == "Expected '{'"
    assert exc.value.lexeme == "if"


@pytest.mark.parametrize(
    "source",
    [
        "print(" + "(" * 500 + "1" + ")" * 500 + ");",
        "{" * 500 + "}" * 500,
    ],
)
def test_deep_nesting_is_a_parse_error(source):
    with pytest.raises(ParseError) as exc:
        parse_source(source)
    assert exc.value.expected == "Program nested too deeply"
    assert exc.value.line == 1
