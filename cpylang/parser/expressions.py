"""
Expression parsing utilities for CPY.

These functions operate on a `cpylang.parser.parser.Parser` instance and
implement the recursive descent logic for expressions, from lowest to
highest precedence:

    or → and → equality → comparison → term → factor → unary → primary

Every binary level is left-associative and loops at its own level rather
than recursing.
"""

from typing import TYPE_CHECKING

from cpylang.exceptions import ParseError
from cpylang.lexer import TokenType
from cpylang.nodes import (
    ArrayAccess,
    ArrayLiteral,
    Binary,
    Expr,
    Literal,
    Unary,
    Variable,
)
from cpylang.operations import Op
from cpylang.values import Char

if TYPE_CHECKING:
    from cpylang.parser import Parser


BINARY_OPS: dict[TokenType, Op] = {
    TokenType.OR: Op.OR,
    TokenType.AND: Op.AND,
    TokenType.EQUAL_EQUAL: Op.EQ,
    TokenType.BANG_EQUAL: Op.NE,
    TokenType.GREATER: Op.GT,
    TokenType.GREATER_EQUAL: Op.GE,
    TokenType.LESS: Op.LT,
    TokenType.LESS_EQUAL: Op.LE,
    TokenType.PLUS: Op.ADD,
    TokenType.MINUS: Op.SUB,
    TokenType.STAR: Op.MUL,
    TokenType.SLASH: Op.DIV,
}


def _binary_level(parser: 'Parser', operand, *token_types: TokenType) -> Expr:
    """Parse ``operand (op operand)*`` folding to the left."""
    result = operand()
    while (op_tok := parser.match(*token_types)) is not None:
        result = Binary(result, BINARY_OPS[op_tok.type], operand(), op_tok.line)
    return result


# ---- Lowest precedence ----

def parse_expr(parser: 'Parser') -> Expr:
    """Parse a full expression."""
    return parser.logical_or()


def parse_or(parser: 'Parser') -> Expr:
    """Parse ``and`` expressions joined by ``or``."""
    return _binary_level(parser, parser.logical_and, TokenType.OR)


def parse_and(parser: 'Parser') -> Expr:
    """Parse equality expressions joined by ``and``."""
    return _binary_level(parser, parser.equality, TokenType.AND)


def parse_equality(parser: 'Parser') -> Expr:
    """Parse ``==`` and ``!=`` expressions."""
    return _binary_level(
        parser, parser.comparison, TokenType.EQUAL_EQUAL, TokenType.BANG_EQUAL
    )


def parse_comparison(parser: 'Parser') -> Expr:
    """Parse ``>``, ``>=``, ``<`` and ``<=`` expressions."""
    return _binary_level(
        parser,
        parser.term,
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
    )


def parse_term(parser: 'Parser') -> Expr:
    """Parse addition and subtraction expressions."""
    return _binary_level(parser, parser.factor, TokenType.PLUS, TokenType.MINUS)


def parse_factor(parser: 'Parser') -> Expr:
    """Parse multiplication and division expressions."""
    return _binary_level(parser, parser.unary, TokenType.STAR, TokenType.SLASH)


def parse_unary(parser: 'Parser') -> Expr:
    """Parse prefix ``-`` and ``not``, which may be stacked."""
    tok = parser.match(TokenType.MINUS, TokenType.NOT)
    if tok is not None:
        op = Op.NEG if tok.type == TokenType.MINUS else Op.NOT
        return Unary(op, parser.unary(), tok.line)
    return parser.primary()


# ---- Highest precedence ----

def parse_primary(parser: 'Parser') -> Expr:
    """
    Parse a literal, a variable, an array access, a parenthesized group or
    an array literal.
    """
    tok = parser.curr_token

    if parser.match(TokenType.NUMBER):
        return Literal(float(tok.lexeme), tok.line)

    if parser.match(TokenType.STRING):
        return Literal(tok.lexeme[1:-1], tok.line)

    if parser.match(TokenType.CHAR):
        return Literal(Char(tok.lexeme[1]), tok.line)

    if parser.match(TokenType.IDENTIFIER):
        if parser.match(TokenType.LBRACKET):
            index = parser.expr()
            parser.eat(TokenType.RBRACKET, "Expected ']' after array index")
            return ArrayAccess(tok.lexeme, index, tok.line)
        return Variable(tok.lexeme, tok.line)

    if parser.match(TokenType.LPAREN):
        node = parser.expr()
        parser.eat(TokenType.RPAREN, "Expected ')' after grouped expression")
        return node

    if parser.match(TokenType.LBRACKET):
        elements = []
        if not parser.check(TokenType.RBRACKET):
            elements.append(parser.expr())
            while parser.match(TokenType.COMMA):
                elements.append(parser.expr())
        parser.eat(TokenType.RBRACKET, "Expected ']' after array literal")
        return ArrayLiteral(tuple(elements), tok.line)

    raise ParseError("Expected expression", tok.lexeme, tok.line)
