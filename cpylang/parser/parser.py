"""
Main parser entry point for CPY.

This module defines the `Parser` class, which coordinates the recursive
descent parsing process. The actual parsing routines are split across
`cpylang.parser.expressions` and `cpylang.parser.statements`.

Parsing stops at the first unmet expectation; no partial tree is returned.


File: parser.py
Version: 1.0.0
License: MIT
"""

from typing import Optional

from cpylang.exceptions import ParseError
from cpylang.lexer import Token, TokenType
from cpylang import nodes

from . import expressions as _expr
from . import statements as _stmt


class Parser:
    """CPY parser."""

    def __init__(self, tokens: list[Token]):
        """
        Initialize the parser with a list of tokens.

        Parameters:
            tokens (list): Token instances terminated by an EOF token.
        """
        self.tokens = tokens
        self.position = 0
        self.curr_token = self.tokens[self.position]

    def check(self, token_type: TokenType) -> bool:
        """
        Return whether the current token is of the given type.
        """
        return self.curr_token.type == token_type

    def at_end(self) -> bool:
        """
        Return whether the parser has reached the EOF token.
        """
        return self.curr_token.type == TokenType.EOF

    def advance(self) -> Token:
        """
        Consume the current token and return it.
        """
        tok = self.curr_token
        if not self.at_end():
            self.position += 1
            self.curr_token = self.tokens[self.position]
        return tok

    def match(self, *token_types: TokenType) -> Optional[Token]:
        """
        Consume and return the current token if it has one of the given types.
        """
        if self.curr_token.type in token_types:
            return self.advance()
        return None

    def eat(self, token_type: TokenType, expected: str) -> Token:
        """
        Consume the current token if it matches the expected type.

        Parameters:
            token_type (TokenType): The expected token type.
            expected (str): Description of the expected construct.

        Raises:
            ParseError: If the token does not match the expected type.
        """
        if self.curr_token.type == token_type:
            return self.advance()
        raise ParseError(expected, self.curr_token.lexeme, self.curr_token.line)

    # Expression wrappers
    def expr(self) -> nodes.Expr:
        """
        Parse a full expression.
        """
        return _expr.parse_expr(self)

    def logical_or(self) -> nodes.Expr:
        """
        Parse an ``or`` expression.
        """
        return _expr.parse_or(self)

    def logical_and(self) -> nodes.Expr:
        """
        Parse an ``and`` expression.
        """
        return _expr.parse_and(self)

    def equality(self) -> nodes.Expr:
        """
        Parse an ``==`` / ``!=`` expression.
        """
        return _expr.parse_equality(self)

    def comparison(self) -> nodes.Expr:
        """
        Parse a comparison expression using relational operators.
        """
        return _expr.parse_comparison(self)

    def term(self) -> nodes.Expr:
        """
        Parse an addition or subtraction expression.
        """
        return _expr.parse_term(self)

    def factor(self) -> nodes.Expr:
        """
        Parse a multiplication or division expression.
        """
        return _expr.parse_factor(self)

    def unary(self) -> nodes.Expr:
        """
        Parse a prefix ``-`` or ``not`` expression.
        """
        return _expr.parse_unary(self)

    def primary(self) -> nodes.Expr:
        """
        Parse a literal, variable, array access, group or array literal.
        """
        return _expr.parse_primary(self)

    # Statement wrappers
    def statement(self) -> nodes.Stmt:
        """
        Parse a single statement.
        """
        return _stmt.parse_statement(self)

    def block(self) -> nodes.Block:
        """
        Parse a block of statements enclosed in braces.
        """
        return _stmt.parse_block(self)

    def parse_declaration(self) -> nodes.VarDecl:
        """
        Parse a ``let`` declaration.
        """
        return _stmt.parse_declaration(self)

    def parse_assignment(self) -> nodes.Stmt:
        """
        Parse a plain or array element assignment.
        """
        return _stmt.parse_assignment(self)

    def parse_if(self) -> nodes.If:
        """
        Parse an 'if' conditional statement.
        """
        return _stmt.parse_if(self)

    def parse_while(self) -> nodes.While:
        """
        Parse a 'while' loop.
        """
        return _stmt.parse_while(self)

    def parse_for(self) -> nodes.For:
        """
        Parse a 'for' loop.
        """
        return _stmt.parse_for(self)

    def parse_print(self) -> nodes.Print:
        """
        Parse a 'print' statement used for output.
        """
        return _stmt.parse_print(self)

    def parse(self) -> list[nodes.Stmt]:
        """
        Parse the full input into a list of statements.

        Raises:
            ParseError: On the first unmet expectation, or when nesting runs
                past the interpreter's recursion limit.
        """
        statements = []
        try:
            while not self.at_end():
                statements.append(self.statement())
        except RecursionError:
            raise ParseError(
                "Program nested too deeply", self.curr_token.lexeme, self.curr_token.line
            ) from None
        return statements
