"""Statement parsing utilities for CPY.

These functions operate on a `cpylang.parser.parser.Parser` instance and
handle the statement forms of the language: declarations, assignments,
blocks, conditionals, loops and print.


File: statements.py
Version: 1.0.0
License: MIT
"""

from typing import TYPE_CHECKING

from cpylang.lexer import TokenType
from cpylang.nodes import (
    ArrayAssignment,
    Assignment,
    Block,
    For,
    If,
    Print,
    Stmt,
    VarDecl,
    While,
)

if TYPE_CHECKING:
    from cpylang.parser import Parser


def parse_statement(parser: 'Parser') -> Stmt:
    """
    Parse a single statement.

    Dispatches on the current token; anything that does not start with a
    keyword or ``{`` must be an assignment.

    Args:
        parser: The parser instance.

    Returns:
        Stmt: the statement node.
    """
    tok_type = parser.curr_token.type
    if tok_type == TokenType.LET:
        return parser.parse_declaration()
    if tok_type == TokenType.IF:
        return parser.parse_if()
    if tok_type == TokenType.WHILE:
        return parser.parse_while()
    if tok_type == TokenType.FOR:
        return parser.parse_for()
    if tok_type == TokenType.PRINT:
        return parser.parse_print()
    if tok_type == TokenType.LBRACE:
        return parser.block()
    return parser.parse_assignment()


def parse_block(parser: 'Parser') -> Block:
    """
    Parse a block of statements enclosed in braces.

    Syntax:
        { <statement>* }

    Args:
        parser: The parser instance.

    Returns:
        Block: the block node.
    """
    tok = parser.eat(TokenType.LBRACE, "Expected '{'")
    statements = []
    while not parser.check(TokenType.RBRACE) and not parser.at_end():
        statements.append(parser.statement())
    parser.eat(TokenType.RBRACE, "Expected '}'")
    return Block(tuple(statements), tok.line)


def parse_declaration(parser: 'Parser') -> VarDecl:
    """
    Parse a variable declaration.

    Syntax:
        let <identifier> = <expression> ;
    """
    parser.eat(TokenType.LET, "Expected 'let'")
    name = parser.eat(TokenType.IDENTIFIER, "Expected variable name after 'let'")
    parser.eat(TokenType.EQUAL, "Expected '=' after variable name")
    initializer = parser.expr()
    parser.eat(TokenType.SEMICOLON, "Expected ';' after variable declaration")
    return VarDecl(name.lexeme, initializer, name.line)


def parse_assignment(parser: 'Parser') -> Stmt:
    """
    Parse a plain or an array element assignment.

    Syntax:
        <identifier> = <expression> ;
        <identifier> [ <expression> ] = <expression> ;

    The token after the identifier decides which form is parsed.
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expected variable name")

    if parser.match(TokenType.LBRACKET):
        index = parser.expr()
        parser.eat(TokenType.RBRACKET, "Expected ']' after array index")
        parser.eat(TokenType.EQUAL, "Expected '=' after array element")
        value = parser.expr()
        parser.eat(TokenType.SEMICOLON, "Expected ';' after array assignment")
        return ArrayAssignment(name.lexeme, index, value, name.line)

    parser.eat(TokenType.EQUAL, "Expected '=' after variable name")
    value = parser.expr()
    parser.eat(TokenType.SEMICOLON, "Expected ';' after assignment")
    return Assignment(name.lexeme, value, name.line)


def _parse_bare_assignment(parser: 'Parser') -> Assignment:
    """
    Parse ``name = expr`` without a trailing semicolon, as used by the
    increment clause of a 'for' loop.
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expected variable name in for increment")
    parser.eat(TokenType.EQUAL, "Expected '=' in for increment")
    return Assignment(name.lexeme, parser.expr(), name.line)


def parse_if(parser: 'Parser') -> If:
    """
    Parse an 'if' statement.

    Syntax:
        if ( <expression> ) { ... } [ else { ... } ]

    The else branch, when present, must itself be a braced block.
    """
    tok = parser.eat(TokenType.IF, "Expected 'if'")
    parser.eat(TokenType.LPAREN, "Expected '(' after 'if'")
    condition = parser.expr()
    parser.eat(TokenType.RPAREN, "Expected ')' after if condition")
    then_branch = parser.block()
    else_branch = None
    if parser.match(TokenType.ELSE):
        else_branch = parser.block()
    return If(condition, then_branch, else_branch, tok.line)


def parse_while(parser: 'Parser') -> While:
    """
    Parse a 'while' loop.

    Syntax:
        while ( <expression> ) { ... }
    """
    tok = parser.eat(TokenType.WHILE, "Expected 'while'")
    parser.eat(TokenType.LPAREN, "Expected '(' after 'while'")
    condition = parser.expr()
    parser.eat(TokenType.RPAREN, "Expected ')' after while condition")
    return While(condition, parser.block(), tok.line)


def parse_for(parser: 'Parser') -> For:
    """
    Parse a 'for' loop.

    Syntax:
        for ( [<declaration> | <assignment>] ; [<expression>] ; [<identifier> = <expression>] ) { ... }

    The init clause brings its own ``;``. An omitted condition is left as
    ``None`` and treated as always true downstream.
    """
    tok = parser.eat(TokenType.FOR, "Expected 'for'")
    parser.eat(TokenType.LPAREN, "Expected '(' after 'for'")

    init = None
    if parser.check(TokenType.LET):
        init = parser.parse_declaration()
    elif not parser.check(TokenType.SEMICOLON):
        name = parser.eat(TokenType.IDENTIFIER, "Expected variable name in for initializer")
        parser.eat(TokenType.EQUAL, "Expected '=' after variable name")
        value = parser.expr()
        parser.eat(TokenType.SEMICOLON, "Expected ';' after assignment")
        init = Assignment(name.lexeme, value, name.line)
    else:
        parser.eat(TokenType.SEMICOLON, "Expected ';'")

    condition = None
    if not parser.check(TokenType.SEMICOLON):
        condition = parser.expr()
    parser.eat(TokenType.SEMICOLON, "Expected ';' after for condition")

    increment = None
    if not parser.check(TokenType.RPAREN):
        increment = _parse_bare_assignment(parser)
    parser.eat(TokenType.RPAREN, "Expected ')' after for clauses")

    return For(init, condition, increment, parser.block(), tok.line)


def parse_print(parser: 'Parser') -> Print:
    """
    Parse a 'print' statement.

    Syntax:
        print ( <expression> ) ;
    """
    tok = parser.eat(TokenType.PRINT, "Expected 'print'")
    parser.eat(TokenType.LPAREN, "Expected '(' after 'print'")
    value = parser.expr()
    parser.eat(TokenType.RPAREN, "Expected ')' after print expression")
    parser.eat(TokenType.SEMICOLON, "Expected ';' after print statement")
    return Print(value, tok.line)
