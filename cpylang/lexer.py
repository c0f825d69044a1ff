"""Lexer for CPY.

This lexer performs a single pass over the source code using a combined
regular expression of named groups. Each match yields a :class:`Token`
containing its kind, the raw lexeme text and the line on which it starts.

Tokens cover literals (numbers, strings, chars), keywords (``let``, ``if``,
``while`` …), operators and punctuation. ``//`` comments and whitespace are
skipped; newlines only advance the line counter. Lexing stops at the first
error, no recovery is attempted.


File: lexer.py
Version: 1.0.0
License: MIT
"""

import re
from dataclasses import dataclass
from enum import Enum

from cpylang.exceptions import LexError


class TokenType(str, Enum):
    """
    Enumeration of token kinds.
    """

    # Keywords
    LET = "LET"
    IF = "IF"
    ELSE = "ELSE"
    WHILE = "WHILE"
    FOR = "FOR"
    PRINT = "PRINT"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    # Identifiers & literals
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"
    STRING = "STRING"
    CHAR = "CHAR"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    STAR = "STAR"
    SLASH = "SLASH"
    EQUAL = "EQUAL"
    EQUAL_EQUAL = "EQUAL_EQUAL"
    BANG_EQUAL = "BANG_EQUAL"
    GREATER = "GREATER"
    GREATER_EQUAL = "GREATER_EQUAL"
    LESS = "LESS"
    LESS_EQUAL = "LESS_EQUAL"

    # Punctuation
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    SEMICOLON = "SEMICOLON"
    COMMA = "COMMA"

    EOF = "EOF"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


KEYWORDS: dict[str, TokenType] = {
    "let": TokenType.LET,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "print": TokenType.PRINT,
    "and": TokenType.AND,
    "or": TokenType.OR,
    "not": TokenType.NOT,
}


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token with a kind, its lexeme and source line.
    """
    type: TokenType
    lexeme: str
    line: int

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.lexeme!r}, line={self.line})"


# Order matters: comments before '/', two-character operators before their
# one-character prefixes, the error groups after the well-formed literals.
TOKEN_SPECIFICATION: list[tuple[str, str]] = [
    # Skipped
    ('COMMENT',       r'//[^\n]*'),
    ('NEWLINE',       r'\n'),
    ('SKIP',          r'[ \t\r]+'),

    # Literals
    ('NUMBER',        r'[0-9]+(?:\.[0-9]+)?'),
    ('STRING',        r'"[^"]*"'),
    ('CHAR',          r"'[^']'"),
    ('BAD_STRING',    r'"'),
    ('BAD_CHAR',      r"'"),

    # Identifiers and keywords
    ('IDENTIFIER',    r'[A-Za-z_][A-Za-z0-9_]*'),

    # Two-character operators
    ('EQUAL_EQUAL',   r'=='),
    ('BANG_EQUAL',    r'!='),
    ('GREATER_EQUAL', r'>='),
    ('LESS_EQUAL',    r'<='),

    # One-character operators
    ('EQUAL',         r'='),
    ('NOT',           r'!'),
    ('GREATER',       r'>'),
    ('LESS',          r'<'),
    ('PLUS',          r'\+'),
    ('MINUS',         r'-'),
    ('STAR',          r'\*'),
    ('SLASH',         r'/'),

    # Punctuation
    ('LPAREN',        r'\('),
    ('RPAREN',        r'\)'),
    ('LBRACE',        r'\{'),
    ('RBRACE',        r'\}'),
    ('LBRACKET',      r'\['),
    ('RBRACKET',      r'\]'),
    ('SEMICOLON',     r';'),
    ('COMMA',         r','),

    ('MISMATCH',      r'.'),
]

TOKEN_REGEX = re.compile(
    '|'.join(f'(?P<{name}>{pattern})' for name, pattern in TOKEN_SPECIFICATION)
)


def tokenize(code: str) -> list[Token]:
    """
    Convert a string of source code into a list of tokens.

    Parameters:
        code (str): The source code to tokenize.

    Returns:
        list[Token]: The tokens, terminated by a single EOF token.

    Raises:
        LexError: On an unexpected character, an unterminated string or a
            malformed char literal.
    """
    tokens: list[Token] = []
    line_num = 1

    for match_obj in TOKEN_REGEX.finditer(code):
        kind = match_obj.lastgroup
        value = match_obj.group()

        if kind == 'NEWLINE':
            line_num += 1
            continue
        if kind in ('SKIP', 'COMMENT'):
            continue
        if kind == 'MISMATCH':
            raise LexError(f"Unexpected character '{value}'", line_num)
        if kind == 'BAD_STRING':
            # Reported where input ran out, after the lines the string spans
            raise LexError("Unterminated string", line_num + code.count('\n', match_obj.start()))
        if kind == 'BAD_CHAR':
            following = code[match_obj.end():match_obj.end() + 1]
            if following in ('', "'"):
                raise LexError("Empty char literal", line_num)
            raise LexError("Unterminated or multi-character char literal", line_num)

        if kind == 'IDENTIFIER':
            tokens.append(Token(KEYWORDS.get(value, TokenType.IDENTIFIER), value, line_num))
        else:
            tokens.append(Token(TokenType[kind], value, line_num))

        # Strings (and a quoted newline char) may span lines
        line_num += value.count('\n')

    tokens.append(Token(TokenType.EOF, '', line_num))
    return tokens
