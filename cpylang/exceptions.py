"""Errors.

Every failure raised by the toolchain derives from :class:`CpyError` and
carries an :class:`ErrorKind` so callers can classify it without inspecting
the message text.


File: exceptions.py
Version: 1.0.0
License: MIT
"""

from enum import Enum


class ErrorKind(str, Enum):
    """
    Classification of toolchain failures.
    """
    LEX = "lex"
    PARSE = "parse"
    SEMANTIC = "semantic"
    BYTECODE_FORMAT = "bytecode_format"
    RUNTIME = "runtime"


class CpyError(Exception):
    """
    Base class for all CPY errors.
    """
    kind: ErrorKind


class LexError(CpyError):
    """
    Error for characters the lexer cannot turn into a token.
    """
    kind = ErrorKind.LEX

    def __init__(self, detail, line):
        self.detail = detail
        self.line = line
        super().__init__(f"{detail} at line {line}")


class ParseError(CpyError):
    """
    Error for the first unmet grammar expectation.
    """
    kind = ErrorKind.PARSE

    def __init__(self, expected, lexeme, line):
        self.expected = expected
        self.lexeme = lexeme
        self.line = line
        super().__init__(f"Parse error: {expected} (got '{lexeme}' at line {line})")


class SemanticError(CpyError):
    """
    Aggregate error listing every declaration violation in a program.
    """
    kind = ErrorKind.SEMANTIC

    def __init__(self, violations):
        self.violations = list(violations)
        message = "Semantic errors:"
        for violation in self.violations:
            message += f"\n  - {violation}"
        super().__init__(message)


class BytecodeFormatError(CpyError):
    """
    Error for malformed bytecode text.
    """
    kind = ErrorKind.BYTECODE_FORMAT

    def __init__(self, detail, line_number=None):
        self.detail = detail
        self.line_number = line_number
        message = f"Invalid bytecode: {detail}"
        if line_number is not None:
            message += f" on line {line_number}"
        super().__init__(message)


class VMRuntimeError(CpyError):
    """
    Error raised while executing bytecode.
    """
    kind = ErrorKind.RUNTIME

    def __init__(self, detail, pc):
        self.detail = detail
        self.pc = pc
        super().__init__(f"VM error at instruction {pc}: {detail}")
