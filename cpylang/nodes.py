"""Syntax tree node shapes.

Two closed families of frozen dataclasses: expressions and statements.
Every node records the source line it came from so later stages can report
errors against the program text. Children are held in tuples, so a tree is
immutable once the parser has built it.


File: nodes.py
Version: 1.0.0
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from cpylang.operations import Op
from cpylang.values import Char


LiteralValue = Union[float, str, Char, bool, None]


# ----------------------------------------------------------------------
# Expressions
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Literal:
    """Number, string, char, bool or null constant."""
    value: LiteralValue
    line: int = 0


@dataclass(frozen=True)
class Variable:
    """Read of a named variable."""
    name: str
    line: int = 0


@dataclass(frozen=True)
class Unary:
    """Prefix ``-`` or ``not``."""
    op: Op
    operand: Expr
    line: int = 0


@dataclass(frozen=True)
class Binary:
    """Left-associative infix operation."""
    left: Expr
    op: Op
    right: Expr
    line: int = 0


@dataclass(frozen=True)
class ArrayLiteral:
    """Bracketed, comma separated element list."""
    elements: tuple[Expr, ...]
    line: int = 0


@dataclass(frozen=True)
class ArrayAccess:
    """``name[index]``."""
    name: str
    index: Expr
    line: int = 0


Expr = Union[Literal, Variable, Unary, Binary, ArrayLiteral, ArrayAccess]


# ----------------------------------------------------------------------
# Statements
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class VarDecl:
    """``let name = initializer;``"""
    name: str
    initializer: Expr
    line: int = 0


@dataclass(frozen=True)
class Assignment:
    """``name = value;``"""
    name: str
    value: Expr
    line: int = 0


@dataclass(frozen=True)
class ArrayAssignment:
    """``name[index] = value;``"""
    name: str
    index: Expr
    value: Expr
    line: int = 0


@dataclass(frozen=True)
class Print:
    """``print(expression);``"""
    expression: Expr
    line: int = 0


@dataclass(frozen=True)
class Block:
    """Brace delimited statement list. Does not open a scope."""
    statements: tuple[Stmt, ...]
    line: int = 0


@dataclass(frozen=True)
class If:
    """Conditional with a block body and an optional else block."""
    condition: Expr
    then_branch: Block
    else_branch: Optional[Block] = None
    line: int = 0


@dataclass(frozen=True)
class While:
    """Pre-tested loop."""
    condition: Expr
    body: Block
    line: int = 0


@dataclass(frozen=True)
class For:
    """
    C-style loop. Every clause is optional; a missing condition is treated
    as always true.
    """
    init: Optional[Union[VarDecl, Assignment]]
    condition: Optional[Expr]
    increment: Optional[Assignment]
    body: Block
    line: int = 0


Stmt = Union[VarDecl, Assignment, ArrayAssignment, Print, Block, If, While, For]
