"""Semantic analyzer.

Walks the whole tree once before compilation and checks declaration
discipline against a single flat symbol table:

- a ``let`` for a name that is already declared is a duplicate declaration;
  the name stays registered so later uses are not reported again.
- reading or assigning a name that was never declared is a use before
  declaration.

Violations are accumulated rather than raised one at a time. `analyze()`
returns the full list; `check()` raises one :class:`SemanticError` that
lists them all. No type checking happens here.


File: semantic.py
Version: 1.0.0
License: MIT
"""

from cpylang.exceptions import SemanticError
from cpylang.nodes import (
    ArrayAccess,
    ArrayAssignment,
    ArrayLiteral,
    Assignment,
    Binary,
    Block,
    Expr,
    For,
    If,
    Literal,
    Print,
    Stmt,
    Unary,
    VarDecl,
    Variable,
    While,
)


class SemanticAnalyzer:
    """Declaration checker for CPY programs."""

    def __init__(self) -> None:
        """
        Initialize an empty symbol table and violation list.
        """
        self.symbols: dict[str, str] = {}
        self.errors: list[str] = []

    def analyze(self, statements: list[Stmt]) -> list[str]:
        """
        Analyze a program and return every violation found, in source order.
        """
        for stmt in statements:
            self.analyze_stmt(stmt)
        return list(self.errors)

    def check(self, statements: list[Stmt]) -> None:
        """
        Analyze a program and raise if it has any violation.

        Raises:
            SemanticError: Listing every violation.
        """
        errors = self.analyze(statements)
        if errors:
            raise SemanticError(errors)

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------
    def declare(self, name: str, line: int) -> None:
        if name in self.symbols:
            self.errors.append(f"Variable '{name}' already declared (line {line})")
        self.symbols[name] = "any"

    def require(self, name: str, line: int) -> None:
        if name not in self.symbols:
            self.errors.append(f"Variable '{name}' used before declaration (line {line})")

    # ------------------------------------------------------------------
    # Tree walk
    # ------------------------------------------------------------------
    def analyze_stmt(self, stmt: Stmt) -> None:
        match stmt:
            case VarDecl(name=name, initializer=initializer, line=line):
                # The initializer cannot see the name it initializes
                self.analyze_expr(initializer)
                self.declare(name, line)
            case Assignment(name=name, value=value, line=line):
                self.require(name, line)
                self.analyze_expr(value)
            case ArrayAssignment(name=name, index=index, value=value, line=line):
                self.require(name, line)
                self.analyze_expr(index)
                self.analyze_expr(value)
            case Print(expression=expression):
                self.analyze_expr(expression)
            case If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.analyze_expr(condition)
                self.analyze_stmt(then_branch)
                if else_branch is not None:
                    self.analyze_stmt(else_branch)
            case While(condition=condition, body=body):
                self.analyze_expr(condition)
                self.analyze_stmt(body)
            case For(init=init, condition=condition, increment=increment, body=body):
                if init is not None:
                    self.analyze_stmt(init)
                if condition is not None:
                    self.analyze_expr(condition)
                if increment is not None:
                    self.analyze_stmt(increment)
                self.analyze_stmt(body)
            case Block(statements=statements):
                for child in statements:
                    self.analyze_stmt(child)
            case _:
                raise TypeError(f"Unknown statement node: {stmt!r}")

    def analyze_expr(self, expr: Expr) -> None:
        match expr:
            case Literal():
                pass
            case Variable(name=name, line=line):
                self.require(name, line)
            case Unary(operand=operand):
                self.analyze_expr(operand)
            case Binary(left=left, right=right):
                self.analyze_expr(left)
                self.analyze_expr(right)
            case ArrayLiteral(elements=elements):
                for element in elements:
                    self.analyze_expr(element)
            case ArrayAccess(name=name, index=index, line=line):
                self.require(name, line)
                self.analyze_expr(index)
            case _:
                raise TypeError(f"Unknown expression node: {expr!r}")
