"""Shared definitions for tree operator identifiers.

This module centralizes the operator names used by the parser when it
builds unary and binary nodes, and by the compiler when it lowers them to
opcodes. Keeping them in one place prevents the two components from drifting
apart when operators are added or renamed.
"""

from enum import Enum


class Op(str, Enum):
    """
    Enumeration of supported operator names.
    """

    # Arithmetic
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"

    # Comparison
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"

    # Boolean
    AND = "and"
    OR = "or"
    NOT = "not"

    # Unary minus
    NEG = "neg"

    def __str__(self) -> str:  # pragma: no cover - trivial
        """
        Return the underlying string value for nicer debug output.
        """
        return self.value


__all__ = ["Op"]
