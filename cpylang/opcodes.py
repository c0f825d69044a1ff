"""Instruction set of the CPY virtual machine.

Stack based: most instructions pop their inputs from the operand stack and
push a single result. An instruction carries at most one operand, always
kept as text:

    ==============================  ==================================
    Opcode                          Operand
    ==============================  ==================================
    CONST_NUM/STR/CHAR/BOOL         textual value of the constant
    LOAD, STORE, ARRAY_STORE        variable name
    JUMP, JUMP_IF_FALSE             absolute instruction index
    MAKE_ARRAY                      element count
    everything else                 none
    ==============================  ==================================


File: opcodes.py
Version: 1.0.0
License: MIT
"""

from enum import Enum
from typing import NamedTuple, Optional


class OpCode(str, Enum):
    """
    Enumeration of VM opcodes.
    """

    # Constants
    CONST_NUM = "CONST_NUM"
    CONST_STR = "CONST_STR"
    CONST_CHAR = "CONST_CHAR"
    CONST_BOOL = "CONST_BOOL"
    CONST_NULL = "CONST_NULL"

    # Variables
    LOAD = "LOAD"
    STORE = "STORE"

    # Arithmetic
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"

    # Unary
    NEG = "NEG"
    NOT = "NOT"

    # Comparison
    EQ = "EQ"
    NEQ = "NEQ"
    GT = "GT"
    GTE = "GTE"
    LT = "LT"
    LTE = "LTE"

    # Logical
    AND = "AND"
    OR = "OR"

    # Control flow
    JUMP = "JUMP"
    JUMP_IF_FALSE = "JUMP_IF_FALSE"

    # I/O
    PRINT = "PRINT"

    # Arrays
    MAKE_ARRAY = "MAKE_ARRAY"
    ARRAY_LOAD = "ARRAY_LOAD"
    ARRAY_STORE = "ARRAY_STORE"

    # Program
    HALT = "HALT"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


JUMP_OPCODES = frozenset({OpCode.JUMP, OpCode.JUMP_IF_FALSE})


class Instruction(NamedTuple):
    """A single instruction: an opcode with an optional textual operand."""
    opcode: OpCode
    operand: Optional[str] = None

    def __str__(self) -> str:
        if self.operand is None:
            return self.opcode.value
        return f"{self.opcode.value} {self.operand}"
