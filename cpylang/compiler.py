"""CPY bytecode compiler.

This module lowers a validated syntax tree into a flat list of
:class:`~cpylang.opcodes.Instruction` for the stack machine in
:mod:`cpylang.vm`. It relies on the lexer, parser and semantic analyzer to
produce that tree.

Every expression leaves exactly one value on the operand stack. Control
flow is resolved with jump patching: a forward jump is emitted with the
placeholder target ``0``, its index is remembered, and once the target is
known the instruction at that index is rewritten to point at the current end
of the code. Loop back-edges know their target up front and are emitted
directly. Targets are absolute instruction indices.


File: compiler.py
Version: 1.0.0
License: MIT
"""

from __future__ import annotations

import logging
from typing import List

from cpylang.lexer import tokenize
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
from cpylang.opcodes import Instruction, OpCode
from cpylang.operations import Op
from cpylang.parser import Parser
from cpylang.semantic import SemanticAnalyzer
from cpylang.values import Char


logger = logging.getLogger(__name__)

PLACEHOLDER = "0"

BINARY_OPCODES: dict[Op, OpCode] = {
    Op.ADD: OpCode.ADD,
    Op.SUB: OpCode.SUB,
    Op.MUL: OpCode.MUL,
    Op.DIV: OpCode.DIV,
    Op.EQ: OpCode.EQ,
    Op.NE: OpCode.NEQ,
    Op.GT: OpCode.GT,
    Op.GE: OpCode.GTE,
    Op.LT: OpCode.LT,
    Op.LE: OpCode.LTE,
    Op.AND: OpCode.AND,
    Op.OR: OpCode.OR,
}

UNARY_OPCODES: dict[Op, OpCode] = {
    Op.NEG: OpCode.NEG,
    Op.NOT: OpCode.NOT,
}


class Compiler:
    """Compile CPY syntax tree nodes into bytecode instructions."""

    def __init__(self) -> None:
        """
        Initialize the compiler state.
        """
        self.code: List[Instruction] = []

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def emit(self, op: OpCode, arg: str | None = None) -> None:
        """
        Emit a bytecode instruction.
        """
        self.code.append(Instruction(op, arg))

    def emit_placeholder(self, op: OpCode) -> int:
        """
        Emit a jump with a placeholder target and return its index.
        """
        idx = len(self.code)
        self.code.append(Instruction(op, PLACEHOLDER))
        return idx

    def patch(self, idx: int, target: int) -> None:
        """
        Patch a placeholder instruction with a target address.
        """
        op, arg = self.code[idx]
        if arg != PLACEHOLDER:
            raise RuntimeError(f"Instruction {idx} ({op.value}) was already patched")
        self.code[idx] = Instruction(op, str(target))
        logger.debug("patched %s at %d -> %d", op.value, idx, target)

    # ------------------------------------------------------------------
    # Compilation entry points
    # ------------------------------------------------------------------
    def compile(self, ast: List[Stmt]) -> List[Instruction]:
        """
        Compile the given statements into a program ending in HALT.
        """
        for stmt in ast:
            self.compile_stmt(stmt)
        self.emit(OpCode.HALT)
        logger.debug("compiled %d statements into %d instructions", len(ast), len(self.code))
        return self.code

    # ------------------------------------------------------------------
    # Statement compilation
    # ------------------------------------------------------------------
    def compile_block(self, block: Block) -> None:
        """
        Compile a block of statements. Blocks add no instructions of their own.
        """
        for stmt in block.statements:
            self.compile_stmt(stmt)

    def compile_stmt(self, stmt: Stmt) -> None:
        """
        Compile a single statement node.
        """
        match stmt:
            case VarDecl(name=name, initializer=value) | Assignment(name=name, value=value):
                self.compile_expr(value)
                self.emit(OpCode.STORE, name)
            case ArrayAssignment(name=name, index=index, value=value):
                # The VM pops the index first, so it goes on top
                self.compile_expr(value)
                self.compile_expr(index)
                self.emit(OpCode.ARRAY_STORE, name)
            case Print(expression=expression):
                self.compile_expr(expression)
                self.emit(OpCode.PRINT)
            case If():
                self.compile_if(stmt)
            case While():
                self.compile_while(stmt)
            case For():
                self.compile_for(stmt)
            case Block():
                self.compile_block(stmt)
            case _:
                raise NotImplementedError(f"Unsupported statement: {stmt!r}")

    def compile_if(self, stmt: If) -> None:
        """
        Compile an if/else.

        condition, JUMP_IF_FALSE else, then-branch, [JUMP end, else-branch]
        """
        self.compile_expr(stmt.condition)
        jump_to_else = self.emit_placeholder(OpCode.JUMP_IF_FALSE)
        self.compile_block(stmt.then_branch)
        if stmt.else_branch is not None:
            jump_past_else = self.emit_placeholder(OpCode.JUMP)
            self.patch(jump_to_else, len(self.code))
            self.compile_block(stmt.else_branch)
            self.patch(jump_past_else, len(self.code))
        else:
            self.patch(jump_to_else, len(self.code))

    def compile_while(self, stmt: While) -> None:
        """
        Compile a while loop.

        start: condition, JUMP_IF_FALSE end, body, JUMP start, end:
        """
        start = len(self.code)
        self.compile_expr(stmt.condition)
        jump_exit = self.emit_placeholder(OpCode.JUMP_IF_FALSE)
        self.compile_block(stmt.body)
        self.emit(OpCode.JUMP, str(start))
        self.patch(jump_exit, len(self.code))

    def compile_for(self, stmt: For) -> None:
        """
        Compile a for loop: the init clause, then a while loop whose body is
        followed by the increment clause.
        """
        if stmt.init is not None:
            self.compile_stmt(stmt.init)
        start = len(self.code)
        if stmt.condition is not None:
            self.compile_expr(stmt.condition)
        else:
            self.emit(OpCode.CONST_BOOL, "true")
        jump_exit = self.emit_placeholder(OpCode.JUMP_IF_FALSE)
        self.compile_block(stmt.body)
        if stmt.increment is not None:
            self.compile_stmt(stmt.increment)
        self.emit(OpCode.JUMP, str(start))
        self.patch(jump_exit, len(self.code))

    # ------------------------------------------------------------------
    # Expression compilation
    # ------------------------------------------------------------------
    def compile_literal(self, value) -> None:
        """
        Emit the constant instruction matching a literal's type.
        """
        if value is None:
            self.emit(OpCode.CONST_NULL)
        elif isinstance(value, bool):
            self.emit(OpCode.CONST_BOOL, "true" if value else "false")
        elif isinstance(value, float):
            self.emit(OpCode.CONST_NUM, repr(value))
        elif isinstance(value, str):
            self.emit(OpCode.CONST_STR, value)
        elif isinstance(value, Char):
            self.emit(OpCode.CONST_CHAR, value.value)
        else:
            raise NotImplementedError(f"Unsupported literal: {value!r}")

    def compile_expr(self, node: Expr) -> None:
        """
        Compile an expression node into bytecode.
        """
        match node:
            case Literal(value=value):
                self.compile_literal(value)
            case Variable(name=name):
                self.emit(OpCode.LOAD, name)
            case Unary(op=op, operand=operand):
                self.compile_expr(operand)
                self.emit(UNARY_OPCODES[op])
            case Binary(left=left, op=op, right=right):
                self.compile_expr(left)
                self.compile_expr(right)
                self.emit(BINARY_OPCODES[op])
            case ArrayLiteral(elements=elements):
                for elem in elements:
                    self.compile_expr(elem)
                self.emit(OpCode.MAKE_ARRAY, str(len(elements)))
            case ArrayAccess(name=name, index=index):
                self.emit(OpCode.LOAD, name)
                self.compile_expr(index)
                self.emit(OpCode.ARRAY_LOAD)
            case _:
                raise NotImplementedError(f"Unsupported expression node: {node!r}")


def parse_source(source: str) -> List[Stmt]:
    """
    Lex and parse CPY source into a list of statements.
    """
    return Parser(tokenize(source)).parse()


def compile_source(source: str) -> List[Instruction]:
    """
    Compile CPY source to instructions.

    Runs lexer, parser, semantic analyzer and compiler in turn; the first
    failing stage raises and no instructions are produced.

    Raises:
        LexError, ParseError, SemanticError
    """
    ast = parse_source(source)
    SemanticAnalyzer().check(ast)
    return Compiler().compile(ast)
