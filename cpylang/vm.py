"""Virtual machine.

Stack based interpreter for compiled CPY bytecode.

1. State
The VM owns an operand stack, a flat variable store mapping names to
runtime values, and a program counter starting at 0. Nothing is shared
between VM instances.

2. Dispatch
`run()` fetches the instruction at the program counter, executes it, and
advances by one. JUMP sets the counter to its target, JUMP_IF_FALSE pops a
value and jumps when it is not truthy, HALT stops the loop in place. Running
past the last instruction also ends execution.

3. Values
Runtime values are the tagged union described in :mod:`cpylang.values`.
Arithmetic and comparison check operand kinds and raise on mismatch; ADD
concatenates when either side is a string.

4. Errors
Every failure is a :class:`~cpylang.exceptions.VMRuntimeError` carrying the
program counter of the failing instruction, since source lines are no
longer available at this level.


File: vm.py
Version: 1.0.0
License: MIT
"""

from __future__ import annotations

import logging
import math
from typing import Any, List, Optional, TextIO

from cpylang.exceptions import VMRuntimeError
from cpylang.opcodes import Instruction, OpCode
from cpylang.values import (
    Char,
    ValueKind,
    is_truthy,
    kind_of,
    stringify,
    values_equal,
)


logger = logging.getLogger(__name__)

NUMERIC_BINARY_OPS = {
    OpCode.SUB: lambda a, b: a - b,
    OpCode.MUL: lambda a, b: a * b,
    OpCode.GT: lambda a, b: a > b,
    OpCode.GTE: lambda a, b: a >= b,
    OpCode.LT: lambda a, b: a < b,
    OpCode.LTE: lambda a, b: a <= b,
}


class VM:
    """Stack machine for CPY bytecode."""

    def __init__(self, program: List[Instruction], out: Optional[TextIO] = None):
        """
        Initialize the VM.

        Parameters:
            program (list): The instructions to execute. Never modified.
            out (TextIO): Stream for PRINT; defaults to the current stdout.
        """
        self.program = program
        self.out = out
        self.stack: List[Any] = []
        self.vars: dict[str, Any] = {}
        self.pc = 0
        self.output: List[str] = []

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def error(self, message: str) -> VMRuntimeError:
        return VMRuntimeError(message, self.pc)

    def push(self, value: Any) -> None:
        self.stack.append(value)

    def pop(self) -> Any:
        if not self.stack:
            raise self.error("Stack underflow")
        return self.stack.pop()

    def int_operand(self, instr: Instruction) -> int:
        try:
            return int(instr.operand)
        except (TypeError, ValueError):
            raise self.error(
                f"{instr.opcode.value} expects an integer operand, got {instr.operand!r}"
            ) from None

    def jump_target(self, instr: Instruction) -> int:
        # Landing on len(program) ends the run like falling off the end
        target = self.int_operand(instr)
        if not 0 <= target <= len(self.program):
            raise self.error(
                f"{instr.opcode.value} target {target} outside program (size {len(self.program)})"
            )
        return target

    def check_numbers(self, op: OpCode, a: Any, b: Any) -> None:
        if kind_of(a) == ValueKind.NUMBER and kind_of(b) == ValueKind.NUMBER:
            return
        raise self.error(f"{op.value} requires two numbers")

    def to_index(self, value: Any) -> int:
        if kind_of(value) != ValueKind.NUMBER:
            raise self.error("Array index must be a number")
        if not math.isfinite(value):
            raise self.error(f"Array index {stringify(value)} is not finite")
        return int(value)

    def array_at(self, value: Any, message: str) -> list:
        if kind_of(value) != ValueKind.ARRAY:
            raise self.error(message)
        return value

    def check_bounds(self, array: list, idx: int) -> None:
        if not 0 <= idx < len(array):
            raise self.error(f"Array index {idx} out of bounds (size {len(array)})")

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def run(self) -> None:
        """
        Execute until HALT, the end of the program or the first error.

        Raises:
            VMRuntimeError: On any runtime failure.
        """
        while self.pc < len(self.program):
            instr = self.program[self.pc]
            if instr.opcode == OpCode.HALT:
                logger.debug("halt at %d", self.pc)
                return
            try:
                self.execute(instr)
            except RecursionError:
                # An array stored inside itself has no finite rendering
                raise self.error("Value nested too deeply") from None

    def execute(self, instr: Instruction) -> None:
        """
        Execute a single instruction and move the program counter.
        """
        op, arg = instr
        match op:
            # Constants
            case OpCode.CONST_NUM:
                try:
                    self.push(float(arg))
                except (TypeError, ValueError):
                    raise self.error(f"Invalid number constant {arg!r}") from None
            case OpCode.CONST_STR:
                self.push(arg)
            case OpCode.CONST_CHAR:
                if not arg:
                    raise self.error("Empty char constant")
                self.push(Char(arg[0]))
            case OpCode.CONST_BOOL:
                self.push(arg is not None and arg.lower() == "true")
            case OpCode.CONST_NULL:
                self.push(None)

            # Variables
            case OpCode.LOAD:
                if arg not in self.vars:
                    raise self.error(f"Undefined variable '{arg}'")
                self.push(self.vars[arg])
            case OpCode.STORE:
                self.vars[arg] = self.pop()

            # Arithmetic
            case OpCode.ADD:
                b = self.pop()
                a = self.pop()
                ka, kb = kind_of(a), kind_of(b)
                if ka == ValueKind.NUMBER and kb == ValueKind.NUMBER:
                    self.push(a + b)
                elif ka == ValueKind.STRING or kb == ValueKind.STRING:
                    self.push(stringify(a) + stringify(b))
                else:
                    raise self.error("ADD requires two numbers or at least one string")
            case OpCode.DIV:
                b = self.pop()
                a = self.pop()
                self.check_numbers(op, a, b)
                if b == 0:
                    raise self.error("Division by zero")
                self.push(a / b)
            case OpCode.SUB | OpCode.MUL | OpCode.GT | OpCode.GTE | OpCode.LT | OpCode.LTE:
                b = self.pop()
                a = self.pop()
                self.check_numbers(op, a, b)
                self.push(NUMERIC_BINARY_OPS[op](a, b))

            # Unary
            case OpCode.NEG:
                value = self.pop()
                if kind_of(value) != ValueKind.NUMBER:
                    raise self.error("NEG requires a number")
                self.push(-value)
            case OpCode.NOT:
                self.push(not is_truthy(self.pop()))

            # Equality and logic; both operands are already evaluated
            case OpCode.EQ:
                b = self.pop()
                self.push(values_equal(self.pop(), b))
            case OpCode.NEQ:
                b = self.pop()
                self.push(not values_equal(self.pop(), b))
            case OpCode.AND:
                b = self.pop()
                a = self.pop()
                self.push(is_truthy(a) and is_truthy(b))
            case OpCode.OR:
                b = self.pop()
                a = self.pop()
                self.push(is_truthy(a) or is_truthy(b))

            # Control flow
            case OpCode.JUMP:
                self.pc = self.jump_target(instr)
                return
            case OpCode.JUMP_IF_FALSE:
                target = self.jump_target(instr)
                if not is_truthy(self.pop()):
                    self.pc = target
                    return

            # I/O
            case OpCode.PRINT:
                text = stringify(self.pop())
                self.output.append(text)
                print(text, file=self.out)

            # Arrays
            case OpCode.MAKE_ARRAY:
                count = self.int_operand(instr)
                if count < 0 or count > len(self.stack):
                    raise self.error(f"MAKE_ARRAY of {count} elements with {len(self.stack)} on the stack")
                # Popped last-first; reverse back to source order
                elements = [self.pop() for _ in range(count)]
                elements.reverse()
                self.push(elements)
            case OpCode.ARRAY_LOAD:
                idx_value = self.pop()
                array = self.array_at(self.pop(), "ARRAY_LOAD: not an array")
                idx = self.to_index(idx_value)
                self.check_bounds(array, idx)
                self.push(array[idx])
            case OpCode.ARRAY_STORE:
                idx_value = self.pop()
                value = self.pop()
                array = self.array_at(self.vars.get(arg), f"ARRAY_STORE: '{arg}' is not an array")
                idx = self.to_index(idx_value)
                self.check_bounds(array, idx)
                array[idx] = value

            case _:
                raise self.error(f"Unknown opcode: {op}")

        self.pc += 1


def run(program: List[Instruction], out: Optional[TextIO] = None) -> VM:
    """
    Execute a program on a fresh VM and return the VM for inspection.
    """
    vm = VM(program, out)
    vm.run()
    return vm
