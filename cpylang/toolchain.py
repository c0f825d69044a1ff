"""Boundary operations of the toolchain.

`compile_program()` and `run_program()` are the two entry points used by the
command line and by embedders. Unlike the stages they drive, they do not
raise: failures come back as the ``error`` field of the result, already
classified by :class:`~cpylang.exceptions.ErrorKind`.


File: toolchain.py
Version: 1.0.0
License: MIT
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from cpylang.compiler import compile_source
from cpylang.exceptions import CpyError, ErrorKind
from cpylang.opcodes import Instruction
from cpylang.vm import VM


logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Outcome of compiling source text."""
    instructions: List[Instruction] = field(default_factory=list)
    error: Optional[CpyError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunResult:
    """Outcome of running a program: printed lines and the error, if any."""
    output: List[str] = field(default_factory=list)
    error: Optional[CpyError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return None if self.error is None else self.error.kind


def compile_program(source: str) -> CompileResult:
    """
    Compile source text. On failure no instructions are returned.
    """
    try:
        instructions = compile_source(source)
    except CpyError as e:
        logger.debug("compilation failed (%s): %s", e.kind.value, e)
        return CompileResult(error=e)
    return CompileResult(instructions)


def run_program(instructions: List[Instruction], out: Optional[TextIO] = None) -> RunResult:
    """
    Run a program to HALT or to its first runtime error. Lines printed
    before an error are kept in the result.
    """
    vm = VM(instructions, out)
    try:
        vm.run()
    except CpyError as e:
        logger.debug("execution failed at %d: %s", vm.pc, e)
        return RunResult(vm.output, e)
    return RunResult(vm.output)
