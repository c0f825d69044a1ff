"""
Utility functions shared across CPY tests.
"""
from cpylang.compiler import compile_source
from cpylang.lexer import tokenize
from cpylang.opcodes import Instruction, OpCode
from cpylang.parser import Parser
from cpylang.toolchain import RunResult, run_program


def parse_source(source: str):
    """
    Parse source code and return the list of statements.
    """
    return Parser(tokenize(source)).parse()


def listing(instructions) -> list[str]:
    """
    Render instructions as ``OPCODE operand`` strings for compact asserts.
    """
    return [str(instr) for instr in instructions]


def run_source(source: str) -> RunResult:
    """
    Compile and run source, returning the run result.
    """
    return run_program(compile_source(source))


def program(*pairs) -> list[Instruction]:
    """
    Build an instruction list from ``(opcode_name, operand)`` pairs or bare
    opcode names.
    """
    out = []
    for pair in pairs:
        if isinstance(pair, str):
            out.append(Instruction(OpCode[pair]))
        else:
            name, operand = pair
            out.append(Instruction(OpCode[name], operand))
    return out
