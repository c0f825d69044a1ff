"""CPY bytecode text format.

Serializes an instruction list to a line oriented text file and back::

    #CPY_BYTECODE v1.0
    CONST_NUM 5.0
    STORE x
    CONST_STR "say \\"hi\\"\\n"
    PRINT
    HALT

The first line is the header and must be present. Each following non-blank
line is ``OPCODE`` or ``OPCODE <operand>``, split at the first space. Only
``CONST_STR`` operands are quoted and escaped (backslash, double quote,
newline, carriage return and tab); every other operand is written verbatim.

Usage:
    text = dumps(instructions)
    instructions = loads(text)


File: bytecode.py
Version: 1.0.0
License: MIT
"""

from __future__ import annotations

import logging
from os import PathLike
from typing import Iterable, List, Optional

from cpylang.exceptions import BytecodeFormatError
from cpylang.opcodes import Instruction, OpCode


logger = logging.getLogger(__name__)

# Bytecode header, part of the interchange contract
HEADER = "#CPY_BYTECODE v1.0"

ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

UNESCAPES: dict[str, str] = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Opcodes that must carry an operand
OPERAND_OPCODES = frozenset({
    OpCode.CONST_NUM,
    OpCode.CONST_STR,
    OpCode.CONST_CHAR,
    OpCode.CONST_BOOL,
    OpCode.LOAD,
    OpCode.STORE,
    OpCode.JUMP,
    OpCode.JUMP_IF_FALSE,
    OpCode.MAKE_ARRAY,
    OpCode.ARRAY_STORE,
})


def escape_string(value: str) -> str:
    """
    Escape a string operand for the text format.
    """
    return "".join(ESCAPES.get(ch, ch) for ch in value)


def unescape_string(value: str, line_number: Optional[int] = None) -> str:
    """
    Reverse :func:`escape_string`.

    Raises:
        BytecodeFormatError: On an unknown or dangling escape sequence.
    """
    out: list[str] = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt is None:
            raise BytecodeFormatError("dangling escape at end of string", line_number)
        if nxt not in UNESCAPES:
            raise BytecodeFormatError(f"unknown escape sequence '\\{nxt}'", line_number)
        out.append(UNESCAPES[nxt])
    return "".join(out)


def encode_instruction(instr: Instruction) -> str:
    """
    Render one instruction as a single line of the text format.

    Raises:
        BytecodeFormatError: If a verbatim operand contains a line break.
    """
    op, arg = instr
    if arg is None:
        return op.value
    if op == OpCode.CONST_STR:
        return f'{op.value} "{escape_string(arg)}"'
    if "\n" in arg or "\r" in arg:
        raise BytecodeFormatError(
            f"{op.value} operand {arg!r} contains a line break and cannot be written verbatim"
        )
    return f"{op.value} {arg}"


def decode_instruction(line: str, line_number: int) -> Instruction:
    """
    Parse one non-blank line of the text format.

    Raises:
        BytecodeFormatError: On an unknown opcode or a malformed operand.
    """
    name, sep, arg = line.lstrip().partition(" ")
    try:
        op = OpCode[name]
    except KeyError:
        raise BytecodeFormatError(f"unknown opcode '{name}'", line_number) from None

    if not sep or (op not in OPERAND_OPCODES and not arg.strip()):
        if op in OPERAND_OPCODES:
            raise BytecodeFormatError(f"{name} requires an operand", line_number)
        return Instruction(op)
    if op not in OPERAND_OPCODES:
        raise BytecodeFormatError(f"{name} takes no operand", line_number)

    if op == OpCode.CONST_STR:
        if len(arg) < 2 or not (arg.startswith('"') and arg.endswith('"')):
            raise BytecodeFormatError("CONST_STR operand must be double-quoted", line_number)
        arg = unescape_string(arg[1:-1], line_number)
    return Instruction(op, arg)


def dumps(instructions: Iterable[Instruction]) -> str:
    """
    Serialize instructions to bytecode text, header first.
    """
    lines = [HEADER]
    lines.extend(encode_instruction(instr) for instr in instructions)
    return "\n".join(lines) + "\n"


def loads(text: str) -> List[Instruction]:
    """
    Deserialize bytecode text. Blank lines are skipped.

    Raises:
        BytecodeFormatError: If the header is missing or any line is malformed.
    """
    lines = text.split("\n")
    first = lines[0].rstrip("\r") if text else ""
    if not first.startswith(HEADER):
        raise BytecodeFormatError("missing header")
    logger.debug("bytecode header ok: %s", first)

    instructions: List[Instruction] = []
    for line_number, raw in enumerate(lines[1:], start=2):
        if raw.endswith("\r"):
            raw = raw[:-1]
        if not raw.strip():
            continue
        instructions.append(decode_instruction(raw, line_number))
    logger.debug("decoded %d instructions", len(instructions))
    return instructions


def serialize(instructions: Iterable[Instruction]) -> bytes:
    """
    Serialize instructions to UTF-8 encoded bytecode.
    """
    return dumps(instructions).encode("utf-8")


def deserialize(data: bytes) -> List[Instruction]:
    """
    Deserialize UTF-8 encoded bytecode.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise BytecodeFormatError(f"not UTF-8 text ({e.reason})") from e
    return loads(text)


def write(instructions: Iterable[Instruction], path: str | PathLike) -> None:
    """
    Write instructions to a bytecode file.
    """
    with open(path, "wb") as f:
        f.write(serialize(instructions))


def read(path: str | PathLike) -> List[Instruction]:
    """
    Read instructions from a bytecode file.
    """
    with open(path, "rb") as f:
        return deserialize(f.read())


def disassemble(instructions: Iterable[Instruction]) -> str:
    """
    Render a numbered listing, one instruction per line.
    """
    return "\n".join(
        f"{idx:4d}  {encode_instruction(instr)}" for idx, instr in enumerate(instructions)
    )
