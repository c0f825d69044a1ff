"""
CPY command line.

Workflow:
1. ``compile`` reads a ``.cpy`` source file, runs lexer, parser, semantic
   analyzer and compiler, and writes the bytecode next to it as ``.cpyc``.
2. ``run`` reads a ``.cpyc`` file and executes it on the virtual machine.
3. ``disasm`` prints a numbered listing of a ``.cpyc`` file.

Set ``CPYDEBUG`` (or pass ``--debug``) to log at DEBUG level and dump the
tokens, tree and instructions of a compilation.


File: cli.py
Version: 1.0.0
License: MIT
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from cpylang import bytecode
from cpylang.compiler import Compiler
from cpylang.exceptions import CpyError
from cpylang.lexer import tokenize
from cpylang.parser import Parser
from cpylang.toolchain import compile_program, run_program


logger = logging.getLogger(__name__)


def default_output_path(source: Path) -> Path:
    """
    Return ``x.cpyc`` for ``x.cpy``; append ``.cpyc`` to anything else.
    """
    if source.suffix == ".cpy":
        return source.with_suffix(".cpyc")
    return source.with_name(source.name + ".cpyc")


def debug_print_pipeline(source: str) -> None:
    """
    Print tokenized source, tree and instruction listing.
    """
    tokens = tokenize(source)
    print("\nTokens:\n")
    print(tokens)
    ast = Parser(tokens).parse()
    print("\nAST:\n")
    for stmt in ast:
        print(stmt)
    print("\nBytecode:\n")
    print(bytecode.disassemble(Compiler().compile(ast)))
    print(" ")


def cmd_compile(args: argparse.Namespace) -> int:
    source_path = Path(args.source)
    source = source_path.read_text(encoding="utf-8")

    result = compile_program(source)
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1
    if args.debug:
        debug_print_pipeline(source)

    out_path = Path(args.output) if args.output else default_output_path(source_path)
    bytecode.write(result.instructions, out_path)
    logger.debug("wrote %s", out_path)
    print(f"Compiled: {source_path} -> {out_path}")
    print(f"{len(result.instructions)} instructions generated.")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    try:
        program = bytecode.read(args.bytecode)
    except CpyError as e:
        print(f"Error reading bytecode: {e}", file=sys.stderr)
        return 1

    result = run_program(program)
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1
    return 0


def cmd_disasm(args: argparse.Namespace) -> int:
    try:
        program = bytecode.read(args.bytecode)
    except CpyError as e:
        print(f"Error reading bytecode: {e}", file=sys.stderr)
        return 1
    print(bytecode.disassemble(program))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cpy", description="CPY compiler and virtual machine")
    parser.add_argument(
        "--debug",
        action="store_true",
        default=bool(os.environ.get("CPYDEBUG")),
        help="log at DEBUG level and dump compiler stages (also enabled by CPYDEBUG)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_compile = sub.add_parser("compile", help="compile a .cpy source file to bytecode")
    p_compile.add_argument("source", help="path to a .cpy source file")
    p_compile.add_argument("-o", "--output", help="bytecode output path (default: <source>.cpyc)")
    p_compile.set_defaults(func=cmd_compile)

    p_run = sub.add_parser("run", help="execute a .cpyc bytecode file")
    p_run.add_argument("bytecode", help="path to a .cpyc bytecode file")
    p_run.set_defaults(func=cmd_run)

    p_disasm = sub.add_parser("disasm", help="print a numbered listing of a .cpyc file")
    p_disasm.add_argument("bytecode", help="path to a .cpyc bytecode file")
    p_disasm.set_defaults(func=cmd_disasm)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the CLI.
    """
    args = build_parser().parse_args(argv)
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main(sys.argv[1:]))
