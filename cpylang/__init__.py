"""CPY language toolchain.

Lexer, parser, semantic checker, bytecode compiler, bytecode codec and a
stack-based virtual machine for the CPY scripting language.


File: __init__.py
Version: 1.0.0
License: MIT
"""

from cpylang.toolchain import CompileResult, RunResult, compile_program, run_program

__all__ = ["CompileResult", "RunResult", "compile_program", "run_program"]
__version__ = "1.0.0"
