"""
toyc - compiler and bytecode VM for a small imperative language.

Pipeline, one module per stage:

    lexer.py / parser.py / semantics.py  -> validated AST (nodes.py)
    ir.py         -> three-address IR
    optimizer.py  -> fold / copy-propagate / dead-code fixpoint
    lowering.py   -> bytecode Program (bytecode.py, opcodes.py)
    vm.py         -> stack machine

``compiler.py`` wires the stages together; ``cli.py`` and ``repl.py`` are the
command line front ends.
"""

from __future__ import annotations

from .compiler import CompileResult, compile_function, compile_source, execute_source, run_source  # noqa: F401
from .errors import CompileError, LexError, LoweringError, ParseError, ProgramError, SemanticError  # noqa: F401
from .vm import (  # noqa: F401
    DivideByZero,
    ExecutionResult,
    StackUnderflow,
    TypeMismatch,
    UnboundVariable,
    VirtualMachine,
    VMFault,
)

__all__ = [
    "CompileResult",
    "compile_function",
    "compile_source",
    "execute_source",
    "run_source",
    "CompileError",
    "LexError",
    "ParseError",
    "SemanticError",
    "LoweringError",
    "ProgramError",
    "VirtualMachine",
    "ExecutionResult",
    "VMFault",
    "StackUnderflow",
    "UnboundVariable",
    "TypeMismatch",
    "DivideByZero",
]

__version__ = "0.1.0"
