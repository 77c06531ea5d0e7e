"""Compile driver wiring the front end, optimizer, lowerer and VM together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

from . import ir as ir_mod
from . import lexer, lowering, optimizer, parser, semantics
from .bytecode import Program
from .ir import IRInstr
from .nodes import Function
from .vm import ExecutionResult, RuntimeValue, VirtualMachine

LOGGER = logging.getLogger("toyc.compiler")


@dataclass
class CompileResult:
    function: Function
    ir: List[IRInstr]
    optimized_ir: Optional[List[IRInstr]]
    program: Program

    @property
    def final_ir(self) -> List[IRInstr]:
        return self.optimized_ir if self.optimized_ir is not None else self.ir


def compile_function(function: Function, *, optimize: bool = True, check: bool = True) -> CompileResult:
    """Compile an AST function. ``check=False`` trusts the caller's validation."""

    if check:
        semantics.check(function)
    code = ir_mod.generate(function)
    optimized = optimizer.optimize(code) if optimize else None
    program = lowering.lower(optimized if optimized is not None else code)
    LOGGER.debug(
        "compiled %s: ir=%d optimized=%s bytecode=%d",
        function.name,
        len(code),
        len(optimized) if optimized is not None else "-",
        len(program),
    )
    return CompileResult(function=function, ir=code, optimized_ir=optimized, program=program)


def compile_source(text: str, *, optimize: bool = True) -> CompileResult:
    function = parser.parse(lexer.tokenize(text))
    return compile_function(function, optimize=optimize)


def run_source(
    text: str,
    *,
    bindings: Optional[Mapping[str, RuntimeValue]] = None,
    optimize: bool = True,
    trace: bool = False,
) -> Optional[RuntimeValue]:
    result = compile_source(text, optimize=optimize)
    return VirtualMachine(trace=trace).run(result.program, bindings)


def execute_source(
    text: str,
    *,
    bindings: Optional[Mapping[str, RuntimeValue]] = None,
    optimize: bool = True,
) -> ExecutionResult:
    result = compile_source(text, optimize=optimize)
    return VirtualMachine().execute(result.program, bindings)
