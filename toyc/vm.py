#!/usr/bin/env python3
"""Stack-based virtual machine for toyc bytecode."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, TextIO, Union

from .bytecode import Instr, Program
from .ir import literal_kind, render_literal

LOGGER = logging.getLogger("toyc.vm")

RuntimeValue = Union[int, bool, str]

DEFAULT_MAX_STEPS = 1_000_000


class VMFault(Exception):
    """A runtime fault. The run that raised it produced no value."""

    kind = "fault"

    def __init__(self, message: str, *, pc: Optional[int] = None, op: Optional[str] = None) -> None:
        self.message = message
        self.pc = pc
        self.op = op
        super().__init__(self.describe())

    def describe(self) -> str:
        if self.pc is None:
            return f"{self.kind}: {self.message}"
        return f"{self.kind} at pc={self.pc} ({self.op}): {self.message}"


class StackUnderflow(VMFault):
    kind = "stack underflow"


class UnboundVariable(VMFault):
    kind = "unbound variable"


class TypeMismatch(VMFault):
    kind = "type mismatch"


class DivideByZero(VMFault):
    kind = "divide by zero"


class StepLimitExceeded(VMFault):
    kind = "step limit exceeded"


def value_kind(value: RuntimeValue) -> str:
    try:
        return literal_kind(value)
    except TypeError:
        return type(value).__name__


def _is_int(value: RuntimeValue) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_str(value: RuntimeValue) -> bool:
    return isinstance(value, str)


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""

    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


@dataclass
class Frame:
    """Local bindings of one execution context."""

    locals: Dict[str, RuntimeValue] = field(default_factory=dict)


@dataclass
class ExecutionResult:
    value: Optional[RuntimeValue] = None
    fault: Optional[VMFault] = None
    steps: int = 0

    @property
    def ok(self) -> bool:
        return self.fault is None


class VirtualMachine:
    """Executes a :class:`Program` against an evaluation stack and frame stack.

    An instance mutates its stacks during a run, so concurrent runs need one
    instance each; the program itself is never modified and can be shared.
    """

    def __init__(
        self,
        *,
        trace: bool = False,
        trace_file: Optional[TextIO] = None,
        max_steps: Optional[int] = DEFAULT_MAX_STEPS,
    ) -> None:
        self.trace = trace
        self.trace_out = trace_file
        self.max_steps = max_steps
        self.program: Program = Program(())
        self.stack: List[RuntimeValue] = []
        self.frames: List[Frame] = [Frame()]
        self.pc = 0
        self.steps = 0
        self.running = False
        self.result: Optional[RuntimeValue] = None

    def _log(self, msg: str) -> None:
        if self.trace_out:
            self.trace_out.write(msg + "\n")
            self.trace_out.flush()
        if self.trace:
            print(msg)

    # ------------------------------------------------------------------
    # State helpers

    @property
    def frame(self) -> Frame:
        return self.frames[-1]

    def reset(self, program: Program, bindings: Optional[Mapping[str, RuntimeValue]] = None) -> None:
        self.program = program
        self.stack = []
        self.frames = [Frame(dict(bindings or {}))]
        self.pc = 0
        self.steps = 0
        self.result = None
        self.running = True

    def push(self, value: RuntimeValue) -> None:
        self.stack.append(value)

    def pop(self, instr: Instr) -> RuntimeValue:
        if not self.stack:
            raise StackUnderflow("pop from empty stack", pc=self.pc, op=instr.op)
        return self.stack.pop()

    def _fault(self, cls, message: str, instr: Instr) -> VMFault:
        return cls(message, pc=self.pc, op=instr.op)

    # ------------------------------------------------------------------
    # Execution

    def run(self, program: Program, bindings: Optional[Mapping[str, RuntimeValue]] = None) -> Optional[RuntimeValue]:
        """Execute *program* from the first instruction.

        Returns the value on top of the stack at the first RET, or None when
        the instruction stream runs out. Faults propagate as :class:`VMFault`.
        """

        self.reset(program, bindings)
        try:
            while self.running:
                self.step()
        finally:
            self.running = False
        return self.result

    def execute(self, program: Program, bindings: Optional[Mapping[str, RuntimeValue]] = None) -> ExecutionResult:
        """Like :meth:`run`, but report a fault in the result instead of raising."""

        try:
            value = self.run(program, bindings)
        except VMFault as exc:
            LOGGER.debug("run aborted: %s", exc)
            return ExecutionResult(value=None, fault=exc, steps=self.steps)
        return ExecutionResult(value=value, fault=None, steps=self.steps)

    def step(self) -> None:
        if self.pc >= len(self.program):
            self.running = False
            return
        if self.max_steps is not None and self.steps >= self.max_steps:
            raise StepLimitExceeded(f"gave up after {self.steps} steps", pc=self.pc, op=self.program[self.pc].op)

        instr = self.program[self.pc]
        op = instr.op
        next_pc = self.pc + 1
        self.steps += 1

        if self.trace or self.trace_out:
            stack_txt = ", ".join(render_literal(v) for v in self.stack)
            arg_txt = "" if instr.arg is None else f" arg={instr.arg!r}"
            self._log(f"[TRACE] pc={self.pc:04d} op={op}{arg_txt} stack=[{stack_txt}]")

        if op == "PUSH_INT" or op == "PUSH_BOOL" or op == "PUSH_STR":
            self.push(instr.arg)
        elif op == "LOAD":
            frame = self.frame
            if instr.arg not in frame.locals:
                raise self._fault(UnboundVariable, f"{instr.arg!r} is not bound", instr)
            self.push(frame.locals[instr.arg])
        elif op == "STORE":
            self.frame.locals[instr.arg] = self.pop(instr)
        elif op == "ADD":
            b = self.pop(instr)
            a = self.pop(instr)
            if _is_int(a) and _is_int(b):
                self.push(a + b)
            elif _is_str(a) and _is_str(b):
                self.push(a + b)
            elif _is_str(a) and _is_int(b):
                self.push(a + str(b))
            elif _is_int(a) and _is_str(b):
                self.push(str(a) + b)
            else:
                raise self._fault(TypeMismatch, f"cannot add {value_kind(a)} and {value_kind(b)}", instr)
        elif op == "SUB" or op == "MUL" or op == "DIV":
            b = self.pop(instr)
            a = self.pop(instr)
            if not (_is_int(a) and _is_int(b)):
                raise self._fault(TypeMismatch, f"{op} needs integers, got {value_kind(a)} and {value_kind(b)}", instr)
            if op == "SUB":
                self.push(a - b)
            elif op == "MUL":
                self.push(a * b)
            else:
                if b == 0:
                    raise self._fault(DivideByZero, f"{a} / 0", instr)
                self.push(truncating_div(a, b))
        elif op == "CONCAT":
            b = self.pop(instr)
            a = self.pop(instr)
            if not (_is_str(a) and _is_str(b)):
                raise self._fault(TypeMismatch, f"CONCAT needs strings, got {value_kind(a)} and {value_kind(b)}", instr)
            self.push(a + b)
        elif op == "JMP":
            next_pc = instr.arg
        elif op == "JMP_IF_FALSE":
            cond = self.pop(instr)
            if not isinstance(cond, bool):
                raise self._fault(TypeMismatch, f"condition must be bool, got {value_kind(cond)}", instr)
            if not cond:
                next_pc = instr.arg
        elif op == "RET":
            self.result = self.pop(instr)
            self.running = False
        else:
            raise ValueError(f"unhandled opcode {op!r} at pc={self.pc}")

        self.pc = next_pc


def run_program(
    program: Program,
    bindings: Optional[Mapping[str, RuntimeValue]] = None,
    **vm_kwargs,
) -> Optional[RuntimeValue]:
    return VirtualMachine(**vm_kwargs).run(program, bindings)
