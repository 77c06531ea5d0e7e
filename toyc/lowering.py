"""Deterministic IR -> bytecode lowering."""

from __future__ import annotations

import logging
from typing import List

from . import opcodes
from .bytecode import Instr, Program
from .errors import LoweringError
from .ir import Assign, BinaryOp, Const, IRInstr, Return

LOGGER = logging.getLogger("toyc.lowering")

_PUSH_FOR_KIND = {
    "int": "PUSH_INT",
    "bool": "PUSH_BOOL",
    "str": "PUSH_STR",
}


def lower_instr(instr: IRInstr) -> List[Instr]:
    if isinstance(instr, Assign):
        target = str(instr.target)
        value = instr.value
        if isinstance(value, Const):
            return [Instr(_PUSH_FOR_KIND[value.kind], value.value), Instr("STORE", target)]
        return [Instr("LOAD", str(value)), Instr("STORE", target)]
    if isinstance(instr, BinaryOp):
        mnemonic = opcodes.BINARY_OPERATORS.get(instr.op)
        if mnemonic is None:
            raise LoweringError(f"no opcode for binary operator {instr.op!r} in '{instr}'")
        return [
            Instr("LOAD", str(instr.left)),
            Instr("LOAD", str(instr.right)),
            Instr(mnemonic),
            Instr("STORE", str(instr.result)),
        ]
    if isinstance(instr, Return):
        return [Instr("LOAD", str(instr.name)), Instr("RET")]
    raise LoweringError(f"unknown IR instruction {instr!r}")


def lower(code: List[IRInstr]) -> Program:
    """Translate *code* into a :class:`Program` in a single pass.

    Jump opcodes are part of the instruction set but never produced here.
    """

    out: List[Instr] = []
    for instr in code:
        out.extend(lower_instr(instr))
    LOGGER.debug("lowered %d IR instructions to %d bytecode instructions", len(code), len(out))
    return Program(out)
