"""Human readable and JSON listings of IR and bytecode."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from . import opcodes
from .bytecode import Program
from .ir import Assign, BinaryOp, Const, IRInstr, Return, render_literal

MNEMONIC_WIDTH = 12


NO_VALUE = "<no value>"


def format_value(value: Optional[Any]) -> str:
    return NO_VALUE if value is None else render_literal(value)


def format_ir(code: Sequence[IRInstr], *, numbered: bool = True) -> List[str]:
    lines = []
    for idx, instr in enumerate(code):
        lines.append(f"{idx:04d}  {instr}" if numbered else str(instr))
    return lines


def format_operand(mnemonic: str, arg: Any) -> str:
    if arg is None:
        return ""
    if mnemonic in opcodes.PUSH_OPCODES:
        return render_literal(arg)
    if mnemonic in opcodes.JUMP_OPCODES:
        return f"-> {arg:04d}"
    return str(arg)


def format_program(program: Program) -> List[str]:
    """Render *program* one instruction per line: ``0003  LOAD        x``."""

    lines = []
    for pc, instr in enumerate(program):
        operand = format_operand(instr.op, instr.arg)
        text = f"{pc:04d}  {instr.op:<{MNEMONIC_WIDTH}}{operand}".rstrip()
        lines.append(text)
    return lines


def ir_to_dict(instr: IRInstr) -> Dict[str, Any]:
    if isinstance(instr, Assign):
        entry: Dict[str, Any] = {"op": "assign", "target": str(instr.target)}
        if isinstance(instr.value, Const):
            entry["const"] = instr.value.value
            entry["kind"] = instr.value.kind
        else:
            entry["source"] = str(instr.value)
        return entry
    if isinstance(instr, BinaryOp):
        return {
            "op": "binary",
            "result": str(instr.result),
            "left": str(instr.left),
            "operator": instr.op,
            "right": str(instr.right),
        }
    if isinstance(instr, Return):
        return {"op": "return", "name": str(instr.name)}
    raise TypeError(f"unknown IR instruction {instr!r}")


def program_to_dict(program: Program) -> List[Dict[str, Any]]:
    listing = []
    for pc, instr in enumerate(program):
        entry: Dict[str, Any] = {"pc": pc, "mnemonic": instr.op, "opcode": instr.opcode}
        if instr.arg is not None:
            entry["arg"] = instr.arg
        listing.append(entry)
    return listing


def build_listing(
    ir: Sequence[IRInstr],
    optimized_ir: Optional[Sequence[IRInstr]],
    program: Program,
) -> Dict[str, Any]:
    """Collect every compile artifact into one JSON-serializable mapping."""

    payload: Dict[str, Any] = {
        "version": 1,
        "ir": [ir_to_dict(instr) for instr in ir],
        "bytecode": program_to_dict(program),
    }
    if optimized_ir is not None:
        payload["optimized_ir"] = [ir_to_dict(instr) for instr in optimized_ir]
    return payload
