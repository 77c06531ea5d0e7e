"""Bytecode instruction and program containers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

from . import opcodes
from .errors import ProgramError
from .ir import literal_kind

Operand = Union[int, bool, str, None]

_PUSH_KINDS = {
    "PUSH_INT": "int",
    "PUSH_BOOL": "bool",
    "PUSH_STR": "str",
}


@dataclass(frozen=True)
class Instr:
    op: str
    arg: Operand = None

    @property
    def opcode(self) -> int:
        return opcodes.OPCODES[self.op]

    def __str__(self) -> str:
        if self.arg is None:
            return self.op
        return f"{self.op} {self.arg!r}" if self.op in opcodes.PUSH_OPCODES else f"{self.op} {self.arg}"


def _check_instr(index: int, instr: Instr, size: int) -> None:
    if instr.op not in opcodes.OPCODES:
        raise ProgramError(f"instruction {index}: unknown opcode {instr.op!r}")
    if not opcodes.takes_operand(instr.op):
        if instr.arg is not None:
            raise ProgramError(f"instruction {index}: {instr.op} takes no operand")
        return
    if instr.op in _PUSH_KINDS:
        try:
            kind = literal_kind(instr.arg)
        except TypeError:
            kind = None
        if kind != _PUSH_KINDS[instr.op]:
            raise ProgramError(f"instruction {index}: {instr.op} needs a {_PUSH_KINDS[instr.op]} operand, got {instr.arg!r}")
    elif instr.op in opcodes.NAME_OPCODES:
        if not isinstance(instr.arg, str) or not instr.arg:
            raise ProgramError(f"instruction {index}: {instr.op} needs a variable name")
    else:
        target = instr.arg
        if isinstance(target, bool) or not isinstance(target, int):
            raise ProgramError(f"instruction {index}: {instr.op} needs an integer target")
        if not 0 <= target < size:
            raise ProgramError(f"instruction {index}: jump target {target} outside program of {size} instructions")


class Program:
    """An immutable, validated bytecode sequence.

    Instructions are addressed by position; jump targets must name an
    existing position. A program may be executed any number of times and by
    several VM instances.
    """

    __slots__ = ("_instrs",)

    def __init__(self, instrs: Iterable[Instr]) -> None:
        frozen = tuple(instrs)
        for index, instr in enumerate(frozen):
            _check_instr(index, instr, len(frozen))
        self._instrs: Tuple[Instr, ...] = frozen

    @property
    def instructions(self) -> Tuple[Instr, ...]:
        return self._instrs

    def __len__(self) -> int:
        return len(self._instrs)

    def __iter__(self) -> Iterator[Instr]:
        return iter(self._instrs)

    def __getitem__(self, index: int) -> Instr:
        return self._instrs[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Program):
            return NotImplemented
        return self._instrs == other._instrs

    def __hash__(self) -> int:
        return hash(self._instrs)

    def __repr__(self) -> str:
        return f"Program({len(self._instrs)} instructions)"
