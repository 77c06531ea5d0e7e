#!/usr/bin/env python3
"""Shared opcode definitions for the toyc bytecode.

Keeping the canonical mapping in a single module prevents drift between the
lowerer, the virtual machine, and the listing helpers. Tests assert that all
consumers import these tables unchanged.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Tuple

# Ordered list so listings and tooling can iterate in a stable order.
OPCODE_LIST: Tuple[Tuple[str, int], ...] = (
    ("PUSH_INT", 0x01),
    ("PUSH_BOOL", 0x02),
    ("PUSH_STR", 0x03),
    ("LOAD", 0x10),
    ("STORE", 0x11),
    ("ADD", 0x20),
    ("SUB", 0x21),
    ("MUL", 0x22),
    ("DIV", 0x23),
    ("CONCAT", 0x24),
    ("JMP", 0x30),
    ("JMP_IF_FALSE", 0x31),
    ("RET", 0x3F),
)

OPCODES: Dict[str, int] = {mnemonic: opcode for mnemonic, opcode in OPCODE_LIST}
OPCODE_NAMES: Dict[int, str] = {opcode: mnemonic for mnemonic, opcode in OPCODE_LIST}

PUSH_OPCODES: FrozenSet[str] = frozenset({"PUSH_INT", "PUSH_BOOL", "PUSH_STR"})
NAME_OPCODES: FrozenSet[str] = frozenset({"LOAD", "STORE"})
JUMP_OPCODES: FrozenSet[str] = frozenset({"JMP", "JMP_IF_FALSE"})

# Binary IR operators and the opcode each one lowers to.
BINARY_OPERATORS: Dict[str, str] = {
    "+": "ADD",
    "-": "SUB",
    "*": "MUL",
    "/": "DIV",
}

__all__ = [
    "OPCODE_LIST",
    "OPCODES",
    "OPCODE_NAMES",
    "PUSH_OPCODES",
    "NAME_OPCODES",
    "JUMP_OPCODES",
    "BINARY_OPERATORS",
    "takes_operand",
]


def takes_operand(mnemonic: str) -> bool:
    return mnemonic in PUSH_OPCODES or mnemonic in NAME_OPCODES or mnemonic in JUMP_OPCODES
