"""IR optimizer: constant folding, copy propagation and dead-code elimination.

Every pass is a pure list -> list transform that returns a new list.
:func:`optimize` runs the three passes in order and repeats the whole pipeline
until one iteration leaves the list unchanged.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional, Set

from .ir import (
    Assign,
    BinaryOp,
    Const,
    IRInstr,
    Name,
    Return,
    Temp,
    Var,
    is_name,
    max_temp_index,
    used_names,
)
from .vm import truncating_div

LOGGER = logging.getLogger("toyc.optimizer")


def fold_binary(op: str, left: Const, right: Const) -> Optional[Const]:
    """Return the folded constant, or None when the operation must stay at run time."""

    if left.kind == "int" and right.kind == "int":
        a, b = left.value, right.value
        if op == "+":
            return Const(a + b)
        if op == "-":
            return Const(a - b)
        if op == "*":
            return Const(a * b)
        if op == "/":
            if b == 0:
                return None
            return Const(truncating_div(a, b))
        return None
    if left.kind == "str" and right.kind == "str" and op == "+":
        return Const(left.value + right.value)
    return None


# ---------------------------------------------------------------------------
# Pass 1: constant folding + propagation


def constant_fold_and_propagate(code: List[IRInstr]) -> List[IRInstr]:
    result: List[IRInstr] = []
    consts: Dict[Name, Const] = {}
    next_temp = max_temp_index(code)

    for instr in code:
        if isinstance(instr, Assign):
            value = instr.value
            known = consts.get(value) if is_name(value) else value
            if known is not None:
                result.append(Assign(instr.target, known))
                consts[instr.target] = known
            else:
                result.append(instr)
                consts.pop(instr.target, None)
        elif isinstance(instr, BinaryOp):
            left = consts.get(instr.left)
            right = consts.get(instr.right)
            folded = None
            if left is not None and right is not None:
                folded = fold_binary(instr.op, left, right)
            if folded is not None:
                result.append(Assign(instr.result, folded))
                consts[instr.result] = folded
            else:
                result.append(instr)
                consts.pop(instr.result, None)
        elif isinstance(instr, Return):
            known = consts.get(instr.name)
            if known is not None and isinstance(instr.name, Var):
                next_temp += 1
                temp = Temp(next_temp)
                result.append(Assign(temp, known))
                result.append(Return(temp))
            else:
                result.append(instr)
        else:
            raise TypeError(f"unknown IR instruction {instr!r}")
    return result


# ---------------------------------------------------------------------------
# Pass 2: copy propagation


def resolve_copy(name: Name, copies: Dict[Name, Name]) -> Name:
    """Follow *copies* from *name* to its ultimate source.

    A name seen twice during one resolution means the chain is cyclic; the
    walk stops there and returns the last name reached.
    """

    seen: Set[Name] = set()
    while name in copies:
        if name in seen:
            break
        seen.add(name)
        name = copies[name]
    return name


def _invalidate(copies: Dict[Name, Name], name: Name) -> None:
    copies.pop(name, None)
    for target in [t for t, src in copies.items() if src == name]:
        del copies[target]


def copy_propagation(code: List[IRInstr]) -> List[IRInstr]:
    """Rewrite uses of copied names to their sources in one forward walk.

    The substitution map only ever describes copies that are still valid at
    the current instruction: defining a name drops both its own mapping and
    every mapping that reads from it.
    """

    copies: Dict[Name, Name] = {}
    result: List[IRInstr] = []

    for instr in code:
        if isinstance(instr, Assign):
            target, value = instr.target, instr.value
            if is_name(value):
                resolved = resolve_copy(value, copies)
                if resolved == target:
                    new_value = value
                else:
                    new_value = resolved
                result.append(Assign(target, new_value))
                _invalidate(copies, target)
                if new_value != target:
                    copies[target] = new_value
            else:
                result.append(instr)
                _invalidate(copies, target)
        elif isinstance(instr, BinaryOp):
            left = resolve_copy(instr.left, copies)
            right = resolve_copy(instr.right, copies)
            result.append(BinaryOp(instr.result, left, instr.op, right))
            _invalidate(copies, instr.result)
        elif isinstance(instr, Return):
            result.append(Return(resolve_copy(instr.name, copies)))
        else:
            raise TypeError(f"unknown IR instruction {instr!r}")
    return result


# ---------------------------------------------------------------------------
# Pass 3: dead-code elimination


def use_counts(code: List[IRInstr]) -> Counter:
    counts: Counter = Counter()
    for instr in code:
        counts.update(used_names(instr))
    return counts


def dead_code_elimination(code: List[IRInstr]) -> List[IRInstr]:
    """Drop assignments to temporaries nobody reads, until none are left.

    Only ``Temp`` targets are eligible; user variables stay even when unused.
    ``BinaryOp`` is never dropped, it may fault at run time.
    """

    work = list(code)
    while True:
        counts = use_counts(work)
        kept = [
            instr
            for instr in work
            if not (isinstance(instr, Assign) and isinstance(instr.target, Temp) and counts[instr.target] == 0)
        ]
        if len(kept) == len(work):
            return kept
        work = kept


# ---------------------------------------------------------------------------
# Pipeline

PASSES = (
    ("fold", constant_fold_and_propagate),
    ("copy", copy_propagation),
    ("dce", dead_code_elimination),
)


def run_pipeline_once(code: List[IRInstr]) -> List[IRInstr]:
    work = list(code)
    for name, pass_fn in PASSES:
        before = len(work)
        work = pass_fn(work)
        LOGGER.debug("pass %s: %d -> %d instructions", name, before, len(work))
    return work


def optimize(code: List[IRInstr]) -> List[IRInstr]:
    """Run the full pass pipeline until it reaches a fixpoint.

    The stop condition is content equality between the input and output of
    one iteration, which implies an unchanged instruction count and makes a
    second call on the result a no-op.
    """

    work = list(code)
    iteration = 0
    while True:
        iteration += 1
        optimized = run_pipeline_once(work)
        LOGGER.debug("iteration %d: %d -> %d instructions", iteration, len(work), len(optimized))
        if optimized == work:
            return optimized
        work = optimized
