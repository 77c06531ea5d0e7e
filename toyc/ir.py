"""Three-address intermediate representation and the AST -> IR generator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from .nodes import (
    BinaryExpr,
    Expression,
    ExprStmt,
    Function,
    LITERAL_NODES,
    Identifier,
    ReturnStmt,
    Statement,
    VarDecl,
)

LOGGER = logging.getLogger("toyc.ir")

TEMP_PREFIX = "%t"

ConstValue = Union[int, bool, str]


def literal_kind(value: ConstValue) -> str:
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, str):
        return "str"
    raise TypeError(f"unsupported literal {value!r}")


def render_literal(value: ConstValue) -> str:
    kind = literal_kind(value)
    if kind == "bool":
        return "truth" if value else "falsy"
    if kind == "str":
        escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
        return f'"{escaped}"'
    return str(value)


@dataclass(frozen=True)
class Const:
    value: ConstValue
    kind: str = field(init=False)

    def __post_init__(self) -> None:
        # kind takes part in equality so Const(1) != Const(True)
        object.__setattr__(self, "kind", literal_kind(self.value))

    def __str__(self) -> str:
        return render_literal(self.value)


@dataclass(frozen=True)
class Var:
    """A user-declared variable."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Temp:
    """A compiler-generated temporary, identified by number only."""

    index: int

    def __str__(self) -> str:
        return f"{TEMP_PREFIX}{self.index}"


Name = Union[Var, Temp]
Value = Union[Const, Var, Temp]


def is_name(value: object) -> bool:
    return isinstance(value, (Var, Temp))


@dataclass(frozen=True)
class Assign:
    target: Name
    value: Value

    def __str__(self) -> str:
        return f"{self.target} = {self.value}"


@dataclass(frozen=True)
class BinaryOp:
    result: Name
    left: Name
    op: str
    right: Name

    def __str__(self) -> str:
        return f"{self.result} = {self.left} {self.op} {self.right}"


@dataclass(frozen=True)
class Return:
    name: Name

    def __str__(self) -> str:
        return f"return {self.name}"


IRInstr = Union[Assign, BinaryOp, Return]


def defined_name(instr: IRInstr) -> Optional[Name]:
    if isinstance(instr, Assign):
        return instr.target
    if isinstance(instr, BinaryOp):
        return instr.result
    return None


def used_names(instr: IRInstr) -> Iterator[Name]:
    """Yield every name *instr* reads, in operand order."""

    if isinstance(instr, Assign):
        if is_name(instr.value):
            yield instr.value
    elif isinstance(instr, BinaryOp):
        yield instr.left
        yield instr.right
    elif isinstance(instr, Return):
        yield instr.name


def max_temp_index(code: List[IRInstr]) -> int:
    highest = 0
    for instr in code:
        names = list(used_names(instr))
        target = defined_name(instr)
        if target is not None:
            names.append(target)
        for name in names:
            if isinstance(name, Temp) and name.index > highest:
                highest = name.index
    return highest


class IRGenerator:
    """Lowers one validated function body into a flat IR list.

    Temporaries are numbered from a counter private to the generator, so
    every ``Temp`` minted for one function is distinct.
    """

    def __init__(self) -> None:
        self.temp_counter = 0
        self.code: List[IRInstr] = []

    def new_temp(self) -> Temp:
        self.temp_counter += 1
        return Temp(self.temp_counter)

    def emit(self, instr: IRInstr) -> None:
        self.code.append(instr)

    def generate(self, function: Function) -> List[IRInstr]:
        self.temp_counter = 0
        self.code = []
        for stmt in function.body:
            self.generate_statement(stmt)
        LOGGER.debug("generated %d IR instructions for %s", len(self.code), function.name)
        return list(self.code)

    def generate_statement(self, stmt: Statement) -> None:
        if isinstance(stmt, VarDecl):
            value = self.generate_expression(stmt.value)
            self.emit(Assign(Var(stmt.name), value))
        elif isinstance(stmt, ReturnStmt):
            value = self.generate_expression(stmt.value)
            self.emit(Return(self.materialize(value)))
        elif isinstance(stmt, ExprStmt):
            self.generate_expression(stmt.expr)
        else:
            raise TypeError(f"unsupported statement {stmt!r}")

    def generate_expression(self, expr: Expression) -> Value:
        if isinstance(expr, LITERAL_NODES):
            return Const(expr.value)
        if isinstance(expr, Identifier):
            return Var(expr.name)
        if isinstance(expr, BinaryExpr):
            left = self.materialize(self.generate_expression(expr.left))
            right = self.materialize(self.generate_expression(expr.right))
            result = self.new_temp()
            self.emit(BinaryOp(result, left, expr.op, right))
            return result
        raise TypeError(f"unsupported expression {expr!r}")

    def materialize(self, value: Value) -> Name:
        """Return *value* as a name, spilling literals into a fresh temporary."""

        if is_name(value):
            return value
        temp = self.new_temp()
        self.emit(Assign(temp, value))
        return temp


def generate(function: Function) -> List[IRInstr]:
    return IRGenerator().generate(function)
