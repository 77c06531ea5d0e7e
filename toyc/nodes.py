"""AST node types produced by the parser and consumed by the IR generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class IntLiteral:
    value: int
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class BoolLiteral:
    value: bool
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class StrLiteral:
    value: str
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class Identifier:
    name: str
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class BinaryExpr:
    left: "Expression"
    op: str
    right: "Expression"
    line: Optional[int] = field(default=None, compare=False)


Expression = Union[IntLiteral, BoolLiteral, StrLiteral, Identifier, BinaryExpr]
LITERAL_NODES = (IntLiteral, BoolLiteral, StrLiteral)


@dataclass(frozen=True)
class VarDecl:
    name: str
    value: Expression
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class ExprStmt:
    expr: Expression
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class ReturnStmt:
    value: Expression
    line: Optional[int] = field(default=None, compare=False)


Statement = Union[VarDecl, ExprStmt, ReturnStmt]


@dataclass
class Function:
    """A parsed function: the unit every later stage works on."""

    name: str
    params: List[str] = field(default_factory=list)
    body: List[Statement] = field(default_factory=list)
