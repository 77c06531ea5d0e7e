"""Static checks run on the AST before IR generation.

Everything later in the pipeline assumes the guarantees established here:
every identifier is declared before use, no name is declared twice, and every
binary expression combines operands of a supported type pair.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from .errors import SemanticError
from .nodes import (
    BinaryExpr,
    BoolLiteral,
    Expression,
    ExprStmt,
    Function,
    Identifier,
    IntLiteral,
    ReturnStmt,
    Statement,
    StrLiteral,
    VarDecl,
)

LOGGER = logging.getLogger("toyc.semantics")

INT = "int"
BOOL = "bool"
STR = "str"

PARAM_TYPE = INT

# (operator, left, right) -> result
_BINARY_RULES: Dict[tuple, str] = {
    ("+", INT, INT): INT,
    ("+", STR, STR): STR,
    ("-", INT, INT): INT,
    ("*", INT, INT): INT,
    ("/", INT, INT): INT,
}
_KNOWN_OPERATORS = frozenset(op for op, _, _ in _BINARY_RULES)


class SemanticAnalyzer:
    def __init__(self) -> None:
        self.symbols: Dict[str, str] = {}

    def analyze(self, function: Function) -> Dict[str, str]:
        self.symbols = {}
        for param in function.params:
            self._declare(param, PARAM_TYPE, line=None)
        for stmt in function.body:
            self.visit_statement(stmt)
        LOGGER.debug("checked %s: %d symbols", function.name, len(self.symbols))
        return dict(self.symbols)

    def _declare(self, name: str, ty: str, *, line: Optional[int]) -> None:
        if name in self.symbols:
            raise SemanticError(f"variable {name!r} already declared", line=line)
        self.symbols[name] = ty

    def visit_statement(self, stmt: Statement) -> None:
        if isinstance(stmt, VarDecl):
            ty = self.visit_expression(stmt.value)
            self._declare(stmt.name, ty, line=stmt.line)
        elif isinstance(stmt, ReturnStmt):
            self.visit_expression(stmt.value)
        elif isinstance(stmt, ExprStmt):
            self.visit_expression(stmt.expr)
        else:
            raise SemanticError(f"unknown statement {type(stmt).__name__}")

    def visit_expression(self, expr: Expression) -> str:
        if isinstance(expr, IntLiteral):
            return INT
        if isinstance(expr, BoolLiteral):
            return BOOL
        if isinstance(expr, StrLiteral):
            return STR
        if isinstance(expr, Identifier):
            ty = self.symbols.get(expr.name)
            if ty is None:
                raise SemanticError(f"use of undeclared variable {expr.name!r}", line=expr.line)
            return ty
        if isinstance(expr, BinaryExpr):
            left = self.visit_expression(expr.left)
            right = self.visit_expression(expr.right)
            if expr.op not in _KNOWN_OPERATORS:
                raise SemanticError(f"unknown operator {expr.op!r}", line=expr.line)
            if left != right:
                raise SemanticError(
                    f"type mismatch in '{expr.op}': {left} vs {right}",
                    line=expr.line,
                )
            result = _BINARY_RULES.get((expr.op, left, right))
            if result is None:
                raise SemanticError(f"operator '{expr.op}' not supported for {left}", line=expr.line)
            return result
        raise SemanticError(f"unknown expression {type(expr).__name__}")


def check(function: Function) -> Dict[str, str]:
    """Validate *function* and return its symbol table (name -> type)."""

    return SemanticAnalyzer().analyze(function)
