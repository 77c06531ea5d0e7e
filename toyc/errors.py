"""Exception hierarchy shared by the toyc compiler stages."""

from __future__ import annotations

from typing import Optional


class CompileError(Exception):
    """Base class for errors detected before a program runs."""

    def __init__(self, message: str, *, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.message = message
        self.line = line
        self.column = column
        super().__init__(self.describe())

    def describe(self) -> str:
        if self.line is None:
            return self.message
        if self.column is None:
            return f"line {self.line}: {self.message}"
        return f"line {self.line}:{self.column}: {self.message}"


class LexError(CompileError):
    pass


class ParseError(CompileError):
    pass


class SemanticError(CompileError):
    pass


class LoweringError(CompileError):
    """Raised when IR cannot be mapped onto the bytecode instruction set."""


class ProgramError(ValueError):
    """Raised when a hand-built bytecode program is malformed."""
