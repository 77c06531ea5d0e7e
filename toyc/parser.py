"""Recursive-descent parser for toyc."""

from __future__ import annotations

import logging
from typing import List, Optional

from . import lexer
from .errors import ParseError
from .lexer import Token
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

LOGGER = logging.getLogger("toyc.parser")

IMPLICIT_FUNCTION_NAME = "main"

_ADDITIVE = ("+", "-")
_MULTIPLICATIVE = ("*", "/")


class Parser:
    """Builds a :class:`Function` from a token list.

    Grammar::

        function  := "func" IDENT "(" [IDENT ("," IDENT)*] ")" "{" statement* "}"
        statement := "var" IDENT "=" expr ";" | "return" expr ";" | expr ";"
        expr      := term (("+" | "-") term)*
        term      := factor (("*" | "/") factor)*
        factor    := INT | BOOL | STRING | IDENT | "(" expr ")"

    Source that does not start with ``func`` is treated as the body of an
    implicit ``main()``.
    """

    def __init__(self, tokens: List[Token]) -> None:
        if not tokens or tokens[-1].kind != lexer.EOF:
            raise ValueError("token list must end with an EOF token")
        self.tokens = tokens
        self.pos = 0

    # ------------------------------------------------------------------
    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != lexer.EOF:
            self.pos += 1
        return tok

    def check(self, kind: str, value: object = None) -> bool:
        return self.peek().matches(kind, value)

    def accept(self, kind: str, value: object = None) -> Optional[Token]:
        if self.check(kind, value):
            return self.advance()
        return None

    def expect(self, kind: str, value: object = None, *, what: Optional[str] = None) -> Token:
        tok = self.peek()
        if not tok.matches(kind, value):
            wanted = what or (repr(value) if value is not None else kind)
            raise ParseError(f"expected {wanted}, found {tok.describe()}", line=tok.line, column=tok.column)
        return self.advance()

    # ------------------------------------------------------------------
    # Top level

    def parse(self) -> Function:
        if self.check(lexer.KEYWORD, "func"):
            function = self.parse_function()
        else:
            body = self.parse_statements(until_eof=True)
            function = Function(name=IMPLICIT_FUNCTION_NAME, params=[], body=body)
        self.expect(lexer.EOF, what="end of input")
        LOGGER.debug("parsed function %s with %d statements", function.name, len(function.body))
        return function

    def parse_function(self) -> Function:
        self.expect(lexer.KEYWORD, "func")
        name = self.expect(lexer.IDENT, what="function name").value
        self.expect(lexer.DELIM, "(")
        params: List[str] = []
        if not self.check(lexer.DELIM, ")"):
            while True:
                param = self.expect(lexer.IDENT, what="parameter name")
                if param.value in params:
                    raise ParseError(f"duplicate parameter {param.value!r}", line=param.line, column=param.column)
                params.append(param.value)
                if not self.accept(lexer.DELIM, ","):
                    break
        self.expect(lexer.DELIM, ")")
        self.expect(lexer.DELIM, "{")
        body = self.parse_statements(until_eof=False)
        self.expect(lexer.DELIM, "}")
        return Function(name=name, params=params, body=body)

    def parse_statements(self, *, until_eof: bool) -> List[Statement]:
        stmts: List[Statement] = []
        while True:
            if self.check(lexer.EOF):
                break
            if not until_eof and self.check(lexer.DELIM, "}"):
                break
            stmts.append(self.parse_statement())
        return stmts

    def parse_statement(self) -> Statement:
        tok = self.peek()
        if tok.matches(lexer.KEYWORD, "var"):
            self.advance()
            name = self.expect(lexer.IDENT, what="identifier after 'var'").value
            self.expect(lexer.OPERATOR, "=")
            value = self.parse_expression()
            self.expect(lexer.DELIM, ";")
            return VarDecl(name, value, line=tok.line)
        if tok.matches(lexer.KEYWORD, "return"):
            self.advance()
            value = self.parse_expression()
            self.expect(lexer.DELIM, ";")
            return ReturnStmt(value, line=tok.line)
        if tok.kind == lexer.KEYWORD:
            raise ParseError(f"unsupported statement {tok.value!r}", line=tok.line, column=tok.column)
        expr = self.parse_expression()
        self.expect(lexer.DELIM, ";")
        return ExprStmt(expr, line=tok.line)

    # ------------------------------------------------------------------
    # Expressions

    def parse_expression(self) -> Expression:
        left = self.parse_term()
        while self.peek().kind == lexer.OPERATOR and self.peek().value in _ADDITIVE:
            op_tok = self.advance()
            right = self.parse_term()
            left = BinaryExpr(left, op_tok.value, right, line=op_tok.line)
        return left

    def parse_term(self) -> Expression:
        left = self.parse_factor()
        while self.peek().kind == lexer.OPERATOR and self.peek().value in _MULTIPLICATIVE:
            op_tok = self.advance()
            right = self.parse_factor()
            left = BinaryExpr(left, op_tok.value, right, line=op_tok.line)
        return left

    def parse_factor(self) -> Expression:
        tok = self.advance()
        if tok.kind == lexer.INT:
            return IntLiteral(tok.value, line=tok.line)
        if tok.kind == lexer.BOOL:
            return BoolLiteral(tok.value, line=tok.line)
        if tok.kind == lexer.STRING:
            return StrLiteral(tok.value, line=tok.line)
        if tok.kind == lexer.IDENT:
            return Identifier(tok.value, line=tok.line)
        if tok.matches(lexer.DELIM, "("):
            expr = self.parse_expression()
            self.expect(lexer.DELIM, ")")
            return expr
        raise ParseError(f"unexpected {tok.describe()} in expression", line=tok.line, column=tok.column)


def parse(tokens: List[Token]) -> Function:
    return Parser(tokens).parse()


def parse_source(text: str) -> Function:
    return parse(lexer.tokenize(text))
