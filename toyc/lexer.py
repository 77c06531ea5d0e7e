"""Lexical scanner for toyc source text."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Union

from .errors import LexError

LOGGER = logging.getLogger("toyc.lexer")

KEYWORDS = frozenset({"func", "var", "return", "if", "else"})
BOOLEAN_WORDS = {
    "truth": True,
    "falsy": False,
    "true": True,
    "false": False,
}
OPERATORS = frozenset("+-*/=")
DELIMITERS = frozenset("(){};,")

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    '"': '"',
    "\\": "\\",
}

# Token kinds
KEYWORD = "keyword"
IDENT = "ident"
INT = "int"
BOOL = "bool"
STRING = "string"
OPERATOR = "operator"
DELIM = "delim"
EOF = "eof"


@dataclass(frozen=True)
class Token:
    kind: str
    value: Union[str, int, bool, None]
    line: int
    column: int

    def matches(self, kind: str, value: object = None) -> bool:
        if self.kind != kind:
            return False
        return value is None or self.value == value

    def describe(self) -> str:
        if self.kind == EOF:
            return "end of input"
        if self.kind == STRING:
            return f'string "{self.value}"'
        return f"{self.kind} {self.value!r}"


def _is_digit(ch: str) -> bool:
    # ASCII only: int() rejects some characters str.isdigit() accepts
    return "0" <= ch <= "9"


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or "a" <= ch <= "z" or "A" <= ch <= "Z"


def tokenize(text: str) -> List[Token]:
    """Split *text* into tokens, dropping whitespace and ``//`` comments.

    The returned list always ends with a single EOF token so the parser never
    needs to bounds-check its lookahead.
    """

    tokens: List[Token] = []
    pos = 0
    line = 1
    line_start = 0
    length = len(text)

    while pos < length:
        ch = text[pos]
        column = pos - line_start + 1
        if ch == "\n":
            pos += 1
            line += 1
            line_start = pos
            continue
        if ch.isspace():
            pos += 1
            continue
        if ch == "/" and text.startswith("//", pos):
            end = text.find("\n", pos)
            pos = length if end == -1 else end
            continue
        if ch in OPERATORS:
            tokens.append(Token(OPERATOR, ch, line, column))
            pos += 1
            continue
        if ch in DELIMITERS:
            tokens.append(Token(DELIM, ch, line, column))
            pos += 1
            continue
        if _is_ident_start(ch):
            start = pos
            while pos < length and (_is_ident_start(text[pos]) or _is_digit(text[pos])):
                pos += 1
            word = text[start:pos]
            if word in KEYWORDS:
                tokens.append(Token(KEYWORD, word, line, column))
            elif word in BOOLEAN_WORDS:
                tokens.append(Token(BOOL, BOOLEAN_WORDS[word], line, column))
            else:
                tokens.append(Token(IDENT, word, line, column))
            continue
        if _is_digit(ch):
            start = pos
            while pos < length and _is_digit(text[pos]):
                pos += 1
            if pos < length and _is_ident_start(text[pos]):
                raise LexError(f"malformed number {text[start:pos + 1]!r}", line=line, column=column)
            tokens.append(Token(INT, int(text[start:pos]), line, column))
            continue
        if ch == '"':
            value, pos = _scan_string(text, pos + 1, line, column)
            tokens.append(Token(STRING, value, line, column))
            continue
        raise LexError(f"unexpected character {ch!r}", line=line, column=column)

    tokens.append(Token(EOF, None, line, length - line_start + 1))
    LOGGER.debug("tokenized %d characters into %d tokens", length, len(tokens))
    return tokens


def _scan_string(text: str, pos: int, line: int, column: int):
    chars: List[str] = []
    while pos < len(text):
        ch = text[pos]
        if ch == '"':
            return "".join(chars), pos + 1
        if ch == "\n":
            break
        if ch == "\\":
            if pos + 1 >= len(text):
                break
            escaped = text[pos + 1]
            if escaped not in _ESCAPES:
                raise LexError(f"unknown escape \\{escaped}", line=line, column=column)
            chars.append(_ESCAPES[escaped])
            pos += 2
            continue
        chars.append(ch)
        pos += 1
    raise LexError("unterminated string literal", line=line, column=column)
