from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Mapping, Optional


class TokenType(Enum):
    # Single-character tokens.
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()
    PERCENT = auto()

    # One or two character tokens.
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals.
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords.
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    LET = auto()
    CONST = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS: Mapping[str, TokenType] = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "function": TokenType.FUN,
    "if": TokenType.IF,
    "null": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "let": TokenType.LET,
    "const": TokenType.CONST,
    "while": TokenType.WHILE,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    literal: object
    line: int
    column: int

    @classmethod
    def synthetic(cls, type_: TokenType, lexeme: str, at: Optional["Token"] = None) -> "Token":
        """Build a token that does not come from the scanner, borrowing `at`'s position."""
        line = at.line if at is not None else 0
        column = at.column if at is not None else 0
        return cls(type_, lexeme, None, line, column)

    def __str__(self) -> str:
        return f"{self.type.name} {self.lexeme} {self.literal}"


__all__ = ["KEYWORDS", "Token", "TokenType"]
