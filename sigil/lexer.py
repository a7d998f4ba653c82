from __future__ import annotations

import math
from typing import List, Tuple

from .errors import LexerError
from .tokens import KEYWORDS, Token, TokenType

SINGLE_CHAR_TOKENS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    ";": TokenType.SEMICOLON,
    "*": TokenType.STAR,
    "%": TokenType.PERCENT,
}

# First character -> (type when followed by '=', type otherwise).
EQUAL_SUFFIX_TOKENS = {
    "!": (TokenType.BANG_EQUAL, TokenType.BANG),
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}

QUOTES = ('"', "'")


def is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or c == "_"


def is_alphanumeric(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Lexer:
    """
    Fault-tolerant scanner.

    Faults are recorded in `errors` and scanning resumes at the next
    character, so one pass reports every lexical problem in the source.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []
        self.start = 0
        self.current = 0
        self.line = 1
        self.column = 1
        self.start_line = 1
        self.start_column = 1

    def scan(self) -> Tuple[List[Token], List[LexerError]]:
        while not self._is_at_end():
            self.start = self.current
            self.start_line = self.line
            self.start_column = self.column
            self._scan_token()
        self.tokens.append(Token(TokenType.EOF, "", None, self.line, self.column))
        return self.tokens, self.errors

    def _scan_token(self) -> None:
        c = self._advance()
        if c in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[c])
        elif c in EQUAL_SUFFIX_TOKENS:
            two, one = EQUAL_SUFFIX_TOKENS[c]
            self._add_token(two if self._match("=") else one)
        elif c == "/":
            if self._match("/"):
                while self._peek() != "\n" and not self._is_at_end():
                    self._advance()
            else:
                self._add_token(TokenType.SLASH)
        elif c in (" ", "\r", "\t"):
            pass
        elif c == "\n":
            self._newline()
        elif c in QUOTES:
            self._string(c)
        elif is_digit(c):
            self._number()
        elif is_alpha(c):
            self._identifier()
        else:
            self.errors.append(
                LexerError(f"Unexpected character '{c}'.", self.start_line, self.start_column)
            )

    def _identifier(self) -> None:
        while is_alphanumeric(self._peek()):
            self._advance()
        text = self.source[self.start : self.current]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def _number(self) -> None:
        while is_digit(self._peek()):
            self._advance()
        is_fraction = False
        if self._peek() == "." and is_digit(self._peek_next()):
            is_fraction = True
            self._advance()
            while is_digit(self._peek()):
                self._advance()
        text = self.source[self.start : self.current]
        # Literals must fit a finite double, so they print back as written.
        if not math.isfinite(float(text)):
            self.errors.append(LexerError("Number literal too large.", self.start_line, self.start_column))
            return
        self._add_token(TokenType.NUMBER, float(text) if is_fraction else int(text))

    def _string(self, quote: str) -> None:
        while self._peek() != quote and not self._is_at_end():
            if self._advance() == "\n":
                self._newline()
        if self._is_at_end():
            self.errors.append(LexerError("Unterminated string.", self.start_line, self.start_column))
            return
        # Closing quote.
        self._advance()
        self._add_token(TokenType.STRING, self.source[self.start + 1 : self.current - 1])

    def _newline(self) -> None:
        self.line += 1
        self.column = 1

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        self.column += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self.current]

    def _peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    def _is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def _advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        self.column += 1
        return c

    def _add_token(self, type_: TokenType, literal: object = None) -> None:
        text = self.source[self.start : self.current]
        self.tokens.append(Token(type_, text, literal, self.start_line, self.start_column))


def scan(source: str) -> Tuple[List[Token], List[LexerError]]:
    return Lexer(source).scan()


__all__ = ["Lexer", "scan"]
