from __future__ import annotations

from typing import List, Sequence

from ..errors import ParseError
from ..tokens import Token, TokenType

# Tokens that begin a statement; synchronisation stops in front of them.
STATEMENT_STARTS = frozenset(
    {
        TokenType.CLASS,
        TokenType.FUN,
        TokenType.VAR,
        TokenType.LET,
        TokenType.CONST,
        TokenType.FOR,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.PRINT,
        TokenType.RETURN,
    }
)


class TokenCursor:
    """Cursor over a token list shared by the expression and statement parsers."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        tokens = list(tokens)
        if not tokens or tokens[-1].type is not TokenType.EOF:
            line = tokens[-1].line if tokens else 1
            tokens.append(Token(TokenType.EOF, "", None, line, 0))
        self.tokens: List[Token] = tokens
        self.current = 0

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def is_at_end(self) -> bool:
        return self.peek().type is TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def check(self, type_: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type is type_

    def match(self, *types: TokenType) -> bool:
        for type_ in types:
            if self.check(type_):
                self.advance()
                return True
        return False

    def consume(self, type_: TokenType, message: str) -> Token:
        if self.check(type_):
            return self.advance()
        raise ParseError(self.peek(), message)

    def synchronize(self) -> None:
        """Discard tokens up to the next statement boundary."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()


__all__ = ["STATEMENT_STARTS", "TokenCursor"]
