from __future__ import annotations

from typing import Iterable, List, Optional

from .diagnostics import Diagnostic
from .span import Span
from .tokens import Token, TokenType


class SigilError(Exception):
    """Base class for every error the pipeline reports to its host."""

    phase = "sigil"

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        token: Optional[Token] = None,
    ) -> None:
        self.message = message
        self.token = token
        if token is not None and token.line:
            line = token.line if line is None else line
            column = token.column if column is None else column
        self.line = line
        self.column = column
        super().__init__(self.format())

    @property
    def span(self) -> Span:
        if self.token is not None and (self.token.line, self.token.column) == (self.line, self.column):
            return Span.from_token(self.token)
        return Span(line=self.line, column=self.column)

    def detail(self) -> str:
        return self.message

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(message=self.detail(), phase=self.phase, span=self.span)

    def format(self) -> str:
        return self.to_diagnostic().render()


class LexerError(SigilError):
    """Unrecognised character or unterminated string found while scanning."""

    phase = "lexer"

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(message, line=line, column=column)


class ParseError(SigilError):
    """An expected token was absent; carries the token the parser stopped at."""

    phase = "parser"

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message, token=token)

    def detail(self) -> str:
        if self.token is None or self.token.type is TokenType.EOF:
            where = "at end"
        else:
            where = f"at '{self.token.lexeme}'"
        return f"Error {where}: {self.message}"


class SigilRuntimeError(SigilError):
    """Raised while evaluating a program: undefined names, bad operands, runaway loops."""

    phase = "runtime"

    def __init__(self, token: Optional[Token], message: str) -> None:
        super().__init__(message, token=token)


class CompileError(SigilError):
    """Aggregates every lexer and parser error collected for one source text."""

    phase = "compile"

    def __init__(self, errors: Iterable[SigilError]) -> None:
        self.errors: List[SigilError] = list(errors)
        if not self.errors:
            raise ValueError("CompileError requires at least one error")
        first = self.errors[0]
        super().__init__(first.message, line=first.line, column=first.column, token=first.token)

    def to_diagnostic(self) -> Diagnostic:
        return self.errors[0].to_diagnostic()

    def diagnostics(self) -> List[Diagnostic]:
        return [err.to_diagnostic() for err in self.errors]

    def format(self) -> str:
        return "\n".join(err.format() for err in self.errors)


__all__ = [
    "CompileError",
    "LexerError",
    "ParseError",
    "SigilError",
    "SigilRuntimeError",
]
