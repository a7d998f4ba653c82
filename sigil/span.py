"""
Lightweight source span representation used by diagnostics.

A Span carries best-effort file/line/column info. Tokens are the only
location objects the front end produces, so `from_token` is the common
constructor; `Span()` denotes an unknown location.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
    """Represents a source span (best-effort file/line/column)."""

    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    end_column: Optional[int] = None

    @classmethod
    def from_token(cls, token: Any, file: Optional[str] = None) -> "Span":
        """
        Construct a Span covering a scanned token.

        Synthetic tokens (line 0) produce an unknown span so renderers do
        not report a bogus position.
        """
        if token is None or not getattr(token, "line", 0):
            return cls(file=file)
        column = getattr(token, "column", None)
        lexeme = getattr(token, "lexeme", "") or ""
        end_column = column + len(lexeme) if column is not None and lexeme else None
        return cls(file=file, line=token.line, column=column, end_column=end_column)

    @property
    def known(self) -> bool:
        return self.line is not None

    def describe(self) -> str:
        """Render as `Line n[:c]`, or an empty string when the location is unknown."""
        if self.line is None:
            return ""
        if self.column is None:
            return f"Line {self.line}"
        return f"Line {self.line}:{self.column}"


__all__ = ["Span"]
