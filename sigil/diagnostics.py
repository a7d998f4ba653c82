"""
Common diagnostic structure for the lexer, parser and interpreter.

Every error the pipeline reports is converted into a Diagnostic so hosts
(the CLI, an editor, a notification area) can render them uniformly,
either as `[<Kind> Error] Line n:c - message` text or as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .span import Span

PHASE_TITLES: Dict[str, str] = {
    "lexer": "Lexer",
    "parser": "Parse",
    "runtime": "Runtime",
}


@dataclass
class Diagnostic:
    """Represents a pipeline diagnostic (error/warning/etc.)."""

    message: str
    # Pipeline stage that produced the diagnostic: lexer, parser or runtime.
    phase: Optional[str] = None
    severity: str = "error"
    span: Span = field(default_factory=Span)
    notes: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.span is None:  # type: ignore[unreachable]
            self.span = Span()

    @property
    def title(self) -> str:
        kind = PHASE_TITLES.get(self.phase or "", (self.phase or "Sigil").title())
        return f"[{kind} {self.severity.title()}]"

    def render(self) -> str:
        where = self.span.describe()
        if where:
            return f"{self.title} {where} - {self.message}"
        return f"{self.title} {self.message}"


def diagnostic_to_json(diag: Diagnostic, source: Optional[str] = None) -> dict:
    """Render a Diagnostic to a structured JSON-friendly dict."""
    file = diag.span.file if diag.span.file is not None else source
    return {
        "phase": diag.phase,
        "message": diag.message,
        "severity": diag.severity,
        "file": file,
        "line": diag.span.line,
        "column": diag.span.column,
        "notes": list(diag.notes),
    }


__all__ = ["Diagnostic", "PHASE_TITLES", "diagnostic_to_json"]
