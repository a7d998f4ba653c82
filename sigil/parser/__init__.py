"""
Recursive-descent parser.

`Parser` wires a shared `TokenCursor` into the expression and statement
sub-parsers. Syntax errors do not stop the parse: the failing declaration
is dropped, the cursor resynchronises at the next statement boundary and
the error is kept in `Parser.errors`, so a single pass reports every
independent mistake in the source.
"""

from __future__ import annotations

from typing import List, Sequence

from .. import ast
from ..errors import CompileError, ParseError, SigilError
from ..lexer import scan
from ..tokens import Token
from .cursor import TokenCursor
from .expressions import ExpressionParser
from .statements import StatementParser


class Parser:
    def __init__(self, tokens: Sequence[Token]) -> None:
        self.cursor = TokenCursor(tokens)
        self.expressions = ExpressionParser(self.cursor)
        self.statements = StatementParser(self.cursor, self.expressions)

    @property
    def errors(self) -> List[ParseError]:
        return self.statements.errors

    def parse(self) -> ast.Program:
        statements: List[ast.Stmt] = []
        while not self.cursor.is_at_end():
            try:
                stmt = self.statements.declaration()
            except RecursionError:
                self.errors.append(ParseError(self.cursor.peek(), "Expression nests too deeply."))
                break
            if stmt is not None:
                statements.append(stmt)
        return ast.Program(tuple(statements))


def parse(tokens: Sequence[Token]) -> ast.Program:
    """Parse a token list, raising CompileError with every syntax error found."""
    parser = Parser(tokens)
    program = parser.parse()
    if parser.errors:
        raise CompileError(parser.errors)
    return program


def parse_program(source: str) -> ast.Program:
    """Scan and parse `source`; lexer and parser errors are reported together."""
    tokens, lex_errors = scan(source)
    parser = Parser(tokens)
    program = parser.parse()
    errors: List[SigilError] = [*lex_errors, *parser.errors]
    if errors:
        raise CompileError(errors)
    return program


__all__ = ["Parser", "parse", "parse_program"]
