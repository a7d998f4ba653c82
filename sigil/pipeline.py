"""
Lex -> parse -> evaluate, with every failure turned into diagnostics.

This is the boundary hosts talk to. Each run builds its own interpreter
and environment chain, so a failed run leaves nothing half-updated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, TextIO

from . import ast
from .config import DEFAULT_CONFIG, ExecutionConfig
from .diagnostics import Diagnostic
from .errors import SigilError, SigilRuntimeError
from .interp import Interpreter
from .lexer import scan
from .parser import Parser
from .tokens import Token


@dataclass
class CompileResult:
    tokens: List[Token]
    program: Optional[ast.Program]
    errors: List[SigilError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [err.to_diagnostic() for err in self.errors]


@dataclass
class RunResult:
    status: str
    value: object = None
    output: List[str] = field(default_factory=list)
    errors: List[SigilError] = field(default_factory=list)
    program: Optional[ast.Program] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return [err.to_diagnostic() for err in self.errors]

    def format_errors(self) -> str:
        return "\n".join(err.format() for err in self.errors)


def compile_source(source: str) -> CompileResult:
    """
    Scan and parse `source`. The program is only published when neither
    stage reported an error.
    """
    tokens, lex_errors = scan(source)
    parser = Parser(tokens)
    program = parser.parse()
    errors: List[SigilError] = [*lex_errors, *parser.errors]
    return CompileResult(tokens=tokens, program=None if errors else program, errors=errors)


def run_source(
    source: str,
    config: ExecutionConfig = DEFAULT_CONFIG,
    stdout: Optional[TextIO] = None,
    on_output: Optional[Callable[[str], None]] = None,
    on_diagnostic: Optional[Callable[[Diagnostic], None]] = None,
) -> RunResult:
    """
    Compile and run `source`. Printed lines go to `on_output` as they are
    produced; every compile or runtime error is handed to `on_diagnostic`
    before the result is returned.
    """
    compiled = compile_source(source)
    if not compiled.ok or compiled.program is None:
        _publish(compiled.errors, on_diagnostic)
        return RunResult(status="error", errors=compiled.errors)
    return run_program(
        compiled.program,
        config=config,
        stdout=stdout,
        on_output=on_output,
        on_diagnostic=on_diagnostic,
    )


def run_program(
    program: ast.Program,
    config: ExecutionConfig = DEFAULT_CONFIG,
    stdout: Optional[TextIO] = None,
    on_output: Optional[Callable[[str], None]] = None,
    on_diagnostic: Optional[Callable[[Diagnostic], None]] = None,
) -> RunResult:
    interpreter = Interpreter(config=config, stdout=stdout, on_output=on_output)
    try:
        value = interpreter.interpret(program)
    except SigilRuntimeError as err:
        _publish([err], on_diagnostic)
        return RunResult(status="error", output=interpreter.output, errors=[err], program=program)
    return RunResult(status="ok", value=value, output=interpreter.output, program=program)


def _publish(errors: List[SigilError], on_diagnostic: Optional[Callable[[Diagnostic], None]]) -> None:
    if on_diagnostic is None:
        return
    for err in errors:
        on_diagnostic(err.to_diagnostic())


__all__ = ["CompileResult", "RunResult", "compile_source", "run_program", "run_source"]
