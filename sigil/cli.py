from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from . import ast
from .config import DEFAULT_CONFIG, ExecutionConfig, load_config
from .diagnostics import Diagnostic, diagnostic_to_json
from .pipeline import compile_source, run_program
from .printer import format_program


def _read_source(arg: str) -> str:
    if arg == "-":
        return sys.stdin.read()
    return Path(arg).read_text(encoding="utf-8")


def _report(diagnostics: List[Diagnostic], source_name: str, as_json: bool, output: Optional[List[str]] = None) -> int:
    exit_code = 1 if any(d.severity == "error" for d in diagnostics) else 0
    if as_json:
        payload = {
            "exit_code": exit_code,
            "diagnostics": [diagnostic_to_json(d, source_name) for d in diagnostics],
        }
        if output is not None:
            payload["output"] = output
        print(json.dumps(payload))
    else:
        for diag in diagnostics:
            print(f"{source_name}: {diag.render()}", file=sys.stderr)
    return exit_code


def _build_config(args: argparse.Namespace) -> ExecutionConfig:
    config = DEFAULT_CONFIG
    if args.config is not None:
        config = load_config(args.config)
    return config.with_overrides(
        max_loop_iterations=args.max_loop_iterations,
        allow_global_scope_pollution=args.allow_global_scope_pollution,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run a Sigil script.

    Compile-time diagnostics (lexer/parser) stop the run before anything
    executes. With --json, prints {exit_code, diagnostics, output};
    otherwise program output goes to stdout and diagnostics to stderr.
    """
    parser = argparse.ArgumentParser(prog="sigil", description="Sigil script interpreter")
    parser.add_argument("source", help="Path to a Sigil source file, or '-' to read stdin")
    parser.add_argument("--config", type=Path, help="JSON file with execution settings")
    parser.add_argument(
        "--max-loop-iterations",
        type=int,
        default=None,
        help="Abort any loop that runs more than this many iterations",
    )
    parser.add_argument(
        "--allow-global-scope-pollution",
        action="store_true",
        default=None,
        help="Allow top-level code to redefine builtin names",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--check", action="store_true", help="Only lex and parse; report diagnostics")
    mode.add_argument("--tokens", action="store_true", help="Print the token stream and exit")
    mode.add_argument("--ast", action="store_true", help="Print the AST as JSON and exit")
    mode.add_argument("--format", action="store_true", help="Print the source re-rendered from its AST")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
    )
    args = parser.parse_args(argv)

    source_name = "<stdin>" if args.source == "-" else args.source
    try:
        source = _read_source(args.source)
    except OSError as exc:
        print(f"{source_name}: error: cannot read source: {exc}", file=sys.stderr)
        return 1
    try:
        config = _build_config(args)
    except (OSError, ValueError) as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    compiled = compile_source(source)
    if args.tokens:
        for token in compiled.tokens:
            print(f"{token.line}:{token.column}\t{token.type.name}\t{token.lexeme!r}")
        return _report(compiled.diagnostics, source_name, args.json)
    if not compiled.ok or compiled.program is None:
        return _report(compiled.diagnostics, source_name, args.json)
    if args.check:
        return _report([], source_name, args.json)
    if args.ast:
        print(json.dumps(ast.to_dict(compiled.program), indent=2))
        return 0
    if args.format:
        sys.stdout.write(format_program(compiled.program))
        return 0

    stdout = None if args.json else sys.stdout
    result = run_program(compiled.program, config=config, stdout=stdout)
    return _report(result.diagnostics, source_name, args.json, output=result.output if args.json else None)


__all__ = ["main"]
