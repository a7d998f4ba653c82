"""
Sigil: a small scripting language front end and tree-walking interpreter.
"""

from __future__ import annotations

from .config import DEFAULT_CONFIG, ExecutionConfig, load_config
from .errors import CompileError, LexerError, ParseError, SigilError, SigilRuntimeError
from .interp import Interpreter
from .lexer import scan
from .parser import Parser, parse, parse_program
from .pipeline import compile_source, run_source

__version__ = "0.1.0"

__all__ = [
    "CompileError",
    "DEFAULT_CONFIG",
    "ExecutionConfig",
    "Interpreter",
    "LexerError",
    "ParseError",
    "Parser",
    "SigilError",
    "SigilRuntimeError",
    "compile_source",
    "load_config",
    "parse",
    "parse_program",
    "run_source",
    "scan",
]
