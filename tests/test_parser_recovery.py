from __future__ import annotations

from sigil import ast
from sigil.lexer import scan
from sigil.parser import Parser


def _parse(source: str) -> tuple[ast.Program, Parser]:
    tokens, errors = scan(source)
    assert errors == []
    parser = Parser(tokens)
    return parser.parse(), parser


def test_synchronizes_after_error_and_keeps_parsing() -> None:
    program, parser = _parse("let = 1;\nlet y = 2;\nprint ;\nlet z = 3;")
    assert [(e.message, e.line) for e in parser.errors] == [
        ("Expect variable name.", 1),
        ("Expect expression.", 3),
    ]
    names = [stmt.name.lexeme for stmt in program.statements]
    assert names == ["y", "z"]


def test_resumes_at_statement_keyword_without_semicolon() -> None:
    program, parser = _parse("let x = 1 2\nwhile (x) x = x - 1;\nfunction f() {}")
    assert len(parser.errors) == 1
    assert [stmt.kind for stmt in program.statements] == ["WhileStatement", "FunctionDeclaration"]


def test_errors_inside_blocks_do_not_discard_the_block() -> None:
    program, parser = _parse("function f() {\n  let = 2;\n  return 1;\n}\nf();")
    assert len(parser.errors) == 1
    fn = program.statements[0]
    assert isinstance(fn, ast.FunctionDeclaration)
    assert [stmt.kind for stmt in fn.body] == ["ReturnStatement"]
    assert len(program.statements) == 2


def test_every_independent_error_is_reported() -> None:
    _, parser = _parse("1 = 2;\nlet;\nif x) y;\nfoo(;")
    assert [e.line for e in parser.errors] == [1, 2, 3, 4]


def test_clean_source_has_no_errors() -> None:
    program, parser = _parse("let a = 1; print a;")
    assert parser.errors == []
    assert len(program.statements) == 2


def test_error_at_end_of_input_terminates() -> None:
    program, parser = _parse("print (1 + 2")
    assert len(parser.errors) == 1
    assert parser.errors[0].detail() == "Error at end: Expect ')' after expression."
    assert program.statements == ()
