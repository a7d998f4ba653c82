"""
Render an AST back to source text.

The output re-parses to a tree of the same shape: groupings survive as
explicit parentheses and `print` sugar is restored, so printing does not
add or drop nodes.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import List

from . import ast
from .tokens import TokenType

INDENT = "    "


def format_program(program: ast.Program) -> str:
    lines: List[str] = []
    for stmt in program.statements:
        lines.extend(format_stmt(stmt))
    return "\n".join(lines) + ("\n" if lines else "")


def format_stmt(stmt: ast.Stmt, depth: int = 0) -> List[str]:
    pad = INDENT * depth
    if isinstance(stmt, ast.ExpressionStatement):
        expr = stmt.expression
        if isinstance(expr, ast.CallExpression) and expr.paren.type is TokenType.PRINT:
            return [f"{pad}print {format_expr(expr.arguments[0])};"]
        return [f"{pad}{format_expr(expr)};"]
    if isinstance(stmt, ast.LetStatement):
        keyword = "const" if stmt.constant else "let"
        if stmt.initializer is None:
            return [f"{pad}{keyword} {stmt.name.lexeme};"]
        return [f"{pad}{keyword} {stmt.name.lexeme} = {format_expr(stmt.initializer)};"]
    if isinstance(stmt, ast.ReturnStatement):
        if stmt.value is None:
            return [f"{pad}return;"]
        return [f"{pad}return {format_expr(stmt.value)};"]
    if isinstance(stmt, ast.BlockStatement):
        return _format_block(stmt.statements, depth, pad)
    if isinstance(stmt, ast.FunctionDeclaration):
        params = ", ".join(p.lexeme for p in stmt.params)
        return _format_block(stmt.body, depth, f"{pad}function {stmt.name.lexeme}({params}) ")
    if isinstance(stmt, ast.IfStatement):
        lines = _format_body(stmt.then_branch, depth, f"{pad}if ({format_expr(stmt.condition)}) ")
        if isinstance(stmt.else_branch, ast.IfStatement):
            # else-if chains stay at the same depth.
            else_lines = format_stmt(stmt.else_branch, depth)
            else_lines[0] = f"else {else_lines[0].lstrip()}"
            lines[-1] = f"{lines[-1]} {else_lines[0]}"
            lines.extend(else_lines[1:])
        elif stmt.else_branch is not None:
            else_lines = _format_body(stmt.else_branch, depth, "else ")
            lines[-1] = f"{lines[-1]} {else_lines[0]}"
            lines.extend(else_lines[1:])
        return lines
    if isinstance(stmt, ast.WhileStatement):
        return _format_body(stmt.body, depth, f"{pad}while ({format_expr(stmt.condition)}) ")
    if isinstance(stmt, ast.ForStatement):
        init = ";" if stmt.initializer is None else format_stmt(stmt.initializer)[0]
        cond = "" if stmt.condition is None else f" {format_expr(stmt.condition)}"
        incr = "" if stmt.increment is None else f" {format_expr(stmt.increment)}"
        return _format_body(stmt.body, depth, f"{pad}for ({init}{cond};{incr}) ")
    raise TypeError(f"cannot format statement {stmt!r}")


def _format_block(statements, depth: int, head: str) -> List[str]:
    if not statements:
        return [f"{head}{{}}"]
    lines = [f"{head}{{"]
    for inner in statements:
        lines.extend(format_stmt(inner, depth + 1))
    lines.append(f"{INDENT * depth}}}")
    return lines


def _format_body(body: ast.Stmt, depth: int, head: str) -> List[str]:
    if isinstance(body, ast.BlockStatement):
        return _format_block(body.statements, depth, head)
    inner = format_stmt(body, depth + 1)
    return [f"{head}{inner[0].lstrip()}", *inner[1:]]


def format_expr(expr: ast.Expr) -> str:
    if isinstance(expr, ast.Literal):
        return format_literal(expr.value)
    if isinstance(expr, ast.Identifier):
        return expr.name.lexeme
    if isinstance(expr, ast.Grouping):
        return f"({format_expr(expr.expression)})"
    if isinstance(expr, ast.AssignmentExpression):
        return f"{expr.target.name.lexeme} = {format_expr(expr.value)}"
    if isinstance(expr, (ast.BinaryExpression, ast.LogicalExpression)):
        return f"{format_expr(expr.left)} {expr.operator.lexeme} {format_expr(expr.right)}"
    if isinstance(expr, ast.UnaryExpression):
        return f"{expr.operator.lexeme}{format_expr(expr.operand)}"
    if isinstance(expr, ast.CallExpression):
        args = ", ".join(format_expr(arg) for arg in expr.arguments)
        return f"{format_expr(expr.callee)}({args})"
    raise TypeError(f"cannot format expression {expr!r}")


def format_literal(value: object) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"cannot format non-finite number {value!r}")
        text = repr(value)
        if "e" in text:
            # The lexer has no exponent syntax; spell the digits out.
            text = format(Decimal(text), "f")
            if "." not in text:
                text += ".0"
        return text
    if isinstance(value, str):
        quote = "'" if '"' in value else '"'
        return f"{quote}{value}{quote}"
    return str(value)


__all__ = ["format_expr", "format_literal", "format_program", "format_stmt"]
