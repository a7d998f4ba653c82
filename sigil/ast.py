"""
AST node set.

Nodes are frozen dataclasses; child sequences are tuples so a tree handed
to a renderer cannot be mutated underneath the interpreter. Every node
declares its direct children through `children()`, which is what
traversals (`walk`, the printer, hosts) rely on.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterator, Optional, Tuple

from .tokens import Token


class Node:
    @property
    def kind(self) -> str:
        return type(self).__name__

    def children(self) -> Tuple["Node", ...]:
        return ()


class Stmt(Node):
    pass


class Expr(Node):
    pass


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Stmt, ...]

    def children(self) -> Tuple[Node, ...]:
        return self.statements


# Statements.


@dataclass(frozen=True)
class BlockStatement(Stmt):
    statements: Tuple[Stmt, ...]

    def children(self) -> Tuple[Node, ...]:
        return self.statements


@dataclass(frozen=True)
class ExpressionStatement(Stmt):
    expression: Expr

    def children(self) -> Tuple[Node, ...]:
        return (self.expression,)


@dataclass(frozen=True)
class IfStatement(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None

    def children(self) -> Tuple[Node, ...]:
        if self.else_branch is None:
            return (self.condition, self.then_branch)
        return (self.condition, self.then_branch, self.else_branch)


@dataclass(frozen=True)
class WhileStatement(Stmt):
    keyword: Token
    condition: Expr
    body: Stmt

    def children(self) -> Tuple[Node, ...]:
        return (self.condition, self.body)


@dataclass(frozen=True)
class ForStatement(Stmt):
    keyword: Token
    initializer: Optional[Stmt]
    condition: Optional[Expr]
    increment: Optional[Expr]
    body: Stmt

    def children(self) -> Tuple[Node, ...]:
        parts = (self.initializer, self.condition, self.increment, self.body)
        return tuple(part for part in parts if part is not None)


@dataclass(frozen=True)
class LetStatement(Stmt):
    name: Token
    initializer: Optional[Expr] = None
    constant: bool = False

    def children(self) -> Tuple[Node, ...]:
        return () if self.initializer is None else (self.initializer,)


@dataclass(frozen=True)
class ReturnStatement(Stmt):
    keyword: Token
    value: Optional[Expr] = None

    def children(self) -> Tuple[Node, ...]:
        return () if self.value is None else (self.value,)


@dataclass(frozen=True)
class FunctionDeclaration(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]

    def children(self) -> Tuple[Node, ...]:
        return self.body


# Expressions.


@dataclass(frozen=True)
class BinaryExpression(Expr):
    left: Expr
    operator: Token
    right: Expr

    def children(self) -> Tuple[Node, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class LogicalExpression(Expr):
    left: Expr
    operator: Token
    right: Expr

    def children(self) -> Tuple[Node, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class UnaryExpression(Expr):
    operator: Token
    operand: Expr

    def children(self) -> Tuple[Node, ...]:
        return (self.operand,)


@dataclass(frozen=True)
class CallExpression(Expr):
    callee: Expr
    paren: Token
    arguments: Tuple[Expr, ...]

    def children(self) -> Tuple[Node, ...]:
        return (self.callee, *self.arguments)


@dataclass(frozen=True)
class Identifier(Expr):
    name: Token


@dataclass(frozen=True)
class AssignmentExpression(Expr):
    target: Identifier
    value: Expr

    def children(self) -> Tuple[Node, ...]:
        return (self.target, self.value)


@dataclass(frozen=True)
class Literal(Expr):
    value: object


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr

    def children(self) -> Tuple[Node, ...]:
        return (self.expression,)


def walk(node: Node) -> Iterator[Node]:
    """Yield `node` and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children()))


def to_dict(node: Node) -> dict:
    """JSON-friendly rendering of a tree, tokens reduced to lexeme and position."""
    out: dict = {"kind": node.kind}
    for f in fields(node):  # type: ignore[arg-type]
        out[f.name] = _field_to_json(getattr(node, f.name))
    return out


def _field_to_json(value: object) -> object:
    if isinstance(value, Node):
        return to_dict(value)
    if isinstance(value, Token):
        return {"lexeme": value.lexeme, "line": value.line, "column": value.column}
    if isinstance(value, tuple):
        return [_field_to_json(item) for item in value]
    return value


def shape(node: Node) -> tuple:
    """
    Structural fingerprint of a tree: node kinds, operators, names and
    literal values, without token positions.
    """
    label: object = None
    if isinstance(node, (BinaryExpression, LogicalExpression, UnaryExpression)):
        label = node.operator.lexeme
    elif isinstance(node, Identifier):
        label = node.name.lexeme
    elif isinstance(node, (LetStatement, FunctionDeclaration)):
        label = node.name.lexeme
        if isinstance(node, FunctionDeclaration):
            label = (label, tuple(p.lexeme for p in node.params))
        elif node.constant:
            label = ("const", label)
    elif isinstance(node, Literal):
        label = (type(node.value).__name__, node.value)
    return (node.kind, label, tuple(shape(child) for child in node.children()))


__all__ = [
    "AssignmentExpression",
    "BinaryExpression",
    "BlockStatement",
    "CallExpression",
    "Expr",
    "ExpressionStatement",
    "ForStatement",
    "FunctionDeclaration",
    "Grouping",
    "Identifier",
    "IfStatement",
    "LetStatement",
    "Literal",
    "LogicalExpression",
    "Node",
    "Program",
    "ReturnStatement",
    "Stmt",
    "UnaryExpression",
    "WhileStatement",
    "shape",
    "to_dict",
    "walk",
]
