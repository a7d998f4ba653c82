from __future__ import annotations

from typing import Callable, List

from .. import ast
from ..errors import ParseError
from ..tokens import TokenType
from .cursor import TokenCursor

MAX_ARGUMENTS = 255

EQUALITY_OPS = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
COMPARISON_OPS = (
    TokenType.GREATER,
    TokenType.GREATER_EQUAL,
    TokenType.LESS,
    TokenType.LESS_EQUAL,
)
TERM_OPS = (TokenType.MINUS, TokenType.PLUS)
FACTOR_OPS = (TokenType.SLASH, TokenType.STAR, TokenType.PERCENT)
UNARY_OPS = (TokenType.BANG, TokenType.MINUS)


class ExpressionParser:
    """
    Precedence climbing over the fixed operator ladder, lowest first:

        assignment -> or -> and -> equality -> comparison -> term
        -> factor -> unary -> call -> primary
    """

    def __init__(self, cursor: TokenCursor) -> None:
        self.cursor = cursor

    def parse(self) -> ast.Expr:
        return self.assignment()

    def assignment(self) -> ast.Expr:
        expr = self.logical_or()
        if self.cursor.match(TokenType.EQUAL):
            equals = self.cursor.previous()
            value = self.assignment()
            if isinstance(expr, ast.Identifier):
                return ast.AssignmentExpression(target=expr, value=value)
            raise ParseError(equals, "Invalid assignment target.")
        return expr

    def logical_or(self) -> ast.Expr:
        return self._logical(self.logical_and, TokenType.OR)

    def logical_and(self) -> ast.Expr:
        return self._logical(self.equality, TokenType.AND)

    def equality(self) -> ast.Expr:
        return self._binary(self.comparison, EQUALITY_OPS)

    def comparison(self) -> ast.Expr:
        return self._binary(self.term, COMPARISON_OPS)

    def term(self) -> ast.Expr:
        return self._binary(self.factor, TERM_OPS)

    def factor(self) -> ast.Expr:
        return self._binary(self.unary, FACTOR_OPS)

    def unary(self) -> ast.Expr:
        if self.cursor.match(*UNARY_OPS):
            operator = self.cursor.previous()
            return ast.UnaryExpression(operator=operator, operand=self.unary())
        return self.call()

    def call(self) -> ast.Expr:
        expr = self.primary()
        while self.cursor.match(TokenType.LEFT_PAREN):
            expr = self._finish_call(expr)
        return expr

    def primary(self) -> ast.Expr:
        cursor = self.cursor
        if cursor.match(TokenType.FALSE):
            return ast.Literal(False)
        if cursor.match(TokenType.TRUE):
            return ast.Literal(True)
        if cursor.match(TokenType.NIL):
            return ast.Literal(None)
        if cursor.match(TokenType.NUMBER, TokenType.STRING):
            return ast.Literal(cursor.previous().literal)
        if cursor.match(TokenType.IDENTIFIER):
            return ast.Identifier(cursor.previous())
        if cursor.match(TokenType.LEFT_PAREN):
            expr = self.parse()
            cursor.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)
        raise ParseError(cursor.peek(), "Expect expression.")

    def _finish_call(self, callee: ast.Expr) -> ast.Expr:
        args: List[ast.Expr] = []
        if not self.cursor.check(TokenType.RIGHT_PAREN):
            while True:
                if len(args) >= MAX_ARGUMENTS:
                    raise ParseError(self.cursor.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                args.append(self.parse())
                if not self.cursor.match(TokenType.COMMA):
                    break
        paren = self.cursor.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return ast.CallExpression(callee=callee, paren=paren, arguments=tuple(args))

    def _binary(self, operand: Callable[[], ast.Expr], operators) -> ast.Expr:
        expr = operand()
        while self.cursor.match(*operators):
            operator = self.cursor.previous()
            expr = ast.BinaryExpression(left=expr, operator=operator, right=operand())
        return expr

    def _logical(self, operand: Callable[[], ast.Expr], operator_type: TokenType) -> ast.Expr:
        expr = operand()
        while self.cursor.match(operator_type):
            operator = self.cursor.previous()
            expr = ast.LogicalExpression(left=expr, operator=operator, right=operand())
        return expr


__all__ = ["ExpressionParser", "MAX_ARGUMENTS"]
