from __future__ import annotations

from typing import List, Optional

from .. import ast
from ..errors import ParseError
from ..tokens import Token, TokenType
from .cursor import TokenCursor
from .expressions import MAX_ARGUMENTS, ExpressionParser


class StatementParser:
    def __init__(self, cursor: TokenCursor, expressions: ExpressionParser) -> None:
        self.cursor = cursor
        self.expressions = expressions
        self.errors: List[ParseError] = []
        self._function_depth = 0

    def declaration(self) -> Optional[ast.Stmt]:
        """
        Parse one declaration. A syntax error is recorded, the cursor is
        moved to the next statement boundary and None is returned.
        """
        try:
            if self.cursor.match(TokenType.FUN):
                return self.function("function")
            if self.cursor.match(TokenType.VAR, TokenType.LET):
                return self.var_declaration()
            if self.cursor.match(TokenType.CONST):
                return self.var_declaration(constant=True)
            return self.statement()
        except ParseError as err:
            self.errors.append(err)
            self.cursor.synchronize()
            return None

    def function(self, kind: str) -> ast.FunctionDeclaration:
        cursor = self.cursor
        name = cursor.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        cursor.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: List[Token] = []
        if not cursor.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    raise ParseError(cursor.peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(cursor.consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not cursor.match(TokenType.COMMA):
                    break
        cursor.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        cursor.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        self._function_depth += 1
        try:
            body = self.block()
        finally:
            self._function_depth -= 1
        return ast.FunctionDeclaration(name=name, params=tuple(params), body=body)

    def var_declaration(self, constant: bool = False) -> ast.LetStatement:
        name = self.cursor.consume(TokenType.IDENTIFIER, "Expect variable name.")
        initializer = None
        if self.cursor.match(TokenType.EQUAL):
            initializer = self.expressions.parse()
        elif constant:
            raise ParseError(self.cursor.peek(), "Expect '=' after constant name.")
        self.cursor.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.LetStatement(name=name, initializer=initializer, constant=constant)

    def statement(self) -> ast.Stmt:
        cursor = self.cursor
        if cursor.match(TokenType.FOR):
            return self.for_statement()
        if cursor.match(TokenType.IF):
            return self.if_statement()
        if cursor.match(TokenType.PRINT):
            return self.print_statement()
        if cursor.match(TokenType.RETURN):
            return self.return_statement()
        if cursor.match(TokenType.WHILE):
            return self.while_statement()
        if cursor.match(TokenType.LEFT_BRACE):
            return ast.BlockStatement(self.block())
        return self.expression_statement()

    def for_statement(self) -> ast.ForStatement:
        cursor = self.cursor
        keyword = cursor.previous()
        cursor.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Optional[ast.Stmt]
        if cursor.match(TokenType.SEMICOLON):
            initializer = None
        elif cursor.match(TokenType.VAR, TokenType.LET):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not cursor.check(TokenType.SEMICOLON):
            condition = self.expressions.parse()
        cursor.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not cursor.check(TokenType.RIGHT_PAREN):
            increment = self.expressions.parse()
        cursor.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()
        return ast.ForStatement(
            keyword=keyword,
            initializer=initializer,
            condition=condition,
            increment=increment,
            body=body,
        )

    def if_statement(self) -> ast.IfStatement:
        self.cursor.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expressions.parse()
        self.cursor.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.statement()
        else_branch = None
        # Greedy: a dangling else belongs to the innermost if.
        if self.cursor.match(TokenType.ELSE):
            else_branch = self.statement()
        return ast.IfStatement(condition=condition, then_branch=then_branch, else_branch=else_branch)

    def print_statement(self) -> ast.ExpressionStatement:
        keyword = self.cursor.previous()
        value = self.expressions.parse()
        self.cursor.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        # `print x;` is sugar for calling the print builtin.
        callee = ast.Identifier(Token.synthetic(TokenType.IDENTIFIER, "print", at=keyword))
        call = ast.CallExpression(callee=callee, paren=keyword, arguments=(value,))
        return ast.ExpressionStatement(call)

    def return_statement(self) -> ast.ReturnStatement:
        keyword = self.cursor.previous()
        if self._function_depth == 0:
            raise ParseError(keyword, "Can't return from top-level code.")
        value = None
        if not self.cursor.check(TokenType.SEMICOLON):
            value = self.expressions.parse()
        self.cursor.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ast.ReturnStatement(keyword=keyword, value=value)

    def while_statement(self) -> ast.WhileStatement:
        keyword = self.cursor.previous()
        self.cursor.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expressions.parse()
        self.cursor.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.statement()
        return ast.WhileStatement(keyword=keyword, condition=condition, body=body)

    def block(self) -> tuple:
        statements: List[ast.Stmt] = []
        while not self.cursor.check(TokenType.RIGHT_BRACE) and not self.cursor.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        self.cursor.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return tuple(statements)

    def expression_statement(self) -> ast.ExpressionStatement:
        expr = self.expressions.parse()
        self.cursor.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ast.ExpressionStatement(expr)


__all__ = ["StatementParser"]
