from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable as Fn, List, Mapping, Optional, Sequence, TextIO

from . import ast
from .config import DEFAULT_CONFIG, ExecutionConfig
from .environment import Environment
from .errors import SigilRuntimeError
from .runtime import (
    BUILTIN_CONSTANTS,
    BUILTINS,
    BuiltinFunction,
    Callable,
    RuntimeContext,
    is_number,
    stringify,
)
from .tokens import Token, TokenType


class CompletionKind(Enum):
    NORMAL = "normal"
    RETURN = "return"


@dataclass(frozen=True)
class Completion:
    """
    Outcome of executing a statement.

    A RETURN completion travels outward through enclosing blocks and loops
    until the function call that owns it unwraps the value. Faults are not
    completions; they are raised as SigilRuntimeError.
    """

    kind: CompletionKind = CompletionKind.NORMAL
    value: object = None

    @property
    def is_return(self) -> bool:
        return self.kind is CompletionKind.RETURN


NORMAL = Completion()


class ScriptFunction(Callable):
    def __init__(self, declaration: ast.FunctionDeclaration, closure: Environment) -> None:
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: "Interpreter", args: Sequence[object]) -> object:
        # Parent is the closure, not the caller's frame: lexical scoping.
        env = Environment(parent=self.closure)
        for param, value in zip(self.declaration.params, args):
            env.define(param.lexeme, value)
        completion = interpreter.execute_block(self.declaration.body, env)
        if completion.is_return:
            return completion.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def __repr__(self) -> str:
        return f"ScriptFunction({self.name!r}, arity={self.arity()})"


def is_truthy(value: object) -> bool:
    """Only null and false are falsy; 0 and the empty string are truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: object, right: object) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if is_number(left) and is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


class Interpreter:
    def __init__(
        self,
        config: ExecutionConfig = DEFAULT_CONFIG,
        builtins: Optional[Mapping[str, BuiltinFunction]] = None,
        stdout: Optional[TextIO] = None,
        on_output: Optional[Fn[[str], None]] = None,
    ) -> None:
        self.config = config
        self.runtime_ctx = RuntimeContext(stdout, on_output)
        self.builtins = BUILTINS if builtins is None else builtins
        self.builtin_env = Environment()
        self.globals = Environment(parent=self.builtin_env)
        self._register_builtins()

    def _register_builtins(self) -> None:
        for name, builtin in self.builtins.items():
            self.builtin_env.define(name, builtin)
        for name, value in BUILTIN_CONSTANTS.items():
            self.builtin_env.define(name, value)

    @property
    def output(self) -> List[str]:
        return self.runtime_ctx.output

    def interpret(self, program: ast.Program) -> object:
        """Run a whole program in the global frame; yields the last statement's value."""
        value = None
        for stmt in program.statements:
            completion = self.execute(stmt, self.globals)
            value = completion.value
            if completion.is_return:
                break
        return value

    def execute_block(self, statements: Sequence[ast.Stmt], env: Environment) -> Completion:
        for stmt in statements:
            completion = self.execute(stmt, env)
            if completion.is_return:
                return completion
        return NORMAL

    def execute(self, stmt: ast.Stmt, env: Environment) -> Completion:
        if isinstance(stmt, ast.ExpressionStatement):
            return Completion(value=self.evaluate(stmt.expression, env))
        if isinstance(stmt, ast.LetStatement):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer, env)
            self._declare(env, stmt.name, value, constant=stmt.constant)
            return NORMAL
        if isinstance(stmt, ast.FunctionDeclaration):
            self._declare(env, stmt.name, ScriptFunction(stmt, env))
            return NORMAL
        if isinstance(stmt, ast.BlockStatement):
            return self.execute_block(stmt.statements, Environment(parent=env))
        if isinstance(stmt, ast.IfStatement):
            if is_truthy(self.evaluate(stmt.condition, env)):
                return self.execute(stmt.then_branch, env)
            if stmt.else_branch is not None:
                return self.execute(stmt.else_branch, env)
            return NORMAL
        if isinstance(stmt, ast.WhileStatement):
            return self._run_loop(stmt.keyword, stmt.condition, stmt.body, None, env)
        if isinstance(stmt, ast.ForStatement):
            loop_env = Environment(parent=env)
            if stmt.initializer is not None:
                self.execute(stmt.initializer, loop_env)
            return self._run_loop(stmt.keyword, stmt.condition, stmt.body, stmt.increment, loop_env)
        if isinstance(stmt, ast.ReturnStatement):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value, env)
            return Completion(CompletionKind.RETURN, value)
        raise SigilRuntimeError(None, f"Unsupported statement {stmt.kind}.")

    def _run_loop(
        self,
        keyword: Token,
        condition: Optional[ast.Expr],
        body: ast.Stmt,
        increment: Optional[ast.Expr],
        env: Environment,
    ) -> Completion:
        limit = self.config.max_loop_iterations
        iterations = 0
        while condition is None or is_truthy(self.evaluate(condition, env)):
            if iterations >= limit:
                raise SigilRuntimeError(keyword, "Infinite loop detected - terminating execution.")
            completion = self.execute(body, env)
            if completion.is_return:
                return completion
            if increment is not None:
                self.evaluate(increment, env)
            iterations += 1
        return NORMAL

    def _declare(self, env: Environment, name: Token, value: object, constant: bool = False) -> None:
        if env is self.globals:
            self._check_builtin_shadowing(name)
        env.define(name.lexeme, value, constant=constant)

    def _check_builtin_shadowing(self, name: Token) -> None:
        if self.config.allow_global_scope_pollution:
            return
        if name.lexeme in self.builtin_env.values:
            raise SigilRuntimeError(name, f"Cannot redefine builtin '{name.lexeme}'.")

    def evaluate(self, expr: ast.Expr, env: Optional[Environment] = None) -> object:
        if env is None:
            env = self.globals
        if isinstance(expr, ast.Literal):
            return expr.value
        if isinstance(expr, ast.Identifier):
            return env.get(expr.name)
        if isinstance(expr, ast.Grouping):
            return self.evaluate(expr.expression, env)
        if isinstance(expr, ast.AssignmentExpression):
            value = self.evaluate(expr.value, env)
            name = expr.target.name
            if env.find_owner(name.lexeme) is self.builtin_env:
                self._check_builtin_shadowing(name)
            env.assign(name, value)
            return value
        if isinstance(expr, ast.LogicalExpression):
            left = self.evaluate(expr.left, env)
            if expr.operator.type is TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right, env)
        if isinstance(expr, ast.UnaryExpression):
            return self._eval_unary(expr, env)
        if isinstance(expr, ast.BinaryExpression):
            return self._eval_binary(expr, env)
        if isinstance(expr, ast.CallExpression):
            return self._eval_call(expr, env)
        raise SigilRuntimeError(None, f"Unsupported expression {expr.kind}.")

    def _eval_unary(self, expr: ast.UnaryExpression, env: Environment) -> object:
        operand = self.evaluate(expr.operand, env)
        op = expr.operator
        if op.type is TokenType.BANG:
            return not is_truthy(operand)
        if op.type is TokenType.MINUS:
            if not is_number(operand):
                raise SigilRuntimeError(op, "Operand must be a number.")
            return -operand  # type: ignore[operator]
        raise SigilRuntimeError(op, f"Unknown unary operator '{op.lexeme}'.")

    def _eval_binary(self, expr: ast.BinaryExpression, env: Environment) -> object:
        left = self.evaluate(expr.left, env)
        right = self.evaluate(expr.right, env)
        op = expr.operator
        kind = op.type
        if kind is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if kind is TokenType.BANG_EQUAL:
            return not is_equal(left, right)
        try:
            return self._arithmetic(op, left, right)
        except (OverflowError, ValueError):
            # Integers too large to convert to a float.
            raise SigilRuntimeError(op, "Numeric overflow.") from None

    def _arithmetic(self, op: Token, left: object, right: object) -> object:
        kind = op.type
        if kind is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right  # type: ignore[operator]
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise SigilRuntimeError(op, "Operands must be two numbers or two strings.")
        if not (is_number(left) and is_number(right)):
            raise SigilRuntimeError(op, "Operands must be numbers.")
        if kind is TokenType.MINUS:
            return left - right  # type: ignore[operator]
        if kind is TokenType.STAR:
            return left * right  # type: ignore[operator]
        if kind is TokenType.SLASH:
            if right == 0:
                raise SigilRuntimeError(op, "Division by zero.")
            return left / right  # type: ignore[operator]
        if kind is TokenType.PERCENT:
            if right == 0:
                raise SigilRuntimeError(op, "Division by zero.")
            return _remainder(left, right)  # type: ignore[arg-type]
        if kind is TokenType.GREATER:
            return left > right  # type: ignore[operator]
        if kind is TokenType.GREATER_EQUAL:
            return left >= right  # type: ignore[operator]
        if kind is TokenType.LESS:
            return left < right  # type: ignore[operator]
        if kind is TokenType.LESS_EQUAL:
            return left <= right  # type: ignore[operator]
        raise SigilRuntimeError(op, f"Unknown binary operator '{op.lexeme}'.")

    def _eval_call(self, expr: ast.CallExpression, env: Environment) -> object:
        callee = self.evaluate(expr.callee, env)
        args = [self.evaluate(arg, env) for arg in expr.arguments]
        if not isinstance(callee, Callable):
            raise SigilRuntimeError(expr.paren, "Can only call functions.")
        if len(args) != callee.arity():
            raise SigilRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(args)}.")
        return self._invoke(callee, args, expr.paren)

    def _invoke(self, callee: Callable, args: Sequence[object], paren: Token) -> object:
        if isinstance(callee, BuiltinFunction):
            try:
                return callee.call(self, args)
            except (TypeError, ValueError) as exc:
                raise SigilRuntimeError(paren, str(exc)) from exc
            except OverflowError:
                raise SigilRuntimeError(paren, "Numeric overflow.") from None
        try:
            return callee.call(self, args)
        except RecursionError:
            raise SigilRuntimeError(paren, "Maximum call depth exceeded.") from None


def _remainder(left: float, right: float) -> float:
    # Truncated remainder: the result takes the sign of the dividend.
    if isinstance(left, int) and isinstance(right, int):
        result = abs(left) % abs(right)
        return -result if left < 0 else result
    return math.fmod(left, right)


__all__ = [
    "Completion",
    "CompletionKind",
    "Interpreter",
    "NORMAL",
    "ScriptFunction",
    "is_equal",
    "is_truthy",
]
