from __future__ import annotations

import math
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable as Fn, List, Mapping, Optional, Sequence, TextIO

if TYPE_CHECKING:  # pragma: no cover
    from ..interp import Interpreter


class Callable(ABC):
    """A value that can appear as the callee of a call expression."""

    @abstractmethod
    def arity(self) -> int:
        ...

    @abstractmethod
    def call(self, interpreter: "Interpreter", args: Sequence[object]) -> object:
        ...


class RuntimeContext:
    """Per-run host hooks: where printed output goes and who hears about it."""

    def __init__(self, stdout: Optional[TextIO] = None, on_output: Optional[Fn[[str], None]] = None) -> None:
        self.stdout = stdout
        self.on_output = on_output
        self.output: List[str] = []

    def emit(self, text: str) -> None:
        self.output.append(text)
        if self.stdout is not None:
            self.stdout.write(text + "\n")
            self.stdout.flush()
        if self.on_output is not None:
            self.on_output(text)


BuiltinImpl = Fn[[RuntimeContext, Sequence[object]], object]


@dataclass
class BuiltinFunction(Callable):
    name: str
    param_count: int
    impl: BuiltinImpl = field(repr=False)

    def arity(self) -> int:
        return self.param_count

    def call(self, interpreter: "Interpreter", args: Sequence[object]) -> object:
        return self.impl(interpreter.runtime_ctx, args)

    def __str__(self) -> str:
        return f"<native fn {self.name}>"


def is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def stringify(value: object) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # Too many digits to render; no double could hold it either.
            return "Infinity" if value > 0 else "-Infinity"
    return str(value)


def _require_number(name: str, value: object) -> float:
    if not is_number(value):
        raise TypeError(f"{name} expects a number, got {stringify(value)}.")
    return value  # type: ignore[return-value]


def _builtin_print(ctx: RuntimeContext, args: Sequence[object]) -> object:
    ctx.emit(stringify(args[0]))
    return None


def _builtin_time(ctx: RuntimeContext, args: Sequence[object]) -> object:
    return time.time()


def _builtin_str(ctx: RuntimeContext, args: Sequence[object]) -> object:
    return stringify(args[0])


def _builtin_len(ctx: RuntimeContext, args: Sequence[object]) -> object:
    text = args[0]
    if not isinstance(text, str):
        raise TypeError(f"len expects a string, got {stringify(text)}.")
    return len(text)


def _builtin_sqrt(ctx: RuntimeContext, args: Sequence[object]) -> object:
    value = _require_number("Math_sqrt", args[0])
    if value < 0:
        raise ValueError("Math_sqrt expects a non-negative number.")
    return math.sqrt(value)


def _unary_math(name: str, fn: Fn[[float], object]) -> BuiltinFunction:
    def impl(ctx: RuntimeContext, args: Sequence[object]) -> object:
        value = _require_number(name, args[0])
        try:
            return fn(value)
        except (OverflowError, ValueError):
            raise ValueError(f"{name} cannot handle {stringify(value)}.") from None

    return BuiltinFunction(name, 1, impl)


BUILTINS: Mapping[str, BuiltinFunction] = {
    "print": BuiltinFunction("print", 1, _builtin_print),
    "time": BuiltinFunction("time", 0, _builtin_time),
    "str": BuiltinFunction("str", 1, _builtin_str),
    "len": BuiltinFunction("len", 1, _builtin_len),
    "Math_abs": _unary_math("Math_abs", abs),
    "Math_floor": _unary_math("Math_floor", math.floor),
    "Math_sin": _unary_math("Math_sin", math.sin),
    "Math_cos": _unary_math("Math_cos", math.cos),
    "Math_sqrt": BuiltinFunction("Math_sqrt", 1, _builtin_sqrt),
    "Math_random": BuiltinFunction("Math_random", 0, lambda ctx, args: random.random()),
}

BUILTIN_CONSTANTS: Mapping[str, object] = {
    "Math_PI": math.pi,
}


__all__ = [
    "BUILTINS",
    "BUILTIN_CONSTANTS",
    "BuiltinFunction",
    "Callable",
    "RuntimeContext",
    "is_number",
    "stringify",
]
