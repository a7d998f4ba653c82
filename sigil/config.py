from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

DEFAULT_MAX_LOOP_ITERATIONS = 10000


@dataclass(frozen=True)
class ExecutionConfig:
    """
    Read-only knobs consumed by the interpreter.

    max_loop_iterations: iterations a single loop may run before it is
        treated as runaway and aborted with a runtime error.
    allow_global_scope_pollution: when false, top-level code may not
        redefine or reassign builtin names.
    """

    max_loop_iterations: int = DEFAULT_MAX_LOOP_ITERATIONS
    allow_global_scope_pollution: bool = False

    def __post_init__(self) -> None:
        limit = self.max_loop_iterations
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"max_loop_iterations must be a positive integer, got {limit!r}")
        if not isinstance(self.allow_global_scope_pollution, bool):
            raise ValueError("allow_global_scope_pollution must be a boolean")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ExecutionConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown execution config key(s): {', '.join(unknown)}")
        return cls(**dict(data))

    def with_overrides(self, **overrides: Any) -> "ExecutionConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


DEFAULT_CONFIG = ExecutionConfig()


def load_config(path: Path) -> ExecutionConfig:
    """
    Load an ExecutionConfig from a JSON file.

    The file holds an object with any of the ExecutionConfig fields; an
    `execution` wrapper object is accepted as well.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a JSON object")
    if "execution" in data and isinstance(data["execution"], dict):
        data = data["execution"]
    return ExecutionConfig.from_mapping(data)


__all__ = ["DEFAULT_CONFIG", "DEFAULT_MAX_LOOP_ITERATIONS", "ExecutionConfig", "load_config"]
