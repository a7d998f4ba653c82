from __future__ import annotations

from typing import Dict, Optional, Set

from .errors import SigilRuntimeError
from .tokens import Token


class _Undefined:
    """Marker returned by `get_by_name` when a name is bound nowhere in the chain."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


class Environment:
    """
    One scope frame. Lookups and assignments walk outward through
    `parent`; definitions always land in this frame.
    """

    def __init__(self, parent: Optional["Environment"] = None) -> None:
        self.parent = parent
        self.values: Dict[str, object] = {}
        self.constants: Set[str] = set()

    def define(self, name: str, value: object, constant: bool = False) -> None:
        self.values[name] = value
        if constant:
            self.constants.add(name)
        else:
            self.constants.discard(name)

    def get(self, token: Token) -> object:
        frame = self.find_owner(token.lexeme)
        if frame is None:
            raise SigilRuntimeError(token, f"Undefined variable '{token.lexeme}'.")
        return frame.values[token.lexeme]

    def assign(self, token: Token, value: object) -> None:
        name = token.lexeme
        frame = self.find_owner(name)
        if frame is None:
            raise SigilRuntimeError(token, f"Undefined variable '{name}'.")
        if name in frame.constants:
            raise SigilRuntimeError(token, f"Cannot assign to constant '{name}'.")
        frame.values[name] = value

    def get_by_name(self, name: str) -> object:
        frame = self.find_owner(name)
        if frame is None:
            return UNDEFINED
        return frame.values[name]

    def find_owner(self, name: str) -> Optional["Environment"]:
        """Return the nearest frame in the chain that binds `name`."""
        frame: Optional[Environment] = self
        while frame is not None:
            if name in frame.values:
                return frame
            frame = frame.parent
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find_owner(name) is not None


__all__ = ["Environment", "UNDEFINED"]
