from __future__ import annotations
import sys


class Symbol:
    __slots__ = ("id",)

    def __init__(self, name: str):
        # Intern to ensure fast equality/hash; the rewriter compares names constantly
        self.id = sys.intern(name)

    def __eq__(self, other: Symbol) -> bool:
        return isinstance(other, Symbol) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self):
        return f"Symbol({self.id!r})"

    def __str__(self):
        return self.id

    @property
    def is_keyword(self) -> bool:
        return self.id.startswith(":")

    def prefixed(self, prefix: str) -> Symbol:
        return Symbol(prefix + self.id)


T = Symbol("t")


def is_symbol(obj, name: str | None = None) -> bool:
    """True when `obj` is a Symbol (optionally with the given name)."""
    if not isinstance(obj, Symbol):
        return False
    return name is None or obj.id == name
