from __future__ import annotations


class Vector(list):
    """A `[...]` literal. Self-evaluating in code; a sequence group in grammars."""

    __slots__ = ()

    def __eq__(self, other):
        return isinstance(other, Vector) and list.__eq__(self, other)

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None

    def __repr__(self):
        return f"Vector({list.__repr__(self)})"
