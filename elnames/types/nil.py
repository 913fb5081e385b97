from __future__ import annotations


class NilType:
    """The empty list / false value. Reads of `nil` and `()` both produce Nil."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self): return "nil"
    def __bool__(self): return False
    def __hash__(self): return hash("nil")

    def __eq__(self, other):
        return isinstance(other, NilType)

    def __iter__(self):
        return iter(())

    def __len__(self):
        return 0


Nil = NilType()


def is_nil(obj) -> bool:
    # Vectors are list subclasses but `[]` is not nil
    return obj is Nil or obj is None or (type(obj) is list and not obj)
