from __future__ import annotations


class StringLiteral(str):
    """A string read from source. Compares as its decoded value and prints as
    the text it was read from, so escapes like `\\C-c` survive a rewrite."""

    def __new__(cls, value: str, source: str):
        obj = super().__new__(cls, value)
        obj.source = source
        return obj

    def __repr__(self):
        return f"StringLiteral({str.__repr__(self)}, {self.source!r})"


class CharLiteral(int):
    """A `?c` character: its code, plus the text it was read from."""

    def __new__(cls, code: int, source: str):
        obj = super().__new__(cls, code)
        obj.source = source
        return obj

    def __repr__(self):
        return f"CharLiteral({int(self)}, {self.source!r})"
