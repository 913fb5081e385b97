from __future__ import annotations

from typing import Callable, TYPE_CHECKING

from elnames import SExpression
from elnames.errors import ElnamesSyntaxError
from elnames.types.symbol import Symbol

if TYPE_CHECKING:
    from elnames.reader.parser import TokenStream

ReaderFn = Callable[["TokenStream"], SExpression]


class ReaderMacros:
    """
    Registry of reader shorthands.
    Maps prefix characters (like ', `, #') to functions that consume the
    next parsed expression(s) from the stream and build the long form.
    """

    def __init__(self):
        self.macros: dict[str, ReaderFn] = {}

    def define(self, char: str, fn: ReaderFn) -> None:
        """Register a reader macro for a given character or sequence."""
        self.macros[char] = fn

    def is_macro(self, char: str) -> bool:
        return char in self.macros

    def dispatch(self, char: str, stream: "TokenStream") -> SExpression:
        if char not in self.macros:
            raise ValueError(f"No reader macro defined for {char!r}")
        return self.macros[char](stream)


def _wrapping(head: Symbol) -> ReaderFn:
    def read_wrapped(stream: "TokenStream") -> SExpression:
        if stream.peek()[0] is None:
            raise ElnamesSyntaxError(f"Expected an expression after {head}")
        return [head, stream.parse_expr()]
    return read_wrapped


# -------------------------
# Single global instance
# -------------------------
reader_macros: ReaderMacros = ReaderMacros()

QUOTE_FORMS: dict[str, Symbol] = {
    "'": Symbol("quote"),
    "`": Symbol("`"),
    ",": Symbol(","),
    ",@": Symbol(",@"),
    "#'": Symbol("function"),
}

# Printer side: long form head -> shorthand
SHORTHANDS: dict[Symbol, str] = {head: char for char, head in QUOTE_FORMS.items()}

for key, name in QUOTE_FORMS.items():
    reader_macros.define(key, _wrapping(name))
