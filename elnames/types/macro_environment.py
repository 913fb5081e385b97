from __future__ import annotations
from typing import Any, Callable, Optional

from elnames import SExpression
from elnames.types.symbol import Symbol

# Python transformers take the raw (unevaluated) argument list and the host
# environment, and return the expansion.
Transformer = Callable[[list[SExpression], Any], SExpression]


class MacroEnvironment:
    """
    Host-side macro table: macro names (Symbols) mapped to optional Python
    transformers, plus the argument grammar each macro declares.

    The rewriter never runs user macros. Transformers exist only for the few
    definition macros it has to normalise (defmacro and friends).
    """

    def __init__(self):
        self.macros: dict[Symbol, Optional[Transformer]] = {}
        self.grammars: dict[Symbol, SExpression] = {}

    def define_macro(
        self,
        name: Symbol,
        transformer: Optional[Transformer] = None,
        grammar: Optional[SExpression] = None,
    ) -> None:
        self.macros[name] = transformer
        if grammar is not None:
            self.grammars[name] = grammar

    def is_macro(self, sym: Symbol) -> bool:
        return sym in self.macros

    def grammar_for(self, sym: Symbol) -> Optional[SExpression]:
        return self.grammars.get(sym)

    def declare_grammar(self, sym: Symbol, spec: SExpression) -> None:
        self.grammars[sym] = spec

    # Single-step head expansion
    def expand_1(self, form: SExpression, env: Any) -> SExpression:
        """Expand only the head-position macro if it has a transformer."""
        if isinstance(form, list) and form:
            head = form[0]
            if isinstance(head, Symbol):
                transformer = self.macros.get(head)
                if transformer is not None:
                    return transformer(form[1:], env)
        return form  # Not an expandable macro call, unchanged
