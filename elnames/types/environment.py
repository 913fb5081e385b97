"""The host environment the rewriter consults but never evaluates in.

It records which global names are already bound (as variables) or fbound (as
functions or macros), the argument grammars of known macros, and the macro
transformers used to normalise definition forms. Names are stored in their
final, already prefixed form, exactly as the host would see them.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterable, Optional

from elnames import SExpression
from elnames.errors import ElnamesError
from elnames.types.macro_environment import MacroEnvironment, Transformer
from elnames.types.symbol import Symbol


def _sym(name: Symbol | str) -> Symbol:
    return name if isinstance(name, Symbol) else Symbol(name)


class HostEnvironment:
    """Global name records plus a MacroEnvironment."""

    __slots__ = ("vars", "functions", "macros")

    def __init__(self, macros: Optional[MacroEnvironment] = None):
        self.vars: set[Symbol] = set()
        self.functions: set[Symbol] = set()
        self.macros: MacroEnvironment = macros if macros is not None else MacroEnvironment()

    @classmethod
    def default(cls) -> HostEnvironment:
        """An environment preloaded with the builtin functions, variables and macro grammars."""
        from elnames.builtin.host_builtin import register
        from elnames.builtin.macro_builtin import register as register_macros

        env = cls()
        register(env)
        register_macros(env.macros)
        return env

    # --- recording ---
    def define_variable(self, name: Symbol | str) -> None:
        self.vars.add(_sym(name))

    def define_function(self, name: Symbol | str) -> None:
        self.functions.add(_sym(name))

    def define_macro(
        self,
        name: Symbol | str,
        transformer: Optional[Transformer] = None,
        grammar: Optional[SExpression] = None,
    ) -> None:
        self.macros.define_macro(_sym(name), transformer, grammar)

    def update(self, variables: Iterable[str] = (), functions: Iterable[str] = ()) -> None:
        """Bulk-define variable and function names."""
        for v in variables:
            self.define_variable(v)
        for f in functions:
            self.define_function(f)

    # --- queries ---
    def is_bound(self, name: Symbol) -> bool:
        return name in self.vars

    def is_fbound(self, name: Symbol) -> bool:
        return name in self.functions or self.macros.is_macro(name)

    def is_macro(self, name: Symbol) -> bool:
        return self.macros.is_macro(name)

    def grammar_for(self, name: Symbol) -> Optional[SExpression]:
        return self.macros.grammar_for(name)

    def declare_grammar(self, name: Symbol, spec: SExpression) -> None:
        self.macros.declare_grammar(name, spec)

    def macroexpand_1(self, form: SExpression) -> SExpression:
        """Expand a definition macro once; raises if the head has no transformer."""
        expanded = self.macros.expand_1(form, self)
        if expanded is form:
            raise ElnamesError(f"No macro transformer for {form[0] if form else form!r}")
        return expanded

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write(f"{{vars: {len(self.vars)}, functions: {len(self.functions)}, ")
            buffer.write(f"macros: {len(self.macros.macros)}}}")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return f"<HostEnvironment {self}>"
