"""State for one rewrite: symbol tables, the local scope stack, and the pass counter.

A `RewriteSession` is created by the driver, installed with
`elnames.runtime_context.session_scope`, and handed to every handler. Nothing
here outlives a single invocation.
"""

from __future__ import annotations

import logging
import warnings
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from elnames import SExpression
from elnames.config import NamespaceContext
from elnames.types.environment import HostEnvironment
from elnames.types.symbol import Symbol

logger = logging.getLogger(__name__)

DISCOVERY_RUN = 1
REWRITE_RUN = 2


@dataclass
class SymbolTables:
    """Un-prefixed names defined in the block (or known via the host)."""

    variables: set[str] = field(default_factory=set)
    functions: set[str] = field(default_factory=set)
    macros: set[str] = field(default_factory=set)
    # prefixed macro name -> declared argument grammar
    grammars: dict[Symbol, SExpression] = field(default_factory=dict)

    def add_variable(self, name: Symbol) -> None:
        self.variables.add(name.id)

    def add_function(self, name: Symbol) -> None:
        self.functions.add(name.id)

    def add_macro(self, name: Symbol) -> None:
        self.functions.add(name.id)
        self.macros.add(name.id)


class ScopeStack:
    """Stack of frames holding the names bound by enclosing binding forms."""

    __slots__ = ("frames",)

    def __init__(self):
        self.frames: list[set[str]] = []

    def is_shadowed(self, name: Symbol) -> bool:
        return any(name.id in frame for frame in self.frames)

    @contextmanager
    def frame(self, names: Iterable[Symbol] = ()) -> Iterator[set[str]]:
        """Push a frame for the block; the yielded set may grow (sequential binding)."""
        new_frame = {n.id for n in names}
        self.frames.append(new_frame)
        try:
            yield new_frame
        finally:
            self.frames.pop()


class RewriteSession:
    __slots__ = ("context", "host", "tables", "scope", "current_run", "name_already_prefixed")

    def __init__(self, context: NamespaceContext, host: HostEnvironment):
        self.context = context
        self.host = host
        self.tables = SymbolTables()
        self.scope = ScopeStack()
        self.current_run = 0
        # One-shot: the next definition form carries an already prefixed name
        self.name_already_prefixed = False

    # --- passes ---
    @property
    def is_final_pass(self) -> bool:
        return self.current_run >= REWRITE_RUN

    def consume_name_already_prefixed(self) -> bool:
        flag = self.name_already_prefixed
        self.name_already_prefixed = False
        return flag

    # --- name resolution ---
    def prefixed(self, sym: Symbol) -> Symbol:
        return self.context.prefixed(sym)

    def is_escaped(self, obj: SExpression) -> bool:
        return self.context.is_escaped(obj)

    def is_shadowed(self, sym: Symbol) -> bool:
        return self.scope.is_shadowed(sym)

    def _global_lookup(self) -> bool:
        return self.context.options.global_lookup

    def is_variable(self, sym: Symbol) -> bool:
        """Would a reference to `sym` in variable position be namespaced?"""
        if not isinstance(sym, Symbol) or sym.is_keyword or self.is_shadowed(sym):
            return False
        if sym.id in self.tables.variables:
            return True
        return self._global_lookup() and self.host.is_bound(self.prefixed(sym))

    def is_function(self, sym: Symbol) -> bool:
        """Would `sym` in call-head or function-quote position be namespaced?"""
        if not isinstance(sym, Symbol) or sym.is_keyword or self.is_shadowed(sym):
            return False
        if sym.id in self.tables.functions:
            return True
        return self._global_lookup() and self.host.is_fbound(self.prefixed(sym))

    def is_macro(self, sym: Symbol) -> bool:
        """`sym` names a namespaced macro (tables, or host under `:global`)."""
        if sym.id in self.tables.macros:
            return True
        return self._global_lookup() and self.host.is_macro(self.prefixed(sym))

    def grammar_for(self, name: Symbol) -> Optional[SExpression]:
        """Argument grammar for a macro head that is already in its final form."""
        if name in self.tables.grammars:
            return self.tables.grammars[name]
        return self.host.grammar_for(name)

    def declare_grammar(self, name: Symbol, spec: SExpression) -> None:
        self.tables.grammars[name] = spec
        self.host.declare_grammar(name, spec)

    # --- diagnostics ---
    def trace(self, msg: str, *args) -> None:
        if self.context.options.verbose:
            logger.info(msg, *args)
        else:
            logger.debug(msg, *args)

    def warn(self, message: str, category: type[Warning]) -> None:
        """Emit a non-fatal diagnostic; suppressed until discovery is complete."""
        if not self.is_final_pass:
            return
        warnings.warn(message, category, stacklevel=3)
