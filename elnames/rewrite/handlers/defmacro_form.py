"""Form handler: defmacro.

The macro name is prefixed and registered straight away, its declared
argument grammar is attached to the prefixed name, and the definition is
macroexpanded by the host into its `defalias` form (inside a `prog1` when it
has declarations), which then goes through the ordinary definition handler
with the name marked as already prefixed.
"""

from __future__ import annotations

from elnames import SExpression
from elnames.builtin.macro_builtin import declared_grammar
from elnames.rewrite.session import RewriteSession
from elnames.types.symbol import Symbol, is_symbol


def defmacro_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(defmacro NAME ARGS [DOC] [(declare (debug SPEC))] BODY...)"""
    if len(tail) < 2 or not isinstance(tail[0], Symbol):
        return [head, *tail]

    name = tail[0]
    if session.consume_name_already_prefixed():
        spaced_name = name
    elif session.is_escaped(name):
        spaced_name = session.context.strip_protection(name)
    else:
        session.tables.add_macro(name)
        spaced_name = session.prefixed(name)

    spec = declared_grammar(tail[2:])
    if spec is not None:
        session.declare_grammar(spaced_name, spec)
        session.trace("%s: macro %s declares grammar %r", session.context.prefix, spaced_name, spec)
    if session.is_final_pass and not session.host.is_macro(spaced_name):
        # Later namespaces sharing this host see the macro as defined
        session.host.define_macro(spaced_name, grammar=spec)

    expansion = session.host.macroexpand_1([head, spaced_name, *tail[1:]])
    session.name_already_prefixed = True
    if isinstance(expansion, list) and expansion and is_symbol(expansion[0], "prog1"):
        # Declaration forms already name the macro by its final name
        return [expansion[0], convert_fn(expansion[1], session), *expansion[2:]]
    return convert_fn(expansion, session)
