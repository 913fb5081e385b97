"""Form handlers: let and let*.

`let` rewrites every initializer against the enclosing scope and then binds
all names at once for the body. `let*` binds each name as soon as its own
initializer has been rewritten, so later initializers see it as local.
"""

from __future__ import annotations

from typing import Optional

from elnames import SExpression
from elnames.rewrite.session import RewriteSession
from elnames.types.nil import Nil, is_nil
from elnames.types.symbol import Symbol
from elnames.types.vector import Vector


def _bindings(spec: SExpression) -> Optional[list]:
    if is_nil(spec):
        return []
    if isinstance(spec, list) and not isinstance(spec, Vector):
        return spec
    return None


def bound_name(name: SExpression, session: RewriteSession, convert_fn) -> SExpression:
    """The name a binding introduces, after `:let-vars` and protection are applied."""
    if not isinstance(name, Symbol):
        return name
    if session.context.options.let_vars:
        return convert_fn(name, session)
    if session.is_escaped(name):
        return session.context.strip_protection(name)
    return name


def convert_binding(binding: SExpression, session: RewriteSession, convert_fn) -> tuple[SExpression, Optional[Symbol]]:
    """Rewrite one `VAR`, `(VAR)` or `(VAR INIT)` binding with the current scope.

    Returns the new binding and the name to add to the scope (if any).
    """
    if isinstance(binding, Symbol):
        name = bound_name(binding, session, convert_fn)
        return name, name
    if isinstance(binding, list) and binding and not isinstance(binding, Vector):
        name, *inits = binding
        new_inits = [convert_fn(i, session) for i in inits]
        new_name = bound_name(name, session, convert_fn)
        return [new_name, *new_inits], new_name if isinstance(new_name, Symbol) else None
    return binding, None


def let_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    if not tail:
        return [head]
    bindings = _bindings(tail[0])
    if bindings is None:
        return [head, *[convert_fn(x, session) for x in tail]]

    new_bindings = []
    names: list[Symbol] = []
    for binding in bindings:
        new_binding, name = convert_binding(binding, session, convert_fn)
        new_bindings.append(new_binding)
        if name is not None:
            names.append(name)

    with session.scope.frame(names):
        body = [convert_fn(f, session) for f in tail[1:]]
    return [head, new_bindings if new_bindings else Nil, *body]


def let_star_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    if not tail:
        return [head]
    bindings = _bindings(tail[0])
    if bindings is None:
        return [head, *[convert_fn(x, session) for x in tail]]

    new_bindings = []
    with session.scope.frame() as frame:
        for binding in bindings:
            new_binding, name = convert_binding(binding, session, convert_fn)
            new_bindings.append(new_binding)
            if name is not None:
                frame.add(name.id)
        body = [convert_fn(f, session) for f in tail[1:]]
    return [head, new_bindings if new_bindings else Nil, *body]
