"""Form handlers: lambda and interactive."""

from __future__ import annotations

from elnames import SExpression
from elnames.rewrite.session import RewriteSession
from elnames.types.nil import is_nil
from elnames.types.symbol import Symbol, is_symbol
from elnames.types.vector import Vector

LAMBDA = Symbol("lambda")


def is_lambda_literal(x: SExpression) -> bool:
    return isinstance(x, list) and bool(x) and x[0] == LAMBDA


def is_declaration(x: SExpression, name: str) -> bool:
    return isinstance(x, list) and bool(x) and is_symbol(x[0], name)


def lambda_params(arglist: SExpression) -> list[Symbol]:
    """Parameter names bound by an argument list.

    Lambda-list markers (&optional, &rest, &key, ...) are skipped; for
    `(name default)` style specs the name is taken; a dotted tail counts.
    """
    if is_nil(arglist):
        return []
    tail = None
    if isinstance(arglist, tuple) and len(arglist) == 2:
        arglist, tail = arglist
    if not isinstance(arglist, list):
        return [arglist] if isinstance(arglist, Symbol) else []
    names: list[Symbol] = []
    for p in arglist:
        if isinstance(p, Symbol):
            if not p.id.startswith("&"):
                names.append(p)
        elif isinstance(p, list) and p and isinstance(p[0], Symbol):
            names.append(p[0])
    if isinstance(tail, Symbol):
        names.append(tail)
    return names


# Lambda-list sections whose `(VAR INIT [SVAR])` specs carry a default form
DEFAULT_SECTIONS = frozenset({"&optional", "&key", "&aux"})


def _spec_var_names(var: SExpression) -> list[Symbol]:
    """Names bound by the VAR of a default spec: `x`, `(:key x)` or a nested list."""
    if isinstance(var, Symbol):
        return [var]
    if isinstance(var, list) and len(var) == 2 and isinstance(var[0], Symbol) and var[0].is_keyword:
        return [var[1]] if isinstance(var[1], Symbol) else lambda_params(var[1])
    return lambda_params(var)


def convert_params(arglist: SExpression, frame: set[str], session: RewriteSession, convert_fn) -> SExpression:
    """Rewrite the default forms of an argument list, binding names left to right.

    Every name the list binds is added to `frame`, so a default form sees the
    parameters before it as local.
    """
    tail = None
    if isinstance(arglist, tuple) and len(arglist) == 2:
        arglist, tail = arglist
    if is_nil(arglist) or not isinstance(arglist, list) or isinstance(arglist, Vector):
        frame.update(n.id for n in lambda_params(arglist if tail is None else (arglist, tail)))
        return arglist if tail is None else (arglist, tail)

    out: list[SExpression] = []
    section = None
    for p in arglist:
        if isinstance(p, Symbol) and p.id.startswith("&"):
            section = p.id
            out.append(p)
        elif isinstance(p, Symbol):
            frame.add(p.id)
            out.append(p)
        elif section in DEFAULT_SECTIONS and isinstance(p, list) and p and not isinstance(p, Vector):
            var, *more = p
            if more:
                more[0] = convert_fn(more[0], session)
            frame.update(n.id for n in _spec_var_names(var))
            frame.update(s.id for s in more[1:2] if isinstance(s, Symbol))
            out.append([var, *more])
        else:
            # Destructuring pattern (cl-defun) or something unexpected
            frame.update(n.id for n in lambda_params(p))
            out.append(p)
    if isinstance(tail, Symbol):
        frame.add(tail.id)
    return out if tail is None else (out, tail)


def interactive_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(interactive SPEC MODES...): a string SPEC stays, an expression SPEC is code."""
    if not tail:
        return [head]
    spec = tail[0]
    if not isinstance(spec, str):
        spec = convert_fn(spec, session)
    return [head, spec, *tail[1:]]


def convert_lambda_tail(
    params: SExpression,
    body: list[SExpression],
    session: RewriteSession,
    convert_fn,
) -> list[SExpression]:
    """Rewrite `(PARAMS [DOC] [(declare ...)] [(interactive ...)] BODY...)`."""
    rest = list(body)
    kept: list[SExpression] = []

    # A docstring is only a docstring when something follows it
    if len(rest) > 1 and isinstance(rest[0], str):
        kept.append(rest.pop(0))
    while rest and is_declaration(rest[0], "declare"):
        kept.append(rest.pop(0))
    # The interactive spec runs before the arguments are bound
    if rest and is_declaration(rest[0], "interactive"):
        form = rest.pop(0)
        kept.append(interactive_form(form[0], form[1:], session, convert_fn))

    with session.scope.frame() as frame:
        new_params = convert_params(params, frame, session, convert_fn)
        converted = [convert_fn(f, session) for f in rest]
    return [new_params, *kept, *converted]


def lambda_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    if not tail:
        return [head]
    return [head, *convert_lambda_tail(tail[0], tail[1:], session, convert_fn)]
