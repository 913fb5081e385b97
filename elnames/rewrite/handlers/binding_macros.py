"""Form handlers: standard macros that bind names for their body.

- dolist, dotimes: the loop variable is local to the body and the result form.
- when-let, if-let and the starred forms: bindings are sequential, a bare
  symbol or `(EXPR)` is only a test.
- cl-flet, cl-flet*, cl-labels, cl-macrolet: local function names shadow
  namespaced ones in the body (and, for cl-labels, in the definitions).
- cl-destructuring-bind: the lambda list binds names for the body.

A form that does not have the expected shape falls back to the host's
argument grammar for the macro, which leaves what it cannot classify alone.
"""

from __future__ import annotations

from typing import Optional

from elnames import SExpression
from elnames.rewrite.args import convert_macro_args
from elnames.rewrite.handlers.lambda_form import convert_lambda_tail, convert_params
from elnames.rewrite.handlers.let_forms import bound_name
from elnames.rewrite.session import RewriteSession
from elnames.types.nil import Nil, is_nil
from elnames.types.symbol import Symbol
from elnames.types.vector import Vector


def _proper_list(x: SExpression) -> Optional[list]:
    if is_nil(x):
        return []
    if isinstance(x, list) and not isinstance(x, Vector):
        return x
    return None


def _fallback(head, tail, session: RewriteSession, convert_fn) -> SExpression:
    return [head, *convert_macro_args(head, tail, session, convert_fn)]


def dolist_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(dolist (VAR LIST [RESULT]) BODY...), also dotimes."""
    spec = _proper_list(tail[0]) if tail else None
    if spec is None or not 2 <= len(spec) <= 3 or not isinstance(spec[0], Symbol):
        return _fallback(head, tail, session, convert_fn)

    var = bound_name(spec[0], session, convert_fn)
    seq = convert_fn(spec[1], session)
    with session.scope.frame([var]):
        result = [convert_fn(x, session) for x in spec[2:]]
        body = [convert_fn(f, session) for f in tail[1:]]
    return [head, [var, seq, *result], *body]


def _is_single_binding(spec: list) -> bool:
    # (if-let (VAR EXPR) ...) is the old single-binding shape
    return 0 < len(spec) <= 2 and not isinstance(spec[0], list)


def when_let_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(when-let SPEC BODY...), also if-let, when-let*, if-let*, and-let*, while-let."""
    spec = _proper_list(tail[0]) if tail else None
    if spec is None:
        return _fallback(head, tail, session, convert_fn)

    single = head.id in ("if-let", "when-let") and _is_single_binding(spec)
    bindings = [spec] if single else spec

    new_bindings: list[SExpression] = []
    with session.scope.frame() as frame:
        for binding in bindings:
            items = _proper_list(binding)
            if isinstance(binding, Symbol):
                # A bare symbol tests the variable's value
                new_bindings.append(convert_fn(binding, session))
            elif items is not None and len(items) == 1:
                new_bindings.append([convert_fn(items[0], session)])
            elif items is not None and len(items) == 2 and isinstance(items[0], Symbol):
                init = convert_fn(items[1], session)
                name = bound_name(items[0], session, convert_fn)
                frame.add(name.id)
                new_bindings.append([name, init])
            else:
                new_bindings.append(binding)
        body = [convert_fn(f, session) for f in tail[1:]]

    if single:
        new_spec = new_bindings[0]
    else:
        new_spec = new_bindings if new_bindings else Nil
    return [head, new_spec, *body]


def cl_flet_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(cl-flet ((NAME ARGLIST BODY...) | (NAME EXPR)...) BODY...), also cl-flet*, cl-labels, cl-macrolet."""
    bindings = _proper_list(tail[0]) if tail else None
    if bindings is None:
        return _fallback(head, tail, session, convert_fn)

    names = [b[0] for b in bindings if isinstance(b, list) and b and isinstance(b[0], Symbol)]
    sequential = head.id == "cl-flet*"
    recursive = head.id == "cl-labels"
    is_macro = head.id == "cl-macrolet"

    new_bindings: list[SExpression] = []
    with session.scope.frame(names if recursive else ()) as frame:
        for binding in bindings:
            items = _proper_list(binding)
            if not items or not isinstance(items[0], Symbol) or len(items) < 2:
                new_bindings.append(binding)
                continue
            name = items[0]
            if len(items) == 2 and not is_macro:
                new_bindings.append([name, convert_fn(items[1], session)])
            else:
                new_bindings.append([name, *convert_lambda_tail(items[1], items[2:], session, convert_fn)])
            if sequential:
                frame.add(name.id)

    with session.scope.frame(names):
        body = [convert_fn(f, session) for f in tail[1:]]
    return [head, new_bindings if new_bindings else Nil, *body]


def cl_destructuring_bind_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(cl-destructuring-bind ARGS EXPR BODY...)"""
    if len(tail) < 2:
        return _fallback(head, tail, session, convert_fn)

    expr = convert_fn(tail[1], session)
    with session.scope.frame() as frame:
        args = convert_params(tail[0], frame, session, convert_fn)
        body = [convert_fn(f, session) for f in tail[2:]]
    return [head, args, expr, *body]
