"""Form handlers: pcase and its binding relatives.

Patterns are data and are never rewritten. Every symbol a pattern may bind is
local to the code it guards, so body references to those names stay as
written. Sub-patterns that bind nothing (`pred`, `guard`, `cl-type` and quoted
data) are skipped; in a backquoted pattern only the `,PAT` holes bind.
"""

from __future__ import annotations

from typing import Optional

from elnames import SExpression
from elnames.rewrite.args import convert_macro_args
from elnames.rewrite.session import RewriteSession
from elnames.types.nil import Nil, is_nil
from elnames.types.symbol import Symbol
from elnames.types.vector import Vector

NON_BINDING_PATTERNS = frozenset({"pred", "guard", "cl-type", "quote", "rx"})
UNDERSCORE = "_"


def _proper_list(x: SExpression) -> Optional[list]:
    if is_nil(x):
        return []
    if isinstance(x, list) and not isinstance(x, Vector):
        return x
    return None


def _backquote_names(template: SExpression) -> list[Symbol]:
    """Names bound by the `,PAT` holes of a backquote pattern."""
    if isinstance(template, tuple) and len(template) == 2:
        items, tail = template
        return [n for x in items for n in _backquote_names(x)] + _backquote_names(tail)
    if isinstance(template, list) and template:
        if len(template) == 2 and isinstance(template[0], Symbol) and template[0].id == ",":
            return pattern_names(template[1])
        return [n for x in template for n in _backquote_names(x)]
    return []


def pattern_names(pattern: SExpression) -> list[Symbol]:
    """Every symbol `pattern` may bind."""
    if isinstance(pattern, Symbol):
        if pattern.is_keyword or pattern.id in (UNDERSCORE, "t") or pattern.id.startswith("&"):
            return []
        return [pattern]
    items = _proper_list(pattern)
    if not items or not isinstance(items[0], Symbol):
        return []
    kind, args = items[0].id, items[1:]
    if kind in NON_BINDING_PATTERNS:
        return []
    if kind == "`":
        return _backquote_names(args[0]) if args else []
    if kind == "app":
        # (app FUN PAT): FUN is code, only PAT binds
        return pattern_names(args[1]) if len(args) > 1 else []
    if kind == "let":
        # (let PAT EXPR)
        return pattern_names(args[0]) if args else []
    return [n for p in args for n in pattern_names(p)]


def pcase_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(pcase EXP (PATTERN BODY...)...), also pcase-exhaustive."""
    if not tail:
        return [head]
    out = [head, convert_fn(tail[0], session)]
    for clause in tail[1:]:
        items = _proper_list(clause)
        if not items:
            out.append(clause)
            continue
        pattern, *body = items
        with session.scope.frame(pattern_names(pattern)):
            out.append([pattern, *[convert_fn(f, session) for f in body]])
    return out


def pcase_let_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(pcase-let ((PATTERN EXPR)...) BODY...), also pcase-let*."""
    bindings = _proper_list(tail[0]) if tail else None
    if bindings is None:
        return [head, *convert_macro_args(head, tail, session, convert_fn)]

    sequential = head.id == "pcase-let*"
    new_bindings: list[SExpression] = []
    names: list[Symbol] = []
    with session.scope.frame() as frame:
        for binding in bindings:
            items = _proper_list(binding)
            if items is None or len(items) != 2:
                new_bindings.append(binding)
                continue
            pattern, expr = items
            new_bindings.append([pattern, convert_fn(expr, session)])
            bound = pattern_names(pattern)
            if sequential:
                frame.update(n.id for n in bound)
            names.extend(bound)
        with session.scope.frame(names):
            body = [convert_fn(f, session) for f in tail[1:]]
    return [head, new_bindings if new_bindings else Nil, *body]


def pcase_dolist_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(pcase-dolist (PATTERN LIST) BODY...)"""
    spec = _proper_list(tail[0]) if tail else None
    if spec is None or len(spec) != 2:
        return [head, *convert_macro_args(head, tail, session, convert_fn)]

    pattern, seq = spec
    new_seq = convert_fn(seq, session)
    with session.scope.frame(pattern_names(pattern)):
        body = [convert_fn(f, session) for f in tail[1:]]
    return [head, [pattern, new_seq], *body]


def pcase_lambda_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(pcase-lambda (PATTERN...) BODY...)"""
    arglist = _proper_list(tail[0]) if tail else None
    if arglist is None:
        return [head, *convert_macro_args(head, tail, session, convert_fn)]

    names = [n for p in arglist for n in pattern_names(p)]
    with session.scope.frame(names):
        body = [convert_fn(f, session) for f in tail[1:]]
    return [head, tail[0], *body]
