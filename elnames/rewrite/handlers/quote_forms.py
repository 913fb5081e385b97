"""Form handlers: quote, function and backquote.

Quoted data stays opaque. The exceptions are lambda literals, which are code
wherever they appear, and bare symbols under `function` (or under `quote`
with `:assume-var-quote`), which are references to namespaced names.
"""

from __future__ import annotations

from elnames import SExpression
from elnames.rewrite.handlers.lambda_form import is_lambda_literal
from elnames.rewrite.session import RewriteSession
from elnames.types.symbol import Symbol


def convert_function_name(sym: SExpression, session: RewriteSession) -> SExpression:
    """A symbol in function-reference position: escape, then the Functions table."""
    if not isinstance(sym, Symbol):
        return sym
    if session.is_escaped(sym):
        return session.context.strip_protection(sym)
    if session.is_function(sym):
        return session.prefixed(sym)
    return sym


def quote_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    if len(tail) != 1:
        return [head, *tail]
    payload = tail[0]
    if is_lambda_literal(payload):
        return [head, convert_fn(payload, session)]
    if isinstance(payload, Symbol) and session.context.options.assume_var_quote:
        return [head, convert_fn(payload, session)]
    return [head, payload]


def function_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    if len(tail) != 1:
        return [head, *tail]
    payload = tail[0]
    if is_lambda_literal(payload):
        return [head, convert_fn(payload, session)]
    if isinstance(payload, Symbol):
        if session.context.options.dont_assume_function_quote:
            if session.is_escaped(payload):
                return [head, session.context.strip_protection(payload)]
            return [head, payload]
        return [head, convert_function_name(payload, session)]
    return [head, payload]


def backquote_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    # Templates pass through whole; unquoted positions are not namespaced
    return [head, *tail]
