"""Node classifier: rewrite one tree node inside the active namespace.

Both passes run through `convert_form`. On the discovery pass the return
value is thrown away and only the symbol-table side effects of the definition
handlers matter; on the rewrite pass it is the output.

Dispatch order for a list (first match wins):

1. head carries the protection marker -> ordinary call to the stripped head
2. head is itself a list               -> lambda literal, or child-by-child
3. head is a namespaced function/macro -> prefixed head, arguments by role
4. head has a form handler             -> the handler decides everything
5. anything else                       -> ordinary call, head untouched
"""

from __future__ import annotations

from elnames import SExpression
from elnames.errors import UnsupportedCompoundHeadWarning
from elnames.printer import to_source
from elnames.rewrite.args import convert_call
from elnames.rewrite.handlers import FORM_HANDLERS
from elnames.rewrite.handlers.lambda_form import is_lambda_literal, lambda_form
from elnames.rewrite.session import RewriteSession
from elnames.types.nil import is_nil
from elnames.types.symbol import Symbol
from elnames.types.vector import Vector


def convert_symbol(sym: Symbol, session: RewriteSession) -> Symbol:
    """Variable-position symbol: escape, shadowing, then the Variables table."""
    if session.is_escaped(sym):
        return session.context.strip_protection(sym)
    if session.is_variable(sym):
        return session.prefixed(sym)
    return sym


def convert_form(form: SExpression, session: RewriteSession) -> SExpression:
    """Rewrite `form`; atoms other than symbols come back unchanged."""
    if is_nil(form):
        return form

    match form:
        case Symbol():
            return convert_symbol(form, session)

        case Vector() | tuple():
            return form

        case [Symbol() as head, *tail] if session.is_escaped(head):
            stripped = session.context.strip_protection(head)
            return convert_call(stripped, tail, session, convert_form, head_is_namespaced=False)

        case [list() as head, *tail] if is_lambda_literal(head):
            new_head = lambda_form(head[0], head[1:], session, convert_form)
            return [new_head, *[convert_form(arg, session) for arg in tail]]

        case [list() | tuple() as head, *_]:
            session.warn(
                f"Unsupported compound head {to_source(head)} in {to_source(form)}; "
                "rewriting each element independently",
                UnsupportedCompoundHeadWarning,
            )
            return [convert_form(x, session) for x in form]

        case [Symbol() as head, *tail] if session.is_function(head):
            return convert_call(session.prefixed(head), tail, session, convert_form, head_is_namespaced=True, written=head)

        case [Symbol() as head, *tail] if head in FORM_HANDLERS:
            session.trace("%s: %s form", session.context.prefix, head)
            return FORM_HANDLERS[head](head, tail, session, convert_form)

        case [Symbol() as head, *tail]:
            return convert_call(head, tail, session, convert_form, head_is_namespaced=False)

    # --- Other atoms (numbers, strings, vectors, dotted lists) return as-is ---
    return form
