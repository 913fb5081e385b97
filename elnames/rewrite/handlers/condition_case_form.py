"""Form handlers: condition-case and cond.

- condition-case: the error variable is bound only inside the handlers;
  condition names are data.
- cond: every test and every clause body is code.
"""

from elnames import SExpression
from elnames.rewrite.session import RewriteSession
from elnames.types.nil import is_nil
from elnames.types.symbol import Symbol
from elnames.types.vector import Vector


def condition_case_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(condition-case VAR BODYFORM (CONDITIONS HANDLER-BODY...)...)"""
    if len(tail) < 2:
        return [head, *tail]

    var, bodyform, *handlers = tail
    if session.is_escaped(var):
        var = session.context.strip_protection(var)
    new_body = convert_fn(bodyform, session)

    bound = [var] if isinstance(var, Symbol) and not is_nil(var) else []
    new_handlers = []
    for handler in handlers:
        if not isinstance(handler, list) or isinstance(handler, Vector) or not handler:
            new_handlers.append(handler)
            continue
        conditions, *handler_body = handler
        with session.scope.frame(bound):
            new_handlers.append([conditions, *[convert_fn(f, session) for f in handler_body]])

    return [head, var, new_body, *new_handlers]


def cond_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(cond (TEST BODY...)...)"""
    clauses = []
    for clause in tail:
        if isinstance(clause, list) and not isinstance(clause, Vector):
            clauses.append([convert_fn(x, session) for x in clause])
        else:
            clauses.append(clause)
    return [head, *clauses]
