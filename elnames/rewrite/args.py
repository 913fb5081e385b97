"""Call arguments: every argument of a function call is code; a macro call's
arguments are classified by the macro's argument grammar."""

from __future__ import annotations

from typing import Callable, Optional

from elnames import SExpression
from elnames.errors import AmbiguousMacroShapeWarning, GrammarMismatch
from elnames.printer import to_source
from elnames.rewrite.grammar import GrammarInterpreter
from elnames.rewrite.session import RewriteSession
from elnames.types.nil import is_nil
from elnames.types.symbol import Symbol, T

ConvertFn = Callable[[SExpression, RewriteSession], SExpression]


def macro_grammar(head: Symbol, written: Symbol, session: RewriteSession) -> Optional[SExpression]:
    """Grammar for a macro call: declared grammar first, then `:functionlike-macros`."""
    spec = session.grammar_for(head)
    if spec is not None:
        return spec
    functionlike = session.context.options.functionlike_macros
    if head.id in functionlike or written.id in functionlike:
        return T
    return None


def interpret_arguments(
    head: Symbol,
    spec: SExpression,
    args: list[SExpression],
    session: RewriteSession,
    convert_fn: ConvertFn,
) -> list[SExpression]:
    """Run the grammar interpreter; on a mismatch warn and return `args` untouched."""
    interpreter = GrammarInterpreter(
        on_code=lambda f: convert_fn(f, session),
        resolve_spec=session.grammar_for,
    )
    try:
        return interpreter.interpret(spec, args)
    except GrammarMismatch as err:
        session.warn(
            f"Could not classify the arguments of {to_source([head, *args])} "
            f"with grammar {to_source(spec)} ({err}); leaving the call unmodified",
            AmbiguousMacroShapeWarning,
        )
        return list(args)


def convert_macro_args(
    head: Symbol,
    args: list[SExpression],
    session: RewriteSession,
    convert_fn: ConvertFn,
    written: Optional[Symbol] = None,
) -> list[SExpression]:
    spec = macro_grammar(head, written or head, session)
    if spec is None:
        session.trace("%s: no argument grammar for macro %s; arguments left as they are",
                      session.context.prefix, head)
        return list(args)
    if spec == 0 or is_nil(spec):
        return list(args)
    if spec == T:
        return [convert_fn(a, session) for a in args]
    return interpret_arguments(head, spec, args, session, convert_fn)


def convert_call(
    head: Symbol,
    args: list[SExpression],
    session: RewriteSession,
    convert_fn: ConvertFn,
    head_is_namespaced: bool,
    written: Optional[Symbol] = None,
) -> list[SExpression]:
    """Rebuild a call with its (already final) `head` and rewritten arguments.

    `written` is the head as it appeared in the source; it decides the
    macro/function role for namespaced heads.
    """
    written = written or head
    if head_is_namespaced:
        is_macro = session.is_macro(written)
    else:
        is_macro = session.host.is_macro(head)
    if is_macro:
        return [head, *convert_macro_args(head, args, session, convert_fn, written)]
    return [head, *[convert_fn(a, session) for a in args]]
