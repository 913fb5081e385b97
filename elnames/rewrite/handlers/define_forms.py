"""Form handlers: variable, function, alias and mode definitions.

Every handler registers the defined name (un-prefixed) in the matching symbol
table, writes the prefixed name into its output, and rewrites the rest of the
form. When the form was produced by the defmacro handler the name is already
prefixed; `RewriteSession.name_already_prefixed` says so for exactly one
definition.
"""

from __future__ import annotations

from typing import Callable

from elnames import SExpression
from elnames.reader.parser import read_one
from elnames.rewrite.args import interpret_arguments
from elnames.rewrite.handlers.lambda_form import convert_lambda_tail
from elnames.rewrite.handlers.quote_forms import convert_function_name
from elnames.rewrite.session import RewriteSession
from elnames.types.symbol import Symbol, is_symbol

Register = Callable[[Symbol], None]

# Grammars for what follows the name (and parent) of mode definitions
MINOR_MODE_GRAMMAR = read_one("([&optional string-or-null-p] [&rest [keywordp form]] def-body)")
DERIVED_MODE_GRAMMAR = read_one("(form [&optional stringp] [&rest [keywordp form]] def-body)")
GLOBALIZED_MODE_GRAMMAR = read_one("([&optional stringp] [&rest [keywordp form]] def-body)")

MINOR_MODE_COMPANIONS = ("-map", "-hook")
DERIVED_MODE_COMPANIONS = ("-map", "-hook", "-syntax-table", "-abbrev-table")
GLOBALIZED_MODE_COMPANIONS = ("-hook",)


def definition_name(name: SExpression, session: RewriteSession, register: Register) -> SExpression:
    """Final form of a defined name; registers it unless escaped or already prefixed."""
    if session.consume_name_already_prefixed():
        return name
    if not isinstance(name, Symbol):
        return name
    if session.is_escaped(name):
        return session.context.strip_protection(name)
    register(name)
    return session.prefixed(name)


def _quoted_definition_name(arg: SExpression, session: RewriteSession, register: Register, convert_fn) -> SExpression:
    """Name argument written as 'NAME (defalias, defvaralias)."""
    if isinstance(arg, list) and len(arg) == 2 and is_symbol(arg[0], "quote") and isinstance(arg[1], Symbol):
        return [arg[0], definition_name(arg[1], session, register)]
    # Computed name: nothing to register
    session.consume_name_already_prefixed()
    return convert_fn(arg, session)


def defvar_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(defvar NAME [VALUE [DOC]]), also defconst, defcustom, defvar-local."""
    if not tail:
        return [head]
    name = definition_name(tail[0], session, session.tables.add_variable)
    return [head, name, *[convert_fn(x, session) for x in tail[1:]]]


def defun_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(defun NAME ARGS [DOC] [DECLARE] [INTERACTIVE] BODY...), also defsubst and friends."""
    if not tail:
        return [head]
    name = definition_name(tail[0], session, session.tables.add_function)
    if len(tail) < 2:
        return [head, name]
    return [head, name, *convert_lambda_tail(tail[1], tail[2:], session, convert_fn)]


def defalias_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(defalias 'NAME DEFINITION [DOC])"""
    if not tail:
        return [head]
    name = _quoted_definition_name(tail[0], session, session.tables.add_function, convert_fn)
    return [head, name, *[convert_fn(x, session) for x in tail[1:]]]


def defvaralias_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(defvaralias 'NAME BASE [DOC])"""
    if not tail:
        return [head]
    name = _quoted_definition_name(tail[0], session, session.tables.add_variable, convert_fn)
    return [head, name, *[convert_fn(x, session) for x in tail[1:]]]


def _mode_registrar(session: RewriteSession, companions: tuple[str, ...], is_variable: bool) -> Register:
    def register(name: Symbol) -> None:
        session.tables.add_function(name)
        if is_variable:
            session.tables.add_variable(name)
        for suffix in companions:
            session.tables.add_variable(Symbol(name.id + suffix))
    return register


def define_minor_mode_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(define-minor-mode MODE [DOC] [KEYWORD VAL]... BODY...)"""
    if not tail:
        return [head]
    register = _mode_registrar(session, MINOR_MODE_COMPANIONS, is_variable=True)
    name = definition_name(tail[0], session, register)
    rest = interpret_arguments(head, MINOR_MODE_GRAMMAR, tail[1:], session, convert_fn)
    return [head, name, *rest]


def define_derived_mode_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(define-derived-mode CHILD PARENT NAME [DOC] [KEYWORD VAL]... BODY...)"""
    if not tail:
        return [head]
    register = _mode_registrar(session, DERIVED_MODE_COMPANIONS, is_variable=False)
    name = definition_name(tail[0], session, register)
    if len(tail) < 2:
        return [head, name]
    parent = convert_function_name(tail[1], session)
    rest = interpret_arguments(head, DERIVED_MODE_GRAMMAR, tail[2:], session, convert_fn)
    return [head, name, parent, *rest]


def define_globalized_minor_mode_form(head, tail: list[SExpression], session: RewriteSession, convert_fn) -> SExpression:
    """(define-globalized-minor-mode GLOBAL MODE TURN-ON [KEYWORD VAL]... BODY...)"""
    if not tail:
        return [head]
    register = _mode_registrar(session, GLOBALIZED_MODE_COMPANIONS, is_variable=True)
    name = definition_name(tail[0], session, register)
    mode_args = [convert_function_name(x, session) for x in tail[1:3]]
    rest = interpret_arguments(head, GLOBALIZED_MODE_GRAMMAR, tail[3:], session, convert_fn)
    return [head, name, *mode_args, *rest]
