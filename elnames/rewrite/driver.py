"""Driver for the namespace rewrite.

`rewrite` runs two separate passes over the same forms:

1. `discover`: walks every form only for its effect on the symbol tables,
   so a name defined after its first use still resolves. Output discarded.
2. `transform`: walks the forms again with complete tables and builds the
   rewritten tree.

The session holding the tables and scope is installed with
`session_scope`, which refuses to nest and always releases on exit.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from elnames import SExpression, Tree
from elnames.config import AUTOLOAD_MARKER, NamespaceContext, parse_keywords
from elnames.errors import OptionValueError
from elnames.rewrite.convert import convert_form
from elnames.rewrite.session import DISCOVERY_RUN, REWRITE_RUN, RewriteSession
from elnames.runtime_context import session_scope
from elnames.types.environment import HostEnvironment
from elnames.types.nil import Nil
from elnames.types.symbol import Symbol

logger = logging.getLogger(__name__)

PROGN = Symbol("progn")


def split_autoload_markers(body: Iterable[SExpression]) -> tuple[list[SExpression], list[SExpression]]:
    """Drop `:autoload` markers; return (all forms, forms that were marked)."""
    forms: list[SExpression] = []
    marked: list[SExpression] = []
    pending = False
    for item in body:
        if item == AUTOLOAD_MARKER:
            pending = True
            continue
        forms.append(item)
        if pending:
            marked.append(item)
            pending = False
    if pending:
        logger.debug("Trailing :autoload marker with no form after it")
    return forms, marked


def discover(forms: list[SExpression], session: RewriteSession) -> None:
    """Pass 1: populate the symbol tables."""
    session.current_run = DISCOVERY_RUN
    for form in forms:
        convert_form(form, session)


def transform(forms: list[SExpression], session: RewriteSession) -> list[SExpression]:
    """Pass 2: rewrite every form against the completed tables."""
    session.current_run = REWRITE_RUN
    return [convert_form(form, session) for form in forms]


def _run(
    context: NamespaceContext,
    forms: list[SExpression],
    host: HostEnvironment,
    output_forms: Optional[list[SExpression]] = None,
) -> list[SExpression]:
    """Discover over `forms`, then transform `output_forms` (default: the same forms)."""
    session = RewriteSession(context, host)
    with session_scope(session):
        session.trace("%s: discovery pass over %d form(s)", context.prefix, len(forms))
        discover(forms, session)
        session.trace(
            "%s: %d variable(s), %d function(s), %d macro(s) found",
            context.prefix,
            len(session.tables.variables),
            len(session.tables.functions),
            len(session.tables.macros),
        )
        return transform(forms if output_forms is None else output_forms, session)


def group_forms(context: NamespaceContext) -> list[SExpression]:
    """The `defgroup` requested by the `:group` option, if any."""
    opts = context.options
    if not opts.group:
        return []
    name = context.group_name
    form = [
        Symbol("defgroup"), Symbol(name), Nil,
        f"Customization group for {name}.",
        Symbol(":prefix"), context.prefix,
        Symbol(":group"), [Symbol("quote"), Symbol(opts.group)],
    ]
    if opts.package and opts.version:
        form += [
            Symbol(":package-version"),
            [Symbol("quote"), ([Symbol(opts.package)], opts.version)],
        ]
    return [form]


def _host(host: Optional[HostEnvironment]) -> HostEnvironment:
    return host if host is not None else HostEnvironment.default()


def rewrite(
    prefix: Any,
    options: Any = None,
    body: Iterable[SExpression] = (),
    host: Optional[HostEnvironment] = None,
) -> Tree:
    """Namespace `body` under `prefix`; returns one `(progn ...)` form.

    `options` may be a NamespaceOptions, a mapping, or a keyword list.
    Raises StaleContextError when another rewrite is active in this context.
    """
    context = NamespaceContext.create(prefix, options)
    forms, _ = split_autoload_markers(body)
    rewritten = _run(context, forms, _host(host))
    return [PROGN, *group_forms(context), *rewritten]


def invoke(namespace_identifier: Any, options: Any = None, body: Iterable[SExpression] = (),
           host: Optional[HostEnvironment] = None) -> Tree:
    """Entry surface: same as `rewrite`."""
    return rewrite(namespace_identifier, options, body, host)


def autoload_forms(namespace_identifier: Any, options: Any = None, body: Iterable[SExpression] = (),
                   host: Optional[HostEnvironment] = None) -> Tree:
    """Rewrite only the forms marked with `:autoload`.

    Discovery still covers the whole body, so marked forms refer to the
    namespaced names of the unmarked ones.
    """
    context = NamespaceContext.create(namespace_identifier, options)
    forms, marked = split_autoload_markers(body)
    return [PROGN, *_run(context, forms, _host(host), output_forms=marked)]


def parse_namespace_args(args: list[SExpression]) -> tuple[SExpression, Any, list[SExpression]]:
    """Split `(NAME [:keyword [value]]... BODY...)` into (name, options, body)."""
    if not args:
        raise OptionValueError("define-namespace requires a name")
    name, *rest = args
    options, body = parse_keywords(rest)
    return name, options, body


def define_namespace(args: list[SExpression], host: Optional[HostEnvironment] = None) -> Tree:
    """Expand the arguments of a `(define-namespace NAME ...)` form."""
    name, options, body = parse_namespace_args(args)
    return rewrite(name, options, body, host)
