"""Builtin macro transformers and argument grammars for the host environment.

Transformers exist only for the definition macros the rewriter normalises.
Grammars use the edebug-style notation understood by
`elnames.rewrite.grammar`, written as source and read once at registration.
"""

import logging
from typing import Any

from elnames import SExpression
from elnames.errors import ElnamesSyntaxError
from elnames.reader.parser import read_one
from elnames.types.macro_environment import MacroEnvironment
from elnames.types.symbol import Symbol, is_symbol

logger = logging.getLogger(__name__)


def split_declarations(body: list[SExpression]) -> tuple[list[SExpression], list[SExpression]]:
    """Split a definition body into (leading doc/declare forms, rest).

    A leading string counts as a docstring only when more forms follow it.
    """
    head: list[SExpression] = []
    rest = list(body)
    if len(rest) > 1 and isinstance(rest[0], str):
        head.append(rest.pop(0))
    while rest and isinstance(rest[0], list) and rest[0] and is_symbol(rest[0][0], "declare"):
        head.append(rest.pop(0))
    return head, rest


def declared_grammar(body: list[SExpression]) -> SExpression | None:
    """The SPEC of a `(declare ... (debug SPEC) ...)` in a macro body, if any."""
    head, _ = split_declarations(body)
    for form in head:
        if isinstance(form, list) and form and is_symbol(form[0], "declare"):
            for decl in form[1:]:
                if isinstance(decl, list) and len(decl) >= 2 and is_symbol(decl[0], "debug"):
                    return decl[1]
    return None


def _quoted(x: SExpression) -> list:
    return [Symbol("quote"), x]


# Declarations stored as a plain symbol property of the macro
PROPERTY_DECLARATIONS: dict[str, str] = {
    "indent": "lisp-indent-function",
    "doc-string": "doc-string-elt",
    "no-font-lock-keyword": "no-font-lock-keyword",
    "pure": "pure",
    "side-effect-free": "side-effect-free",
    "interactive-only": "interactive-only",
}


def declaration_forms(name: SExpression, head: list[SExpression]) -> list[SExpression]:
    """The forms a `(declare ...)` turns into when the macro is defined."""
    forms: list[SExpression] = []
    for form in head:
        if not (isinstance(form, list) and form and is_symbol(form[0], "declare")):
            continue
        for decl in form[1:]:
            if not (isinstance(decl, list) and decl and isinstance(decl[0], Symbol)):
                continue
            kind, values = decl[0].id, decl[1:]
            if kind in PROPERTY_DECLARATIONS and values:
                forms.append([Symbol("function-put"), _quoted(name),
                              _quoted(Symbol(PROPERTY_DECLARATIONS[kind])), _quoted(values[0])])
            elif kind == "debug" and values:
                forms.append([Symbol("progn"), Symbol(":autoload-end"),
                              [Symbol("put"), _quoted(name), _quoted(Symbol("edebug-form-spec")), _quoted(values[0])]])
            elif kind == "obsolete" and len(values) >= 2:
                forms.append([Symbol("make-obsolete"), _quoted(name), _quoted(values[0]), values[1]])
            else:
                logger.debug("Dropping unknown macro declaration %r of %r", kind, name)
    return forms


def defmacro_macro(args: list[SExpression], env: Any) -> SExpression:
    """
    (defmacro name (params) [doc] [(declare ...)] body...)
    => (defalias 'name (cons 'macro #'(lambda (params) [doc] body...)))

    The docstring stays with the lambda. Declarations become the property
    forms Emacs emits for them, and the whole expansion is then wrapped as
    (prog1 (defalias ...) DECLARATION-FORMS...).
    """
    if len(args) < 2:
        raise ElnamesSyntaxError("defmacro requires a name and parameter list")

    name, params = args[0], args[1]
    head, body = split_declarations(args[2:])
    doc = [h for h in head if isinstance(h, str)]

    lam = [Symbol("lambda"), params, *doc, *body]
    definition = [
        Symbol("defalias"),
        _quoted(name),
        [Symbol("cons"), _quoted(Symbol("macro")), [Symbol("function"), lam]],
    ]
    declared = declaration_forms(name, head)
    if declared:
        return [Symbol("prog1"), definition, *declared]
    return definition


# Argument grammars of common host macros
MACRO_GRAMMARS: dict[str, str] = {
    "when": "(form body)",
    "unless": "(form body)",
    "dolist": "((symbolp form &optional form) body)",
    "dotimes": "((symbolp form &optional form) body)",
    "push": "(form gv-place)",
    "pop": "(gv-place)",
    "setf": "(&rest [gv-place form])",
    "cl-incf": "(gv-place &optional form)",
    "cl-decf": "(gv-place &optional form)",
    "incf": "(gv-place &optional form)",
    "decf": "(gv-place &optional form)",
    "setq-local": "t",
    "with-temp-buffer": "(body)",
    "with-current-buffer": "(form body)",
    "with-output-to-string": "(body)",
    "save-match-data": "(body)",
    "ignore-errors": "(body)",
    "with-no-warnings": "(body)",
    "with-eval-after-load": "(form body)",
    "eval-when-compile": "(body)",
    "eval-and-compile": "(body)",
    "declare-function": "0",
    "declare": "0",
    "defgroup": "(name form stringp &rest [keywordp form])",
    "defface": "(name form stringp &rest [keywordp form])",
    # Case keys are data
    "cl-case": "(form &rest (sexp body))",
    "cl-ecase": "(form &rest (sexp body))",
    "cl-typecase": "(form &rest (sexp body))",
    "cl-etypecase": "(form &rest (sexp body))",
    "case": "(form &rest (sexp body))",
    "ecase": "(form &rest (sexp body))",
    # Binding macros have form handlers; these grammars cover malformed calls
    "pcase": "(form &rest (sexp body))",
    "pcase-exhaustive": "(form &rest (sexp body))",
    "pcase-let": "((&rest (sexp form)) body)",
    "pcase-let*": "((&rest (sexp form)) body)",
    "pcase-dolist": "((sexp form) body)",
    "pcase-lambda": "(sexp body)",
    "pcase-setq": "(&rest [sexp form])",
    "when-let": "(sexp body)",
    "if-let": "(sexp form body)",
    "when-let*": "(sexp body)",
    "if-let*": "(sexp form body)",
    "and-let*": "(sexp body)",
    "while-let": "(sexp body)",
    "cl-dolist": "((symbolp form &optional form) body)",
    "cl-dotimes": "((symbolp form &optional form) body)",
    "cl-flet": "(sexp body)",
    "cl-flet*": "(sexp body)",
    "cl-labels": "(sexp body)",
    "cl-macrolet": "(sexp body)",
    "cl-symbol-macrolet": "(sexp body)",
    "cl-destructuring-bind": "(sexp form body)",
    "lexical-let": "(sexp body)",
    "lexical-let*": "(sexp body)",
    # Places are code, nothing is bound
    "cl-letf": "((&rest (gv-place &optional form)) body)",
    "cl-letf*": "((&rest (gv-place &optional form)) body)",
    "cl-callf": "(sexp gv-place &rest form)",
    "cl-pushnew": "(form gv-place &rest form)",
    "cl-check-type": "(form sexp &optional form)",
    "cl-assert": "(form &rest form)",
    "cl-block": "(symbolp body)",
    "cl-return-from": "(symbolp &optional form)",
    "cl-return": "(&optional form)",
    # Too rich to classify; left as written
    "cl-loop": "0",
    "cl-do": "0",
    "cl-defstruct": "0",
    "rx": "0",
}


def register(macro_env: MacroEnvironment) -> None:
    """Register builtin macros in the provided MacroEnvironment."""
    macro_env.define_macro(Symbol("defmacro"), defmacro_macro)
    macro_env.define_macro(Symbol("cl-defmacro"), defmacro_macro)
    macro_env.define_macro(Symbol("defmacro*"), defmacro_macro)
    for name, spec in MACRO_GRAMMARS.items():
        macro_env.define_macro(Symbol(name), None, read_one(spec))
