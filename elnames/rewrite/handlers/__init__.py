"""Registry of form handlers for the namespace rewriter.

Maps head Symbols to handlers that know which parts of the form are names,
bindings, code or data. The classifier consults this table after checking for
protected and namespaced heads, and before treating a list as an ordinary call.

Every handler has the signature `handler(head, tail, session, convert_fn)`.
"""

from elnames.types.symbol import Symbol
from elnames.rewrite.handlers.define_forms import (
    defvar_form,
    defun_form,
    defalias_form,
    defvaralias_form,
    define_minor_mode_form,
    define_derived_mode_form,
    define_globalized_minor_mode_form,
)
from elnames.rewrite.handlers.defmacro_form import defmacro_form
from elnames.rewrite.handlers.quote_forms import quote_form, function_form, backquote_form
from elnames.rewrite.handlers.lambda_form import lambda_form, interactive_form
from elnames.rewrite.handlers.let_forms import let_form, let_star_form
from elnames.rewrite.handlers.condition_case_form import condition_case_form, cond_form
from elnames.rewrite.handlers.binding_macros import (
    dolist_form,
    when_let_form,
    cl_flet_form,
    cl_destructuring_bind_form,
)
from elnames.rewrite.handlers.pcase_forms import pcase_form, pcase_let_form, pcase_dolist_form, pcase_lambda_form

FORM_HANDLERS = {
    Symbol("defvar"): defvar_form,
    Symbol("defconst"): defvar_form,
    Symbol("defcustom"): defvar_form,
    Symbol("defvar-local"): defvar_form,
    Symbol("defun"): defun_form,
    Symbol("defun*"): defun_form,
    Symbol("defsubst"): defun_form,
    Symbol("define-inline"): defun_form,
    Symbol("cl-defun"): defun_form,
    Symbol("cl-defsubst"): defun_form,
    Symbol("defalias"): defalias_form,
    Symbol("defvaralias"): defvaralias_form,
    Symbol("define-minor-mode"): define_minor_mode_form,
    Symbol("define-derived-mode"): define_derived_mode_form,
    Symbol("define-globalized-minor-mode"): define_globalized_minor_mode_form,
    Symbol("defmacro"): defmacro_form,
    Symbol("defmacro*"): defmacro_form,
    Symbol("cl-defmacro"): defmacro_form,
    Symbol("quote"): quote_form,
    Symbol("function"): function_form,
    Symbol("`"): backquote_form,
    Symbol("lambda"): lambda_form,
    Symbol("interactive"): interactive_form,
    Symbol("let"): let_form,
    Symbol("let*"): let_star_form,
    Symbol("cond"): cond_form,
    Symbol("condition-case"): condition_case_form,
    Symbol("condition-case-unless-debug"): condition_case_form,
    Symbol("lexical-let"): let_form,
    Symbol("lexical-let*"): let_star_form,
    Symbol("cl-symbol-macrolet"): let_form,
    Symbol("dolist"): dolist_form,
    Symbol("dotimes"): dolist_form,
    Symbol("cl-dolist"): dolist_form,
    Symbol("cl-dotimes"): dolist_form,
    Symbol("when-let"): when_let_form,
    Symbol("if-let"): when_let_form,
    Symbol("when-let*"): when_let_form,
    Symbol("if-let*"): when_let_form,
    Symbol("and-let*"): when_let_form,
    Symbol("while-let"): when_let_form,
    Symbol("cl-flet"): cl_flet_form,
    Symbol("cl-flet*"): cl_flet_form,
    Symbol("cl-labels"): cl_flet_form,
    Symbol("cl-macrolet"): cl_flet_form,
    Symbol("cl-destructuring-bind"): cl_destructuring_bind_form,
    Symbol("pcase"): pcase_form,
    Symbol("pcase-exhaustive"): pcase_form,
    Symbol("pcase-let"): pcase_let_form,
    Symbol("pcase-let*"): pcase_let_form,
    Symbol("pcase-dolist"): pcase_dolist_form,
    Symbol("pcase-lambda"): pcase_lambda_form,
}
