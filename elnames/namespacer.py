from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from elnames import SExpression
from elnames.printer import DEFAULT_OPTIONS, print_forms
from elnames.reader.parser import TokenStream, lex
from elnames.rewrite.driver import autoload_forms, parse_namespace_args, rewrite
from elnames.types.environment import HostEnvironment
from elnames.types.symbol import is_symbol

logger = logging.getLogger(__name__)

DEFINE_NAMESPACE = "define-namespace"


def is_namespace_form(form: SExpression) -> bool:
    return isinstance(form, list) and bool(form) and is_symbol(form[0], DEFINE_NAMESPACE)


class Namespacer:
    """
    Reads source text and expands its `define-namespace` forms.
    Keeps one HostEnvironment across calls, so grammars declared by one
    namespace are visible to the ones that follow.
    """

    def __init__(self, host: Optional[HostEnvironment] = None, *, autoload: bool = False):
        self.host: HostEnvironment = host if host is not None else HostEnvironment.default()
        self.autoload = autoload

    def expand(self, form: SExpression) -> SExpression:
        """Expand one top-level form; anything but `define-namespace` is returned as is."""
        if not is_namespace_form(form):
            return form
        name, options, body = parse_namespace_args(form[1:])
        logger.debug("Expanding namespace %s (%d body form(s))", name, len(body))
        if self.autoload:
            return autoload_forms(name, options, body, self.host)
        return rewrite(name, options, body, self.host)

    def read(self, code: str) -> list[SExpression]:
        stream = TokenStream(iter(lex(code)))
        return list(stream.parse_all())

    def expand_source(self, code: str, prefix: Optional[str] = None, options: Any = None) -> list[SExpression]:
        """Expand every form in `code`.

        With `prefix`, the whole text is treated as the body of one namespace.
        """
        forms = self.read(code)
        if prefix is not None:
            if self.autoload:
                return [autoload_forms(prefix, options, forms, self.host)]
            return [rewrite(prefix, options, forms, self.host)]
        return [self.expand(f) for f in forms]

    def rewrite_source(
        self,
        code: str,
        prefix: Optional[str] = None,
        options: Any = None,
        *,
        width: int = DEFAULT_OPTIONS["max_line_length"],
        color: bool = False,
    ) -> str:
        forms = self.expand_source(code, prefix, options)
        return print_forms(forms, prefix, {"max_line_length": width, "color": color})

    def rewrite_file(self, path: str | Path, **kwargs) -> str:
        return self.rewrite_source(Path(path).read_text(encoding="utf-8"), **kwargs)
