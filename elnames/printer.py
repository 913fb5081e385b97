"""Render trees back to source text.

`to_source` produces the canonical single-line form used in diagnostics and
tests. `pprint_expr` breaks long lists over several lines and can colour
symbols that carry the namespace prefix.
"""

from __future__ import annotations

import re
from typing import Optional

from elnames import SExpression
from elnames.reader.reader_macros import SHORTHANDS
from elnames.types.literal import CharLiteral, StringLiteral
from elnames.types.nil import Nil, is_nil
from elnames.types.symbol import Symbol
from elnames.types.vector import Vector

# ----------------- ANSI colors -----------------
RESET = "\033[0m"
COLOR_SYMBOL = "\033[94m"
COLOR_NAMESPACED = "\033[92m"
COLOR_QUOTED = "\033[96m"
COLOR_SPECIAL_FORM = "\033[90m"

# ----------------- Defaults -----------------
DEFAULT_OPTIONS = {
    "max_line_length": 80,
    "color": False,
}

SPECIAL_FORMS = {
    "defun", "defmacro", "defvar", "defconst", "defcustom", "defalias",
    "lambda", "let", "let*", "if", "cond", "progn", "quote", "function",
    "condition-case", "define-minor-mode", "define-derived-mode",
}

STRING_ESCAPES = {"\\": "\\\\", '"': '\\"'}
SYMBOL_NEEDS_ESCAPE = re.compile(r"[\s()\[\]'\",;`?#\\]")


def _escape_string(s: str) -> str:
    return '"' + "".join(STRING_ESCAPES.get(c, c) for c in s) + '"'


def _symbol_source(sym: Symbol) -> str:
    name = sym.id
    if name in (".", "") or re.fullmatch(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?", name):
        return "\\" + name if name else '##'
    out = []
    for i, c in enumerate(name):
        # `?` and `#` only need escaping at the start of a symbol
        if SYMBOL_NEEDS_ESCAPE.match(c) and (c not in "?#" or i == 0):
            out.append("\\" + c)
        else:
            out.append(c)
    return "".join(out)


def _shorthand(expr: list) -> Optional[str]:
    if len(expr) == 2 and isinstance(expr[0], Symbol) and expr[0] in SHORTHANDS:
        return SHORTHANDS[expr[0]]
    return None


def to_source(expr: SExpression) -> str:
    """Single-line source text for `expr`."""
    if isinstance(expr, Symbol):
        return _symbol_source(expr)
    if isinstance(expr, (StringLiteral, CharLiteral)):
        return expr.source
    if expr is Nil or expr is None:
        return "nil"
    if isinstance(expr, bool):
        return "t" if expr else "nil"
    if isinstance(expr, str):
        return _escape_string(expr)
    if isinstance(expr, Vector):
        return "[" + " ".join(to_source(x) for x in expr) + "]"
    if isinstance(expr, tuple) and len(expr) == 2:
        lst, tail = expr
        if is_nil(tail):
            return to_source(list(lst))
        return "(" + " ".join(to_source(x) for x in lst) + " . " + to_source(tail) + ")"
    if isinstance(expr, list):
        if not expr:
            return "nil"
        short = _shorthand(expr)
        if short is not None:
            return short + to_source(expr[1])
        return "(" + " ".join(to_source(x) for x in expr) + ")"
    return str(expr)


# ----------------- Colorize utility -----------------
def colorize(sym: Symbol, prefix: Optional[str], quoted: bool, options: dict) -> str:
    text = _symbol_source(sym)
    if not options.get("color", False):
        return text
    if prefix and sym.id.startswith(prefix):
        return f"{COLOR_NAMESPACED}{text}{RESET}"
    if quoted:
        return f"{COLOR_QUOTED}{text}{RESET}"
    if sym.id in SPECIAL_FORMS:
        return f"{COLOR_SPECIAL_FORM}{text}{RESET}"
    return f"{COLOR_SYMBOL}{text}{RESET}"


def _visible_length(text: str) -> int:
    return len(re.sub(r"\033\[\d+m", "", text))


# ----------------- Pretty printer -----------------
def pprint_expr(
    expr: SExpression,
    indent: int = 0,
    prefix: Optional[str] = None,
    options: dict = DEFAULT_OPTIONS,
    in_quote: bool = False,
) -> str:
    """Multi-line rendering; lists that fit in `max_line_length` stay on one line."""
    if isinstance(expr, Symbol):
        return colorize(expr, prefix, in_quote, options)

    if not isinstance(expr, list) or isinstance(expr, Vector) or not expr:
        return to_source(expr)

    short = _shorthand(expr)
    if short is not None:
        quoted = in_quote or short in ("'", "`")
        return short + pprint_expr(expr[1], indent, prefix, options, quoted)

    parts = [pprint_expr(e, indent + 1, prefix, options, in_quote) for e in expr]

    single_line = "(" + " ".join(parts) + ")"
    if "\n" not in single_line and _visible_length(single_line) + indent * 2 <= options.get("max_line_length", 80):
        return single_line

    aligned_lines = ["(" + parts[0]]
    for part in parts[1:]:
        aligned_lines.append("  " * (indent + 1) + part)
    aligned_lines[-1] += ")"
    return "\n".join(aligned_lines)


def print_forms(forms: list[SExpression], prefix: Optional[str] = None, options: dict = DEFAULT_OPTIONS) -> str:
    return "\n\n".join(pprint_expr(f, 0, prefix, options) for f in forms) + "\n"
