"""Argument-shape interpreter for macro calls.

A macro's argument grammar says which argument positions are code and which
are data. Grammars use edebug's notation:

    t                       every argument is code
    0                       no argument is code
    (form body)             one code argument, then any number of code arguments
    ((symbolp form) body)   a list argument holding a symbol and a code form
    [&rest [keywordp form]] repeated keyword/value pairs, values are code

Matching runs in two steps. `classify` walks the grammar against the
arguments and returns a plan (`CODE`, `DATA`, or a nested plan for a list
argument) without touching anything, so `&or` and `&rest` can backtrack
freely. `apply_plan` then runs the `on_code` callback on every code position and
`on_data` on every data position.
"""

from __future__ import annotations

from typing import Callable, Optional

from elnames import PositionFn, SExpression
from elnames.errors import GrammarMismatch
from elnames.types.nil import is_nil
from elnames.types.symbol import Symbol, T
from elnames.types.vector import Vector

CODE = "code"
DATA = "data"

MAX_SPEC_DEPTH = 64

AMP_OPTIONAL = Symbol("&optional")
AMP_REST = Symbol("&rest")
AMP_OR = Symbol("&or")
AMP_NOT = Symbol("&not")
AMP_DEFINE = Symbol("&define")

CODE_ELEMENTS = frozenset({"form", "def-form", "function-form", "gv-place", "place"})
BODY_ELEMENTS = frozenset({"body", "def-body"})


def _is_keyword(x) -> bool:
    return isinstance(x, Symbol) and x.is_keyword


PREDICATES: dict[str, Callable[[SExpression], bool]] = {
    "sexp": lambda x: True,
    "lambda-list": lambda x: is_nil(x) or isinstance(x, (list, tuple)),
    "arg": lambda x: isinstance(x, Symbol),
    "name": lambda x: isinstance(x, Symbol),
    "symbolp": lambda x: isinstance(x, Symbol) or is_nil(x),
    "stringp": lambda x: isinstance(x, str),
    "string-or-null-p": lambda x: isinstance(x, str) or is_nil(x),
    "symbol-or-string": lambda x: isinstance(x, (str, Symbol)),
    "keywordp": _is_keyword,
    "numberp": lambda x: isinstance(x, (int, float)) and not isinstance(x, bool),
    "integerp": lambda x: isinstance(x, int) and not isinstance(x, bool),
    "consp": lambda x: (isinstance(x, list) and not isinstance(x, Vector) and bool(x)) or isinstance(x, tuple),
    "listp": lambda x: is_nil(x) or (isinstance(x, list) and not isinstance(x, Vector)) or isinstance(x, tuple),
    "atom": lambda x: not ((isinstance(x, list) and not isinstance(x, Vector) and bool(x)) or isinstance(x, tuple)),
    "vectorp": lambda x: isinstance(x, Vector),
}


def _is_lambda(x) -> bool:
    return isinstance(x, list) and bool(x) and x[0] == Symbol("lambda")


def _as_sequence(arg: SExpression) -> Optional[list]:
    """The elements of a proper-list argument, or None if it is not one."""
    if is_nil(arg):
        return []
    if isinstance(arg, list) and not isinstance(arg, Vector):
        return arg
    return None


class GrammarInterpreter:
    """Match call arguments against a grammar and rewrite the code positions."""

    def __init__(
        self,
        on_code: PositionFn,
        on_data: PositionFn = lambda x: x,
        resolve_spec: Callable[[Symbol], Optional[SExpression]] = lambda _: None,
    ):
        self.on_code = on_code
        self.on_data = on_data
        self.resolve_spec = resolve_spec

    # --- public entry ---
    def interpret(self, spec: SExpression, args: list[SExpression]) -> list[SExpression]:
        """Rewrite `args` according to `spec`; raises GrammarMismatch."""
        return self.apply_plan(self.classify(spec, args), args)

    def classify(self, spec: SExpression, args: list[SExpression]) -> list:
        if spec == T:
            return [CODE] * len(args)
        if spec == 0 or is_nil(spec):
            return [DATA] * len(args)
        if isinstance(spec, Symbol):
            resolved = self._resolve(spec, 0)
            return self.classify(resolved, args)
        if not isinstance(spec, list):
            raise GrammarMismatch(f"Unsupported grammar {spec!r}")
        plan, rest = self._match_seq(list(spec), list(args), 0)
        if rest:
            raise GrammarMismatch(f"{len(rest)} argument(s) left over after matching")
        return plan

    def apply_plan(self, plan: list, args: list[SExpression]) -> list[SExpression]:
        out: list[SExpression] = []
        for step, arg in zip(plan, args):
            if step == CODE:
                out.append(self.on_code(arg))
            elif step == DATA:
                out.append(self.on_data(arg))
            else:
                # Nested plan for a list argument
                items = _as_sequence(arg)
                out.append(arg if not items else self.apply_plan(step, items))
        return out

    # --- matching ---
    def _resolve(self, name: Symbol, depth: int) -> SExpression:
        if depth > MAX_SPEC_DEPTH:
            raise GrammarMismatch(f"Grammar {name} is too deeply recursive")
        spec = self.resolve_spec(name)
        if spec is None:
            raise GrammarMismatch(f"Unknown grammar element {name}")
        return spec

    def _match_seq(self, specs: list, args: list, depth: int, optional: bool = False) -> tuple[list, list]:
        plan: list = []
        i = 0
        while i < len(specs):
            s = specs[i]
            if s == AMP_DEFINE:
                i += 1
                continue
            if s == AMP_OPTIONAL:
                sub, args = self._match_seq(specs[i + 1:], args, depth, optional=True)
                return plan + sub, args
            if s == AMP_REST:
                group = specs[i + 1:]
                while args:
                    try:
                        sub, remaining = self._match_seq(group, args, depth + 1)
                    except GrammarMismatch:
                        break
                    if len(remaining) == len(args):
                        break
                    plan += sub
                    args = remaining
                return plan, args
            if s == AMP_OR:
                for alternative in specs[i + 1:]:
                    try:
                        sub, remaining = self._match_one(alternative, args, depth + 1)
                    except GrammarMismatch:
                        continue
                    return plan + sub, remaining
                if optional:
                    return plan, args
                raise GrammarMismatch("No &or alternative matched")
            if s == AMP_NOT:
                if i + 1 >= len(specs):
                    raise GrammarMismatch("&not without an element")
                try:
                    self._match_one(specs[i + 1], args, depth + 1)
                except GrammarMismatch:
                    i += 2
                    continue
                if optional:
                    return plan, args
                raise GrammarMismatch(f"&not {specs[i + 1]} matched")

            if optional and not args:
                return plan, args
            try:
                sub, args = self._match_one(s, args, depth + 1)
            except GrammarMismatch:
                if optional:
                    return plan, args
                raise
            plan += sub
            i += 1
        return plan, args

    def _match_one(self, s: SExpression, args: list, depth: int) -> tuple[list, list]:
        if depth > MAX_SPEC_DEPTH:
            raise GrammarMismatch("Grammar nesting is too deep")

        if isinstance(s, Vector):
            return self._match_seq(list(s), args, depth + 1)

        if isinstance(s, Symbol) and s.id in BODY_ELEMENTS:
            return [CODE] * len(args), []

        if not args:
            raise GrammarMismatch(f"Missing argument for {s}")
        arg = args[0]

        if isinstance(s, list):
            items = _as_sequence(arg)
            if items is None:
                raise GrammarMismatch(f"Expected a list for {s}, got {arg!r}")
            inner, rest = self._match_seq(list(s), list(items), depth + 1)
            if rest:
                raise GrammarMismatch(f"Extra elements in list argument {arg!r}")
            return [inner], args[1:]

        if isinstance(s, str):
            if isinstance(arg, Symbol) and arg.id == s:
                return [DATA], args[1:]
            raise GrammarMismatch(f"Expected {s}, got {arg!r}")

        if isinstance(s, Symbol):
            if s.id in CODE_ELEMENTS or s == T:
                return [CODE], args[1:]
            if s.id == "lambda-expr":
                if _is_lambda(arg):
                    return [CODE], args[1:]
                raise GrammarMismatch(f"Expected a lambda expression, got {arg!r}")
            pred = PREDICATES.get(s.id)
            if pred is not None:
                if pred(arg):
                    return [DATA], args[1:]
                raise GrammarMismatch(f"{arg!r} does not satisfy {s}")
            return self._match_one(self._resolve(s, depth), args, depth + 1)

        if s == 0:
            return [DATA] * len(args), []

        raise GrammarMismatch(f"Unsupported grammar element {s!r}")
