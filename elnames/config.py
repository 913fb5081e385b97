"""Namespace options and the immutable per-rewrite context.

Options arrive either as the keyword list at the head of a
`(define-namespace NAME :keyword [value] ... BODY...)` form or as a Python
mapping. Both routes produce a frozen `NamespaceOptions`.
"""

from __future__ import annotations
import os
import re
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping, Optional

from elnames import SExpression
from elnames.errors import InvalidProtectionValueError, OptionValueError, UnknownOptionError
from elnames.types.nil import is_nil
from elnames.types.symbol import Symbol

DEFAULT_PROTECTION = "::"

# Marker placed before a body form to request deferred (autoload) registration
AUTOLOAD_MARKER = Symbol(":autoload")

_UNPRINTABLE = re.compile(r"[\s()\[\]'\",;`\\]")


def _env_flag(var: str) -> bool:
    raw = os.environ.get(var, "")
    return raw.strip().lower() in ("1", "true", "yes", "on")


def default_protection() -> str:
    return os.environ.get("ELNAMES_PROTECTION") or DEFAULT_PROTECTION


def validate_protection(value: Any) -> str:
    """Return the protection marker as a string, or raise InvalidProtectionValueError."""
    if isinstance(value, Symbol):
        value = value.id
    if not isinstance(value, str) or not value:
        raise InvalidProtectionValueError(f"Protection marker must be a non-empty name, got {value!r}")
    if not value.isprintable() or _UNPRINTABLE.search(value):
        raise InvalidProtectionValueError(f"Protection marker {value!r} is not a printable symbol name")
    return value


@dataclass(frozen=True)
class NamespaceOptions:
    let_vars: bool = False
    global_lookup: bool = False
    verbose: bool = field(default_factory=lambda: _env_flag("ELNAMES_VERBOSE"))
    assume_var_quote: bool = False
    dont_assume_function_quote: bool = False
    protection: str = field(default_factory=default_protection)
    functionlike_macros: frozenset = frozenset()
    group: Optional[str] = None
    version: Optional[str] = None
    package: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "protection", validate_protection(self.protection))


# keyword -> (field name, kind)
OPTION_KEYWORDS: dict[str, tuple[str, str]] = {
    ":let-vars": ("let_vars", "flag"),
    ":global": ("global_lookup", "flag"),
    ":verbose": ("verbose", "flag"),
    ":assume-var-quote": ("assume_var_quote", "flag"),
    ":dont-assume-function-quote": ("dont_assume_function_quote", "flag"),
    ":protection": ("protection", "name"),
    ":functionlike-macros": ("functionlike_macros", "names"),
    ":group": ("group", "name"),
    ":version": ("version", "string"),
    ":package": ("package", "name"),
}

FIELD_KINDS: dict[str, str] = {fld: kind for fld, kind in OPTION_KEYWORDS.values()}


def _coerce(keyword: str, kind: str, value: Any) -> Any:
    if kind == "flag":
        if isinstance(value, bool):
            return value
        return not is_nil(value)
    if kind == "string":
        if not isinstance(value, str):
            raise OptionValueError(f"{keyword} expects a string, got {value!r}")
        return value
    if kind == "name":
        if isinstance(value, Symbol):
            return value.id
        if isinstance(value, str):
            return value
        raise OptionValueError(f"{keyword} expects a symbol, got {value!r}")
    if kind == "names":
        # Accept (foo bar), '(foo bar) and plain Python iterables
        if isinstance(value, list) and len(value) == 2 and value[0] == Symbol("quote"):
            value = value[1]
        if is_nil(value):
            return frozenset()
        if isinstance(value, (str, Symbol)):
            value = [value]
        names = []
        for item in value:
            if isinstance(item, Symbol):
                names.append(item.id)
            elif isinstance(item, str):
                names.append(item)
            else:
                raise OptionValueError(f"{keyword} expects a list of symbols, got {item!r}")
        return frozenset(names)
    raise OptionValueError(f"Unknown option kind {kind!r}")


def parse_keywords(args: Iterable[SExpression]) -> tuple[NamespaceOptions, list[SExpression]]:
    """Split `:keyword [value]...` options off the front of a namespace body.

    Parsing stops at the first non-keyword element, or at the `:autoload`
    marker, which belongs to the body.
    """
    items = list(args)
    values: dict[str, Any] = {}
    i = 0
    while i < len(items):
        item = items[i]
        if not (isinstance(item, Symbol) and item.is_keyword) or item == AUTOLOAD_MARKER:
            break
        entry = OPTION_KEYWORDS.get(item.id)
        if entry is None:
            raise UnknownOptionError(f"Unknown namespace option {item.id}")
        fld, kind = entry
        if kind == "flag":
            values[fld] = True
            i += 1
            continue
        if i + 1 >= len(items):
            raise OptionValueError(f"{item.id} requires a value")
        values[fld] = _coerce(item.id, kind, items[i + 1])
        i += 2
    return NamespaceOptions(**values), items[i:]


def options_from_mapping(mapping: Mapping[str, Any] | None) -> NamespaceOptions:
    """Build options from a mapping of field names (or `:keyword` names)."""
    if not mapping:
        return NamespaceOptions()
    values: dict[str, Any] = {}
    for key, value in mapping.items():
        name = str(key)
        if name.startswith(":"):
            entry = OPTION_KEYWORDS.get(name)
            if entry is None:
                raise UnknownOptionError(f"Unknown namespace option {name}")
            fld, kind = entry
        else:
            fld = name.replace("-", "_")
            if fld == "global":
                fld = "global_lookup"
            if fld not in FIELD_KINDS:
                raise UnknownOptionError(f"Unknown namespace option {name}")
            kind = FIELD_KINDS[fld]
        values[fld] = _coerce(name, kind, value)
    return NamespaceOptions(**values)


def coerce_options(options: Any) -> NamespaceOptions:
    """Accept NamespaceOptions, a mapping, a keyword list, or None."""
    if options is None:
        return NamespaceOptions()
    if isinstance(options, NamespaceOptions):
        return options
    if isinstance(options, Mapping):
        return options_from_mapping(options)
    parsed, rest = parse_keywords(options)
    if rest:
        raise OptionValueError(f"Unexpected element in option list: {rest[0]!r}")
    return parsed


@dataclass(frozen=True)
class NamespaceContext:
    """Prefix, protection marker and options for one rewrite."""

    prefix: str
    options: NamespaceOptions = field(default_factory=NamespaceOptions)

    @classmethod
    def create(cls, identifier: Any, options: Any = None) -> NamespaceContext:
        if isinstance(identifier, Symbol):
            prefix = identifier.id
        elif isinstance(identifier, str):
            prefix = identifier
        else:
            raise OptionValueError(f"Namespace identifier must be a symbol or string, got {identifier!r}")
        if not prefix:
            raise OptionValueError("Namespace identifier cannot be empty")
        return cls(prefix, coerce_options(options))

    @property
    def protection(self) -> str:
        return self.options.protection

    def with_options(self, **changes) -> NamespaceContext:
        return replace(self, options=replace(self.options, **changes))

    def is_escaped(self, sym: SExpression) -> bool:
        return isinstance(sym, Symbol) and sym.id.startswith(self.protection)

    def strip_protection(self, sym: Symbol) -> Symbol:
        return Symbol(sym.id[len(self.protection):])

    def prefixed(self, sym: Symbol) -> Symbol:
        if self.is_escaped(sym):
            return self.strip_protection(sym)
        return sym.prefixed(self.prefix)

    @property
    def group_name(self) -> str:
        # foo- -> foo, foo: -> foo
        return self.prefix.rstrip("-:/.") or self.prefix
