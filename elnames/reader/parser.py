"""
  Reader for Emacs-Lisp-style source: lexer and streaming parser.

- Streaming, lazy parsing
- Emits plain Python values instead of Cons cells:

    - nil, () -> Nil
    - lists -> Python list
    - dotted lists -> (list_part, tail)
    - symbols -> Symbol
    - strings -> StringLiteral (a str with escapes decoded, printed as read)
    - characters (?a, ?\\n, ?\\C-x) -> CharLiteral (an int code, printed as read)
    - numbers -> int/float
    - vectors [a b] -> Vector
    - 'x -> [quote, x], #'x -> [function, x]
    - `x -> [`, x], ,x -> [",", x], ,@x -> [",@", x]

Comments (`;` to end of line) are skipped, so autoload cookies are lost at read
time. Inside a namespace body the `:autoload` keyword marks forms instead.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterator, Optional
from elnames.errors import ElnamesSyntaxError
from elnames import SExpression
from elnames.types.literal import CharLiteral, StringLiteral
from elnames.types.nil import Nil
from elnames.types.symbol import Symbol
from elnames.types.vector import Vector
from elnames.reader.reader_macros import reader_macros


TOKEN_RE = re.compile(
    r"\s*("
    r"(?P<comment>;[^\n]*)"  # single-line comment
    r"|(?P<func_shorthand>#')"  # function shorthand #'
    r"|(?P<quote>['`])"  # ' and `
    r"|(?P<unquote>,@|,)"  # , and ,@
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r"|(?P<lbracket>\[)"  # [
    r"|(?P<rbracket>\])"  # ]
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings, may span lines
    r"|(?P<char>\?(?:\\(?:[CMSHAs]-|\^))*"  # ?\C-x ?\M-\C-a ?\^M
    r"(?:\\(?:[0-7]{1,3}|x[0-9A-Fa-f]+|u[0-9A-Fa-f]{4}|U[0-9A-Fa-f]{8}|N\{[^}]*\}|.)|[^\s\\]))"  # ?a ?\n ?\( ?\x41
    r"|(?P<radix>#b[01]+|#o[0-7]+|#x[0-9A-Fa-f]+)"  # binary, octal, hex
    r"|(?P<symbol>(?:\\.|[^\s()\[\]'\",;`])+)"  # fallback: symbols, with \ escapes
    r")",
    re.DOTALL,
)

INT_RE = re.compile(r"[+-]?\d+\.?$")
FLOAT_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:e[+-]?\d+)?$")

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "f": "\f",
    "e": "\x1b",
    "a": "\a",
    "s": " ",
    "d": "\x7f",
    "\\": "\\",
    '"': '"',
}

# Modifier bits of an Emacs character code
MODIFIER_BITS = {
    "A": 1 << 22,
    "s": 1 << 23,
    "H": 1 << 24,
    "S": 1 << 25,
    "C": 1 << 26,
    "M": 1 << 27,
}
CHAR_MASK = (1 << 22) - 1
# Only control and meta are meaningful inside strings; `\s` there is a space
CHAR_MODIFIER_RE = re.compile(r"\\(?:([CMSHAs])-|\^)")
STRING_MODIFIER_RE = re.compile(r"\\(?:([CM])-|\^)")


def _decode_escape(body: str, pos: int) -> tuple[Optional[str], int]:
    """Decode the escape starting just after a backslash at `pos`.

    Returns (text, next_pos); text is None for an escaped newline (ignored).
    """
    ch = body[pos]
    if ch == "\n":
        return None, pos + 1
    if ch in ESCAPES:
        return ESCAPES[ch], pos + 1
    if ch == "x":
        m = re.match(r"[0-9A-Fa-f]+", body[pos + 1:])
        if not m:
            raise ElnamesSyntaxError(f"Invalid \\x escape in {body!r}")
        return chr(int(m.group(0), 16)), pos + 1 + len(m.group(0))
    if ch in "01234567":
        m = re.match(r"[0-7]{1,3}", body[pos:])
        return chr(int(m.group(0), 8)), pos + len(m.group(0))
    if ch in "uU":
        width = 4 if ch == "u" else 8
        digits = body[pos + 1:pos + 1 + width]
        if not re.fullmatch(r"[0-9A-Fa-f]{%d}" % width, digits):
            raise ElnamesSyntaxError(f"Invalid \\{ch} escape in {body!r}")
        return chr(int(digits, 16)), pos + 1 + width
    if ch == "N" and body.startswith("{", pos + 1):
        end = body.find("}", pos)
        if end < 0:
            raise ElnamesSyntaxError(f"Unterminated \\N{{...}} escape in {body!r}")
        name = body[pos + 2:end]
        try:
            text = chr(int(name[2:], 16)) if name.startswith("U+") else unicodedata.lookup(name)
        except (KeyError, ValueError) as err:
            raise ElnamesSyntaxError(f"Unknown character name {name!r}") from err
        return text, end + 1
    # Any other escaped character stands for itself
    return ch, pos + 1


def _control(code: int, in_string: bool) -> int:
    base, mods = code & CHAR_MASK, code & ~CHAR_MASK
    if base == ord("?"):
        return 127 | mods
    if ord("@") <= base <= ord("_") or ord("a") <= base <= ord("z"):
        return (base & 0x1F) | mods
    if in_string:
        raise ElnamesSyntaxError(f"Invalid control modifier on {chr(code)!r} in a string")
    return code | MODIFIER_BITS["C"]


def _read_modified(body: str, pos: int, modifiers: re.Pattern, in_string: bool) -> tuple[Optional[int], int]:
    """Decode one character at `pos`, applying any `\\C-`, `\\^`, `\\M-`... prefixes.

    Returns (code, next_pos); code is None for an escaped newline.
    """
    m = modifiers.match(body, pos)
    if m:
        if m.end() >= len(body):
            raise ElnamesSyntaxError(f"Modifier without a character in {body!r}")
        code, end = _read_modified(body, m.end(), modifiers, in_string)
        if code is None:
            raise ElnamesSyntaxError(f"Modifier applied to an escaped newline in {body!r}")
        name = m.group(1)
        if name is None or name == "C":
            return _control(code, in_string), end
        if in_string:
            # Meta on an ASCII character in a unibyte string sets the high bit
            if code >= 128:
                raise ElnamesSyntaxError(f"Invalid meta modifier on {chr(code)!r} in a string")
            return code | 0x80, end
        return code | MODIFIER_BITS[name], end
    if body[pos] == "\\":
        if pos + 1 >= len(body):
            raise ElnamesSyntaxError(f"Dangling escape in {body!r}")
        text, end = _decode_escape(body, pos + 1)
        return (ord(text) if text is not None else None), end
    return ord(body[pos]), pos + 1


def read_string(token: str) -> StringLiteral:
    body = token[1:-1]
    out: list[str] = []
    pos = 0
    while pos < len(body):
        code, pos = _read_modified(body, pos, STRING_MODIFIER_RE, in_string=True)
        if code is not None:
            out.append(chr(code))
    return StringLiteral("".join(out), token)


def read_char(token: str) -> CharLiteral:
    code, _ = _read_modified(token, 1, CHAR_MODIFIER_RE, in_string=False)
    return CharLiteral(ord("\n") if code is None else code, token)


def read_atom(token: str) -> SExpression:
    if token == "nil":
        return Nil
    if INT_RE.match(token):
        return int(token.rstrip("."))
    if FLOAT_RE.match(token) and any(c.isdigit() for c in token):
        return float(token)
    # Backslash escapes make the next character part of the name
    return Symbol(re.sub(r"\\(.)", r"\1", token, flags=re.DOTALL))


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        if source[pos].isspace():
            pos += 1
            continue
        match = TOKEN_RE.match(source, pos)
        if not match:
            raise ElnamesSyntaxError(f"Unexpected char at {pos}: {source[pos]!r}")
        pos = match.end()
        if match.group("comment"):
            continue
        for nm in TOKEN_RE.groupindex:
            if nm != "comment" and match.group(nm):
                yield nm, match.group(nm)
                break


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]]):
        self.tokens = iter(token_iter)
        self.buffer: list[tuple[str, str]] = []

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def _parse_sequence(self, closer: str) -> list[SExpression]:
        items: list[SExpression] = []
        while True:
            tok_type, _ = self.peek()
            if tok_type == closer:
                self.advance()
                return items
            if tok_type is None:
                raise ElnamesSyntaxError("Unexpected EOF while reading a list")
            if tok_type in ("rparen", "rbracket"):
                raise ElnamesSyntaxError(f"Mismatched closing {self.peek()[1]!r}")
            items.append(self.parse_expr())

    def parse_expr(self) -> SExpression:
        tok_type, tok_val = self.peek()
        if tok_type is None:
            return None

        # ------------------------
        # Dispatch reader macros first
        # ------------------------
        if tok_type in ("quote", "unquote", "func_shorthand") and reader_macros.is_macro(tok_val):
            self.advance()  # consume the macro token
            return reader_macros.dispatch(tok_val, self)

        if tok_type == "symbol":
            self.advance()
            return read_atom(tok_val)

        # List or dotted list
        if tok_type == "lparen":
            self.advance()
            items = []
            while True:
                if self.peek()[0] == "rparen":
                    self.advance()
                    break
                if self.peek()[0] is None:
                    raise ElnamesSyntaxError("Unmatched '('")
                if self.peek() == ("symbol", "."):
                    self.advance()
                    if not items:
                        raise ElnamesSyntaxError("Dotted pair without a car")
                    cdr_expr = self.parse_expr()
                    if self.peek()[0] != "rparen":
                        raise ElnamesSyntaxError("Expected ')' after dotted cdr")
                    self.advance()
                    return items, cdr_expr  # tuple for a dotted list
                items.append(self.parse_expr())
            return items if items else Nil

        if tok_type == "lbracket":
            self.advance()
            return Vector(self._parse_sequence("rbracket"))

        if tok_type == "string":
            self.advance()
            return read_string(tok_val)

        if tok_type == "char":
            self.advance()
            return read_char(tok_val)

        # Radix numbers
        if tok_type == "radix":
            self.advance()
            base = {"b": 2, "o": 8, "x": 16}[tok_val[1]]
            return int(tok_val[2:], base)

        if tok_type in ("rparen", "rbracket"):
            raise ElnamesSyntaxError(f"Unexpected {tok_val!r}")

        raise ElnamesSyntaxError(f"Unknown token: {tok_type} {tok_val}")

    def parse_all(self) -> Iterator[SExpression]:
        while True:
            tok_type, _ = self.peek()
            if tok_type is None:
                break
            yield self.parse_expr()


def read_all(source: str) -> list[SExpression]:
    """Read every top-level form in `source`."""
    return list(TokenStream(lex(source)).parse_all())


def read_one(source: str) -> SExpression:
    """Read exactly one form from `source`."""
    forms = read_all(source)
    if len(forms) != 1:
        raise ElnamesSyntaxError(f"Expected exactly one form, got {len(forms)}")
    return forms[0]
