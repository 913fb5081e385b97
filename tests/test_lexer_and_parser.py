import pytest
from hypothesis import given, strategies as st

from elnames.errors import ElnamesSyntaxError
from elnames.printer import to_source
from elnames.reader.parser import lex, read_all, read_one
from elnames.types.nil import Nil
from elnames.types.symbol import Symbol
from elnames.types.vector import Vector


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a", [("symbol", "a")]),
        ("'a", [("quote", "'"), ("symbol", "a")]),
        ("#'f", [("func_shorthand", "#'"), ("symbol", "f")]),
        ("`(a ,b ,@c)", [("quote", "`"), ("lparen", "("), ("symbol", "a"), ("unquote", ","), ("symbol", "b"),
                         ("unquote", ",@"), ("symbol", "c"), ("rparen", ")")]),
        ("(a b c)", [("lparen", "("), ("symbol", "a"), ("symbol", "b"), ("symbol", "c"), ("rparen", ")")]),
        ("[1 2]", [("lbracket", "["), ("symbol", "1"), ("symbol", "2"), ("rbracket", "]")]),
        ('"hello"', [("string", '"hello"')]),
        ('"a \\" b"', [("string", '"a \\" b"')]),
        ("?a ?\\n", [("char", "?a"), ("char", "?\\n")]),
        ("#b1010 #o12 #xA", [("radix", "#b1010"), ("radix", "#o12"), ("radix", "#xA")]),
        (" ; comment\n a b", [("symbol", "a"), ("symbol", "b")]),
        ("foo::bar :key 1+", [("symbol", "foo::bar"), ("symbol", ":key"), ("symbol", "1+")]),
    ]
)
def test_lexer_basic(source, expected):
    tokens = list(lex(source))
    assert tokens == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("nil", Nil),
        ("()", Nil),
        ("123", 123),
        ("-45", -45),
        ("1.", 1),
        ("3.14", 3.14),
        ("1e3", 1000.0),
        ("'a", [Symbol("quote"), Symbol("a")]),
        ("#'my-func", [Symbol("function"), Symbol("my-func")]),
        ("`(a ,b)", [Symbol("`"), [Symbol("a"), [Symbol(","), Symbol("b")]]]),
        (",@xs", [Symbol(",@"), Symbol("xs")]),
        ("(a b c)", [Symbol("a"), Symbol("b"), Symbol("c")]),
        ("(a . b)", ([Symbol("a")], Symbol("b"))),
        ("(a b . c)", ([Symbol("a"), Symbol("b")], Symbol("c"))),
        ("[a (b)]", Vector([Symbol("a"), [Symbol("b")]])),
        ('"hello"', "hello"),
        ('"tab\\there"', "tab\there"),
        ('"\\x41\\101"', "AA"),
        ('"line\\\ncontinued"', "linecontinued"),
        ("?a", 97),
        ("?\\n", 10),
        ("?\\(", 40),
        ("#b1010", 10),
        ("#o12", 10),
        ("#x1F", 31),
        ("a\\ b", Symbol("a b")),
        ("::bar", Symbol("::bar")),
    ]
)
def test_parser_basic(source, expected):
    assert read_one(source) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ("?\\C-x", 24),
        ("?\\^M", 13),
        ("?\\C-?", 127),
        ("?\\M-a", 134217825),
        ("?\\C-\\M-a", 134217729),
        ("?\\s-a", (1 << 23) | 97),
        ("?\\S-\\H-\\A-a", (1 << 25) | (1 << 24) | (1 << 22) | 97),
        ("?\\s", 32),
        ("?\\u00e9", 0xE9),
        ("?\\N{LATIN SMALL LETTER E WITH ACUTE}", 0xE9),
        ('"\\C-c\\C-c"', "\x03\x03"),
        ('"\\^M"', "\r"),
        ('"\\M-x"', "\xf8"),
        ('"\\s-"', " -"),
    ],
)
def test_modifier_escapes(source, expected):
    assert read_one(source) == expected


@pytest.mark.parametrize(
    "source",
    ["?\\C-x", "?\\M-\\C-a", "?\\^M", "?a", "?\\(", "\"\\C-c\\C-c\"", "\"tab\\there\"", "\"\\M-x\""],
)
def test_literals_print_as_written(source):
    assert to_source(read_one(source)) == source
    assert to_source(read_one(f"(f {source})")) == f"(f {source})"


def test_modifier_char_is_one_token():
    assert list(lex("?\\C-x y")) == [("char", "?\\C-x"), ("symbol", "y")]


def test_vector_is_not_a_list():
    assert read_one("[a]") != [Symbol("a")]
    assert read_one("(a)") != Vector([Symbol("a")])


def test_comments_are_skipped():
    assert read_all("(a ; first\n b) ; trailing") == [[Symbol("a"), Symbol("b")]]


@pytest.mark.parametrize(
    "source",
    ["(a", ")", "(a . )", "(. a)", "(a . b c)", "[a)", "\"unterminated", "'"],
)
def test_syntax_errors(source):
    with pytest.raises(ElnamesSyntaxError):
        read_all(source)


def test_read_one_requires_exactly_one_form():
    with pytest.raises(ElnamesSyntaxError):
        read_one("a b")


symbols = st.text(alphabet="abcxyz-:", min_size=1, max_size=8).map(Symbol)
strings = st.text(alphabet="ab \"\\\n;()", max_size=8)
atoms = st.one_of(symbols, st.integers(), strings)
trees = st.recursive(atoms, lambda children: st.lists(children, min_size=1, max_size=4), max_leaves=15)


@given(trees)
def test_printed_trees_read_back(tree):
    assert read_one(to_source(tree)) == tree
