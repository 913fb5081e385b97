import pytest

from elnames.printer import COLOR_NAMESPACED, RESET, pprint_expr, print_forms, to_source
from elnames.reader.parser import read_one
from elnames.types.nil import Nil
from elnames.types.symbol import Symbol
from elnames.types.vector import Vector


@pytest.mark.parametrize(
    "expr, expected",
    [
        (Nil, "nil"),
        ([], "nil"),
        (42, "42"),
        ("say \"hi\" \\", '"say \\"hi\\" \\\\"'),
        (Symbol("foo-bar"), "foo-bar"),
        (Symbol("a b"), "a\\ b"),
        (Symbol("1"), "\\1"),
        ([Symbol("quote"), Symbol("x")], "'x"),
        ([Symbol("function"), Symbol("f")], "#'f"),
        ([Symbol("`"), [Symbol("a"), [Symbol(","), Symbol("b")], [Symbol(",@"), Symbol("c")]]], "`(a ,b ,@c)"),
        ([Symbol("quote"), Symbol("x"), Symbol("y")], "(quote x y)"),
        (([Symbol("a")], Symbol("b")), "(a . b)"),
        (([Symbol("a")], Nil), "(a)"),
        (Vector([1, Symbol("x")]), "[1 x]"),
    ],
)
def test_to_source(expr, expected):
    assert to_source(expr) == expected


def test_short_forms_stay_on_one_line():
    form = read_one("(defun foo-f (x) (+ x 1))")
    assert pprint_expr(form) == "(defun foo-f (x) (+ x 1))"


def test_long_forms_are_broken_over_lines():
    form = read_one("(defun foo-long-name (argument) (message \"a rather long message\" argument))")
    text = pprint_expr(form, options={"max_line_length": 30, "color": False})
    lines = text.split("\n")
    assert lines[0] == "(defun"
    assert lines[1].strip() == "foo-long-name"
    assert text.endswith(")")
    assert read_one(text) == form


def test_color_marks_namespaced_symbols():
    text = pprint_expr(read_one("(foo-f x)"), prefix="foo-", options={"max_line_length": 80, "color": True})
    assert f"{COLOR_NAMESPACED}foo-f{RESET}" in text
    assert f"{COLOR_NAMESPACED}x" not in text


def test_print_forms_separates_with_blank_lines():
    out = print_forms([read_one("(a)"), read_one("b")])
    assert out == "(a)\n\nb\n"
