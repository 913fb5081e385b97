import pytest

from elnames.errors import GrammarMismatch
from elnames.reader.parser import read_all, read_one
from elnames.rewrite.grammar import CODE, DATA, GrammarInterpreter
from elnames.types.symbol import Symbol, T

CODE_MARK = Symbol("code!")


def mark(x):
    return [CODE_MARK, x]


@pytest.fixture
def interpreter():
    return GrammarInterpreter(on_code=mark)


def run(interpreter, spec, args):
    return interpreter.interpret(read_one(spec) if isinstance(spec, str) else spec, read_all(args))


def marked(source):
    """Expected output, with `!x` standing for a code position holding x."""
    def convert(x):
        if isinstance(x, Symbol) and x.id.startswith("!"):
            return mark(Symbol(x.id[1:]))
        if isinstance(x, list) and x and x[0] == Symbol("!"):
            return mark(x[1])
        if isinstance(x, list):
            return [convert(e) for e in x]
        return x
    return [convert(x) for x in read_all(source)]


@pytest.mark.parametrize(
    "spec, args, expected",
    [
        ("t", "a b", "!a !b"),
        ("0", "a b", "a b"),
        ("nil", "a b", "a b"),
        ("(form body)", "a b c", "!a !b !c"),
        ("(symbolp form)", "a b", "a !b"),
        ("((symbolp form &optional form) body)", "(x l) y", "(x !l) !y"),
        ("((symbolp form &optional form) body)", "(x l r) y", "(x !l !r) !y"),
        ("(&rest [keywordp form])", ":k a :j b", ":k !a :j !b"),
        ("(form &optional stringp)", "a", "!a"),
        ("(form &optional stringp)", "a \"s\"", "!a \"s\""),
        ("([&optional stringp] body)", "\"doc\" a", "\"doc\" !a"),
        ("([&optional stringp] body)", "a", "!a"),
        ("(&or symbolp (symbolp form))", "x", "x"),
        ("(&or symbolp (symbolp form))", "(x y)", "(x !y)"),
        ("(symbolp \"in\" form)", "x in l", "x in !l"),
        ("(&not stringp form)", "a", "!a"),
        ("(lambda-expr)", "(lambda (x) x)", "(! (lambda (x) x))"),
        ("(gv-place form)", "(car x) y", "(! (car x)) !y"),
    ],
)
def test_grammar_positions(interpreter, spec, args, expected):
    assert run(interpreter, spec, args) == marked(expected)


@pytest.mark.parametrize(
    "spec, args",
    [
        ("(form)", ""),
        ("(form)", "a b"),
        ("(symbolp form)", "1 a"),
        ("((symbolp form))", "x"),
        ("((symbolp form))", "(x a b)"),
        ("(&or stringp numberp)", "a"),
        ("(&not stringp form)", "\"s\""),
        ("(lambda-expr)", "x"),
        ("(undefined-element)", "a"),
    ],
)
def test_grammar_mismatch(interpreter, spec, args):
    with pytest.raises(GrammarMismatch):
        run(interpreter, spec, args)


def test_classify_does_not_run_callbacks():
    seen = []
    interp = GrammarInterpreter(on_code=lambda x: seen.append(x) or x)
    plan = interp.classify(read_one("(symbolp (form) body)"), read_all("x (a) b c"))
    assert plan == [DATA, [CODE], CODE, CODE]
    assert seen == []


def test_data_callback():
    interp = GrammarInterpreter(on_code=lambda x: x, on_data=lambda x: [Symbol("quote"), x])
    assert interp.interpret(read_one("(symbolp form)"), read_all("x y")) == read_all("'x y")


def test_named_grammar_is_resolved():
    specs = {Symbol("binding-pair"): read_one("[symbolp form]")}
    interp = GrammarInterpreter(on_code=mark, resolve_spec=specs.get)
    assert interp.interpret(read_one("(binding-pair body)"), read_all("x y z")) == marked("x !y !z")


def test_top_level_named_grammar():
    specs = {Symbol("like-when"): read_one("(form body)")}
    interp = GrammarInterpreter(on_code=mark, resolve_spec=specs.get)
    assert interp.interpret(Symbol("like-when"), read_all("a b")) == marked("!a !b")


def test_self_referencing_grammar_is_bounded():
    specs = {Symbol("loop"): Symbol("loop")}
    interp = GrammarInterpreter(on_code=mark, resolve_spec=specs.get)
    with pytest.raises(GrammarMismatch):
        interp.interpret(read_one("(loop)"), read_all("a"))


def test_t_inside_sequence_is_code(interpreter):
    assert interpreter.interpret([T, Symbol("symbolp")], read_all("a b")) == marked("!a b")
