import warnings

import pytest

from elnames.reader.parser import read_all, read_one
from elnames.rewrite.driver import rewrite
from elnames.rewrite.handlers.pcase_forms import pattern_names
from elnames.types.symbol import Symbol


@pytest.fixture
def quiet_expect(expect):
    """`expect` that also fails on any warning."""
    def check(source, expected, **options):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            expect(source, expected, **options)
    return check


# ---------------- case keys ----------------

@pytest.mark.parametrize("head", ["cl-case", "cl-ecase", "cl-typecase"])
def test_case_keys_are_data(quiet_expect, head):
    quiet_expect(
        f"(defvar b 1) ({head} x ((a b) 1) (b b) (t b))",
        f"(progn (defvar foo-b 1) ({head} x ((a b) 1) (b foo-b) (t foo-b)))",
    )


# ---------------- pcase ----------------

def test_pcase_patterns_are_data(quiet_expect):
    quiet_expect(
        "(defvar b 1) (defvar y 2) (pcase b ((pred b) y) (`(,b ,_) b) (_ b))",
        "(progn (defvar foo-b 1) (defvar foo-y 2) (pcase foo-b ((pred b) foo-y) (`(,b ,_) b) (_ foo-b)))",
    )


def test_pcase_let_binds_pattern_names(quiet_expect):
    quiet_expect(
        "(defvar a 1) (defvar c 2) (pcase-let ((`(,a . ,b) (f a))) (list a b c))",
        "(progn (defvar foo-a 1) (defvar foo-c 2) (pcase-let ((`(,a . ,b) (f foo-a))) (list a b foo-c)))",
    )


def test_pcase_let_star_is_sequential(quiet_expect):
    quiet_expect(
        "(defvar a 1) (pcase-let* ((`(,a) (f)) (b a)) b)",
        "(progn (defvar foo-a 1) (pcase-let* ((`(,a) (f)) (b a)) b))",
    )


def test_pcase_dolist(quiet_expect):
    quiet_expect(
        "(defvar k 1) (defvar l nil) (pcase-dolist (`(,k . ,v) l) (message k v))",
        "(progn (defvar foo-k 1) (defvar foo-l nil) (pcase-dolist (`(,k . ,v) foo-l) (message k v)))",
    )


@pytest.mark.parametrize(
    "pattern, names",
    [
        ("x", ["x"]),
        ("_", []),
        ("(pred b)", []),
        ("(guard (> x b))", []),
        ("'(a b)", []),
        ("`(a ,b (,c . ,d))", ["b", "c", "d"]),
        ("(and x (pred numberp))", ["x"]),
        ("(or `(,y) (app car y))", ["y", "y"]),
        ("(let z (f w))", ["z"]),
        ("(map :k v)", ["v"]),
    ],
)
def test_pattern_names(pattern, names):
    assert pattern_names(read_one(pattern)) == [Symbol(n) for n in names]


# ---------------- conditional binding ----------------

def test_when_let_binds_sequentially(quiet_expect):
    quiet_expect(
        "(defvar x 1) (defvar y 2) (when-let ((x (f y)) (z x)) (list x y z))",
        "(progn (defvar foo-x 1) (defvar foo-y 2) (when-let ((x (f foo-y)) (z x)) (list x foo-y z)))",
    )


def test_if_let_single_binding(quiet_expect):
    quiet_expect(
        "(defvar x 1) (if-let (v (get x)) v x)",
        "(progn (defvar foo-x 1) (if-let (v (get foo-x)) v foo-x))",
    )


def test_if_let_star_bare_symbols_are_tests(quiet_expect):
    quiet_expect(
        "(defvar x 1) (if-let* (x ((g)) (y (h))) y 0)",
        "(progn (defvar foo-x 1) (if-let* (foo-x ((g)) (y (h))) y 0))",
    )


# ---------------- local functions ----------------

def test_cl_flet_names_shadow_the_body(quiet_expect):
    quiet_expect(
        "(defun helper () 1) (defvar x 1) (cl-flet ((helper (a) (+ a x (helper)))) (helper x))",
        "(progn (defun foo-helper () 1) (defvar foo-x 1) "
        "(cl-flet ((helper (a) (+ a foo-x (foo-helper)))) (helper foo-x)))",
    )


def test_cl_labels_names_shadow_definitions(quiet_expect):
    quiet_expect(
        "(defun helper () 1) (cl-labels ((helper (n) (if (< n 1) n (helper (1- n))))) (helper 3))",
        "(progn (defun foo-helper () 1) (cl-labels ((helper (n) (if (< n 1) n (helper (1- n))))) (helper 3)))",
    )


def test_cl_flet_expression_binding(quiet_expect):
    quiet_expect(
        "(defun helper () 1) (cl-flet ((g #'helper)) (g))",
        "(progn (defun foo-helper () 1) (cl-flet ((g #'foo-helper)) (g)))",
    )


def test_cl_destructuring_bind(quiet_expect):
    quiet_expect(
        "(defvar a 1) (defvar b 2) (cl-destructuring-bind (a &optional (c b)) (list b) (list a c b))",
        "(progn (defvar foo-a 1) (defvar foo-b 2) "
        "(cl-destructuring-bind (a &optional (c foo-b)) (list foo-b) (list a c foo-b)))",
    )


# ---------------- loops and places ----------------

def test_dolist_variable_is_local(quiet_expect):
    quiet_expect(
        "(defvar x 1) (dolist (x (list x) x) (frob x)) (dotimes (i x) (frob i x))",
        "(progn (defvar foo-x 1) (dolist (x (list foo-x) x) (frob x)) (dotimes (i foo-x) (frob i foo-x)))",
    )


def test_cl_letf_places_are_code(quiet_expect):
    quiet_expect(
        "(defvar x 1) (cl-letf (((symbol-function 'f) #'ignore) (x 2)) x)",
        "(progn (defvar foo-x 1) (cl-letf (((symbol-function 'f) #'ignore) (foo-x 2)) foo-x))",
    )


def test_cl_loop_is_left_alone(quiet_expect):
    quiet_expect(
        "(defvar x 1) (cl-loop for x in l collect x)",
        "(progn (defvar foo-x 1) (cl-loop for x in l collect x))",
    )


def test_standard_macros_are_known_to_the_host(host):
    for name in ("cl-case", "pcase", "when-let", "if-let", "pcase-let", "cl-flet",
                 "cl-labels", "cl-letf", "cl-loop", "cl-destructuring-bind"):
        assert host.is_macro(Symbol(name)), name


def test_malformed_binding_macro_falls_back_to_grammar(host):
    out = rewrite("foo-", None, read_all("(defvar x 1) (cl-flet x (f x))"), host)
    assert out[-1] == read_one("(cl-flet x (f foo-x))")
