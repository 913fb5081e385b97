def test_let_binding_shadows_in_body_only(expect):
    expect(
        "(defvar bar 1) (let ((bar 2)) bar) bar",
        "(progn (defvar foo-bar 1) (let ((bar 2)) bar) foo-bar)",
    )


def test_let_initializers_use_outer_scope(expect):
    expect(
        "(defvar bar 1) (let ((bar 2) (x bar)) (list x bar))",
        "(progn (defvar foo-bar 1) (let ((bar 2) (x foo-bar)) (list x bar)))",
    )


def test_let_star_binds_sequentially(expect):
    expect(
        "(defvar bar 1) (let* ((x bar) (bar 2) (y bar)) (list x y bar))",
        "(progn (defvar foo-bar 1) (let* ((x foo-bar) (bar 2) (y bar)) (list x y bar)))",
    )


def test_bare_and_empty_bindings(expect):
    expect(
        "(defvar bar 1) (let (bar (x)) bar) (let () bar)",
        "(progn (defvar foo-bar 1) (let (bar (x)) bar) (let () foo-bar))",
    )


def test_let_vars_prefixes_bound_namespaced_names(expect):
    expect(
        "(defvar bar 1) (let ((bar 2) (x bar)) (list x bar))",
        "(progn (defvar foo-bar 1) (let ((foo-bar 2) (x foo-bar)) (list x foo-bar)))",
        let_vars=True,
    )


def test_let_vars_leaves_plain_locals(expect):
    expect(
        "(let ((x 1)) x)",
        "(progn (let ((x 1)) x))",
        let_vars=True,
    )


def test_let_vars_with_let_star(expect):
    expect(
        "(defvar bar 1) (let* ((bar 2) (y bar)) y)",
        "(progn (defvar foo-bar 1) (let* ((foo-bar 2) (y foo-bar)) y))",
        let_vars=True,
    )


def test_nested_frames_unwind(expect):
    expect(
        "(defvar bar 1) (defun f (x) (let ((bar x)) (lambda (y) (+ y bar))) bar)",
        "(progn (defvar foo-bar 1) (defun foo-f (x) (let ((bar x)) (lambda (y) (+ y bar))) foo-bar))",
    )


def test_condition_case_variable_is_local_to_handlers(expect):
    expect(
        "(defvar err 1) (defvar bar 2) "
        "(condition-case err (frob err bar) (error (message \"%s\" err)) ((quit bar) bar))",
        "(progn (defvar foo-err 1) (defvar foo-bar 2) "
        "(condition-case err (frob foo-err foo-bar) (error (message \"%s\" err)) ((quit bar) foo-bar)))",
    )


def test_condition_case_without_variable(expect):
    expect(
        "(defvar bar 1) (condition-case nil (frob bar) (error bar))",
        "(progn (defvar foo-bar 1) (condition-case nil (frob foo-bar) (error foo-bar)))",
    )


def test_cond_clauses_are_code(expect):
    expect(
        "(defvar bar 1) (defun baz () 2) (cond (bar (baz)) (t bar))",
        "(progn (defvar foo-bar 1) (defun foo-baz () 2) (cond (foo-bar (foo-baz)) (t foo-bar)))",
    )
