def test_minor_mode_defines_function_variable_and_companions(expect):
    expect(
        "(defvar bar 1) "
        "(define-minor-mode my-mode \"Doc.\" :lighter \" M\" :keymap bar (message \"%s\" bar)) "
        "(list my-mode my-mode-map my-mode-hook) (my-mode 1)",
        "(progn (defvar foo-bar 1) "
        "(define-minor-mode foo-my-mode \"Doc.\" :lighter \" M\" :keymap foo-bar (message \"%s\" foo-bar)) "
        "(list foo-my-mode foo-my-mode-map foo-my-mode-hook) (foo-my-mode 1))",
    )


def test_minor_mode_without_docstring(expect):
    expect(
        "(defvar bar 1) (define-minor-mode my-mode nil :global t bar)",
        "(progn (defvar foo-bar 1) (define-minor-mode foo-my-mode nil :global t foo-bar))",
    )


def test_derived_mode_companions(expect):
    expect(
        "(defvar bar 1) (define-derived-mode my-mode text-mode \"My\" (setq bar 1)) "
        "(list my-mode my-mode-map my-mode-syntax-table my-mode-abbrev-table my-mode-hook) (my-mode)",
        "(progn (defvar foo-bar 1) (define-derived-mode foo-my-mode text-mode \"My\" (setq foo-bar 1)) "
        "(list my-mode foo-my-mode-map foo-my-mode-syntax-table foo-my-mode-abbrev-table foo-my-mode-hook) "
        "(foo-my-mode))",
    )


def test_derived_mode_parent_in_namespace(expect):
    expect(
        "(define-derived-mode child-mode parent-mode \"C\") (define-derived-mode parent-mode prog-mode \"P\")",
        "(progn (define-derived-mode foo-child-mode foo-parent-mode \"C\") "
        "(define-derived-mode foo-parent-mode prog-mode \"P\"))",
    )


def test_globalized_minor_mode(expect):
    expect(
        "(define-minor-mode my-mode \"D\") (defun turn-on () (my-mode 1)) "
        "(define-globalized-minor-mode global-my-mode my-mode turn-on) global-my-mode-hook",
        "(progn (define-minor-mode foo-my-mode \"D\") (defun foo-turn-on () (foo-my-mode 1)) "
        "(define-globalized-minor-mode foo-global-my-mode foo-my-mode foo-turn-on) foo-global-my-mode-hook)",
    )


def test_protected_mode_name(expect):
    expect(
        "(define-minor-mode ::plain-mode \"D\") plain-mode-map",
        "(progn (define-minor-mode plain-mode \"D\") plain-mode-map)",
    )
