"""Global names the default host environment knows about.

Only a sample of the standard library is listed. The rewriter never needs the
full set: these names matter only under `:global`, where a prefixed name that
happens to exist in the host is treated as namespaced.
"""

from elnames.types.environment import HostEnvironment

FUNCTIONS = (
    "car", "cdr", "cons", "list", "append", "nth", "nthcdr", "length", "reverse",
    "mapcar", "mapc", "mapconcat", "funcall", "apply", "identity", "ignore",
    "format", "message", "error", "user-error", "signal", "concat", "substring",
    "string-match", "match-string", "replace-regexp-in-string", "intern",
    "symbol-name", "symbol-value", "boundp", "fboundp", "eq", "equal", "memq",
    "member", "assq", "assoc", "plist-get", "plist-put", "not", "null",
    "insert", "point", "goto-char", "buffer-string", "current-buffer",
    "add-hook", "remove-hook", "run-hooks", "define-key", "make-sparse-keymap",
    "add-to-list", "provide", "require", "autoload", "set", "setcar", "setcdr",
    "1+", "1-", "+", "-", "*", "/", "=", "<", ">", "<=", ">=", "max", "min",
)

VARIABLES = (
    "load-path", "default-directory", "buffer-file-name", "major-mode",
    "emacs-version", "case-fold-search", "inhibit-read-only", "debug-on-error",
    "most-positive-fixnum", "most-negative-fixnum", "system-type",
)


def register(env: HostEnvironment) -> None:
    """Register builtin function and variable names in the provided HostEnvironment."""
    env.update(variables=VARIABLES, functions=FUNCTIONS)
