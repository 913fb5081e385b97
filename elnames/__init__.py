# Core type aliases for the elnames data model.
# Plain Python values represent both code and data (int, float, str, list,
# tuple-for-dotted-lists, Vector). There is no explicit Cons type.
#
# Naming guidance:
# - SExpression: a tree node read from source or produced by a rewrite.
# - Tree: the same thing, used where a whole rewritten block is meant.

from typing import Any, Callable

SExpression = Any
Tree = SExpression

# Callback run by the grammar interpreter on one argument position
PositionFn = Callable[[SExpression], SExpression]

__version__ = "0.4.0"
