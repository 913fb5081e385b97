from __future__ import annotations
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, TYPE_CHECKING

from elnames.errors import StaleContextError

if TYPE_CHECKING:
    from elnames.rewrite.session import RewriteSession

# One active rewrite per execution context. Threads and asyncio tasks each get
# their own slot; a second rewrite inside the same context is refused.
_active_session: ContextVar[Optional["RewriteSession"]] = ContextVar(
    "_active_session", default=None
)


def get_active_session() -> Optional["RewriteSession"]:
    return _active_session.get()


@contextmanager
def session_scope(session: "RewriteSession") -> Iterator["RewriteSession"]:
    """Install `session` for the duration of the block, always releasing it."""
    current = _active_session.get()
    if current is not None:
        raise StaleContextError(
            f"A rewrite for prefix {current.context.prefix!r} is still active; "
            f"refusing to start one for {session.context.prefix!r}"
        )
    token = _active_session.set(session)
    try:
        yield session
    finally:
        _active_session.reset(token)
