import pytest

from elnames.printer import to_source
from elnames.reader.parser import read_all, read_one
from elnames.rewrite.driver import rewrite
from elnames.types.environment import HostEnvironment


@pytest.fixture
def host():
    """Return a fresh default host environment for each test."""
    return HostEnvironment.default()


@pytest.fixture
def namespaced(host):
    """Rewrite `source` under `prefix` and return the printed (progn ...) form."""
    def run(source, prefix="foo-", **options):
        return to_source(rewrite(prefix, options or None, read_all(source), host))
    return run


@pytest.fixture
def expect(namespaced):
    """Assert that `source` rewrites to `expected`; both are compared in printed form."""
    def check(source, expected, prefix="foo-", **options):
        assert namespaced(source, prefix, **options) == to_source(read_one(expected))
    return check
