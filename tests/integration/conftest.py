"""Fixtures for integration tests."""

from pathlib import Path
from typing import Protocol

import pytest

CLASS_TEST = """package MyTest;
use Test::Class::Most;

sub test_method : Tests {
    subtest 'nested' => sub {
        ok 1;
    };
}

1;
"""

SUBTEST_TEST = """use Test2::V0;

subtest 'outer' => sub {
    subtest "it's inner" => sub {
        ok 1;
    };
};

done_testing;
"""

# Stand-in for prove: prints what it received and fails for filter "boom".
ECHO_RUNNER = (
    "sh -c 'echo \"method=$TEST_METHOD filter=$SUBTEST_FILTER file=$1\"; "
    "test \"$SUBTEST_FILTER\" != boom' runner"
)


class WriteTestFn(Protocol):
    """Protocol for test file creation function."""

    def __call__(self, relative_path: str, content: str) -> Path:
        """Write a test file into the workspace and return its path."""


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create an empty workspace directory."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def write_test(workspace: Path) -> WriteTestFn:
    """Return a function to create test files in the workspace."""

    def _write(relative_path: str, content: str) -> Path:
        path = workspace / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
