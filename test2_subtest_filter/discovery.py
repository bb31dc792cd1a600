"""Locate test files and the directory to run them from."""

import asyncio
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from test2_subtest_filter.tree import TestFile, build_test_file

log = logging.getLogger(__name__)


def find_test_files(root: Path, pattern: str = "**/*.t") -> Sequence[Path]:
    """Return test files under root matching the glob pattern, sorted."""
    return sorted(path for path in root.glob(pattern) if path.is_file())


def collect_test_files(
    paths: Sequence[Path], pattern: str = "**/*.t"
) -> Sequence[Path]:
    """Expand files and directories into a deduplicated list of test files.

    Args:
        paths: Test files or directories to search
        pattern: Glob used inside directories

    Returns:
        Absolute test file paths in the order they were found

    """
    found: dict[Path, None] = {}
    for path in paths:
        if path.is_dir():
            for test_file in find_test_files(path, pattern):
                found.setdefault(test_file.resolve(), None)
        elif path.is_file():
            found.setdefault(path.resolve(), None)
        else:
            log.warning("Skipping missing path: %s", path)
    return list(found)


def resolve_working_directory(
    file_path: Path, workspace_roots: Sequence[Path]
) -> Path:
    """Return the workspace root containing file_path.

    The deepest matching root wins. Files outside every root run from their
    own directory.
    """
    containing = [
        root for root in workspace_roots if file_path.is_relative_to(root)
    ]
    if containing:
        return max(containing, key=lambda root: len(root.parts))
    return file_path.parent


def relative_test_path(file_path: Path, cwd: Path) -> str:
    """Return file_path relative to cwd, as passed to the test runner."""
    return Path(os.path.relpath(file_path, cwd)).as_posix()


async def load_test_file(file_path: Path) -> TestFile:
    """Read and scan a test file."""
    text = await asyncio.to_thread(
        file_path.read_text, encoding="utf-8", errors="replace"
    )
    test_file = build_test_file(file_path, text)
    log.debug("Found %d test(s) in %s", len(test_file.items), file_path)
    return test_file
