"""Build the file/test tree presented to users from scanned declarations."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from test2_subtest_filter.models.declaration import TestDeclaration
from test2_subtest_filter.models.target import ExecutionTarget
from test2_subtest_filter.scanner import scan_declarations


@dataclass(frozen=True, kw_only=True)
class TestItem:
    """A runnable test within a file."""

    __test__ = False

    id: str
    label: str
    file_path: Path
    line_number: int
    class_method: str | None = None
    filter_path: str | None = None

    def to_target(self, relative_file_path: str, base_command: str) -> ExecutionTarget:
        """Create the execution target for running this test."""
        return ExecutionTarget(
            file_path=str(self.file_path),
            relative_file_path=relative_file_path,
            class_method=self.class_method,
            filter_path=self.filter_path,
            base_command=base_command,
        )


@dataclass(frozen=True, kw_only=True)
class TestFile:
    """A test file and the tests declared in it."""

    __test__ = False

    id: str
    label: str
    path: Path
    items: Sequence[TestItem] = field(default_factory=tuple)


def file_id(file_path: Path) -> str:
    return f"file:{file_path}"


def item_id(file_path: Path, display_path: str) -> str:
    return f"test:{file_path}:{display_path}"


def resolve_filters(
    declaration: TestDeclaration, class_methods: set[str]
) -> tuple[str | None, str | None]:
    """Map a declaration to its (TEST_METHOD, SUBTEST_FILTER) pair.

    A subtest nested in a Test::Class method is selected by running the
    method and filtering on the rest of the chain.
    """
    if declaration.is_class_method:
        return declaration.name, None

    if not declaration.ancestor_path:
        return None, declaration.name

    outermost = declaration.ancestor_path[0]
    if outermost in class_methods:
        return outermost, " ".join(declaration.full_path[1:])

    return None, declaration.display_path


def build_test_items(
    file_path: Path, declarations: Sequence[TestDeclaration]
) -> Sequence[TestItem]:
    """Create one test item per declaration, in source order."""
    class_methods = {d.name for d in declarations if d.is_class_method}

    items: list[TestItem] = []
    for declaration in declarations:
        class_method, filter_path = resolve_filters(declaration, class_methods)
        items.append(
            TestItem(
                id=item_id(file_path, declaration.display_path),
                label=declaration.display_path,
                file_path=file_path,
                line_number=declaration.line_number,
                class_method=class_method,
                filter_path=filter_path,
            )
        )
    return items


def build_test_file(file_path: Path, text: str) -> TestFile:
    """Scan a test file's text and build its tree entry."""
    return TestFile(
        id=file_id(file_path),
        label=file_path.name,
        path=file_path,
        items=build_test_items(file_path, scan_declarations(text)),
    )
