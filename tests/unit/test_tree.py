"""Tests for the test tree."""

from pathlib import Path

from test2_subtest_filter.models.declaration import TestDeclaration
from test2_subtest_filter.testing.factories import TestDeclarationFactory
from test2_subtest_filter.tree import build_test_file, build_test_items, resolve_filters

FILE_PATH = Path("/work/t/test.t")

CLASS_TEXT = """
package MyTest;
use Test::Class::Most;

sub test_method : Tests {
    subtest 'nested' => sub {
        subtest 'deeper' => sub {
            ok 1;
        };
    };
}

1;
"""


class TestBuildTestFile:
    """Tests for build_test_file."""

    def test_builds_file_entry(self) -> None:
        """File entry uses the file path for its id and basename as label."""
        test_file = build_test_file(FILE_PATH, CLASS_TEXT)

        assert test_file.id == "file:/work/t/test.t"
        assert test_file.label == "test.t"
        assert test_file.path == FILE_PATH

    def test_builds_items_for_class_method_and_subtests(self) -> None:
        """Subtests inside a class method run the method with a filter."""
        test_file = build_test_file(FILE_PATH, CLASS_TEXT)

        assert [
            (item.label, item.line_number, item.class_method, item.filter_path)
            for item in test_file.items
        ] == [
            ("test_method", 4, "test_method", None),
            ("test_method nested", 5, "test_method", "nested"),
            ("test_method nested deeper", 6, "test_method", "nested deeper"),
        ]
        assert test_file.items[1].id == "test:/work/t/test.t:test_method nested"

    def test_builds_items_for_plain_subtests(self) -> None:
        """Plain subtests only use SUBTEST_FILTER."""
        text = """
subtest 'outer' => sub {
    subtest 'inner' => sub {
        ok 1;
    };
};
"""
        test_file = build_test_file(FILE_PATH, text)

        assert [(i.class_method, i.filter_path) for i in test_file.items] == [
            (None, "outer"),
            (None, "outer inner"),
        ]

    def test_file_without_tests_has_no_items(self) -> None:
        """A file with no declarations has an empty item list."""
        test_file = build_test_file(FILE_PATH, "ok 1;\ndone_testing;\n")

        assert test_file.items == []


class TestResolveFilters:
    """Tests for resolve_filters."""

    def test_class_method(self) -> None:
        """Class methods only set the method."""
        declaration = TestDeclarationFactory.build(name="test_x", is_class_method=True)

        assert resolve_filters(declaration, {"test_x"}) == ("test_x", None)

    def test_top_level_subtest(self) -> None:
        """Top-level subtests filter on their own name."""
        declaration = TestDeclarationFactory.build(name="alone")

        assert resolve_filters(declaration, set()) == (None, "alone")

    def test_ancestor_not_a_class_method(self) -> None:
        """Nested subtests outside class methods filter on the whole chain."""
        declaration = TestDeclaration(
            name="leaf", line_number=3, ancestor_path=("root", "mid")
        )

        assert resolve_filters(declaration, {"test_other"}) == (None, "root mid leaf")

    def test_ancestor_is_class_method(self) -> None:
        """The method name is stripped from the filter chain."""
        declaration = TestDeclaration(
            name="leaf", line_number=3, ancestor_path=("test_m", "mid")
        )

        assert resolve_filters(declaration, {"test_m"}) == ("test_m", "mid leaf")


def test_item_to_target() -> None:
    """Items produce execution targets carrying their filters."""
    declarations = [
        TestDeclaration(name="test_m", line_number=0, is_class_method=True),
        TestDeclaration(name="nested", line_number=1, ancestor_path=("test_m",)),
    ]
    item = build_test_items(FILE_PATH, declarations)[1]

    target = item.to_target("t/test.t", "prove -lv")

    assert target.file_path == "/work/t/test.t"
    assert target.relative_file_path == "t/test.t"
    assert target.class_method == "test_m"
    assert target.filter_path == "nested"
    assert target.base_command == "prove -lv"
