"""Models for test declarations found by the scanner."""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class TestDeclaration:
    """A subtest or Test::Class method found in a test file.

    ``ancestor_path`` holds the names of the enclosing declarations, outermost
    first. Class methods are never nested, so theirs is always empty.
    """

    __test__ = False

    name: str
    line_number: int
    ancestor_path: tuple[str, ...] = ()
    is_class_method: bool = False

    @property
    def full_path(self) -> tuple[str, ...]:
        """Ancestor names followed by this declaration's name."""
        return (*self.ancestor_path, self.name)

    @property
    def display_path(self) -> str:
        """Space-joined full path, as used for labels and filters."""
        return " ".join(self.full_path)
