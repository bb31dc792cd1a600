"""Find subtests and Test::Class methods in Perl test source text.

The scanner does not parse Perl. It tracks the net brace depth line by line
and keeps a stack of the declarations whose block is still open, which is
enough because every declaration of interest opens its block on the line
where it is declared. A declaration whose block also closes on that line is
never pushed. Braces inside strings, heredocs or comments are counted
like any other brace.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from test2_subtest_filter.models.declaration import TestDeclaration

CLASS_METHOD_PATTERN = re.compile(
    r"^\s*sub\s+(\w+)\s*:\s*Tests?\b"
    r"(?!\s*\(\s*(?:setup|teardown|startup|shutdown)\b)"
)
SUBTEST_PATTERN = re.compile(
    r"""^\s*subtest\s+(?:'([^']+)'|"([^"]+)"|(\w+))\s*=>\s*sub\s*\{"""
)


@dataclass(frozen=True)
class _OpenScope:
    declaration: TestDeclaration
    depth_at_open: int


def split_lines(text: str) -> Sequence[str]:
    """Split text into lines, normalizing CRLF and CR line endings."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def match_class_method(line: str) -> str | None:
    """Return the method name if the line declares a Test::Class test method."""
    if match := CLASS_METHOD_PATTERN.match(line):
        return match.group(1)
    return None


def match_subtest(line: str) -> str | None:
    """Return the subtest name if the line opens a subtest block."""
    if match := SUBTEST_PATTERN.match(line):
        return next(group for group in match.groups() if group is not None)
    return None


def scan_declarations(text: str) -> list[TestDeclaration]:
    """Return the test declarations found in text, in source order.

    Args:
        text: Full contents of a test file

    Returns:
        Declarations annotated with the names of their enclosing declarations

    """
    declarations: list[TestDeclaration] = []
    stack: list[_OpenScope] = []
    depth = 0

    for line_number, line in enumerate(split_lines(text)):
        net = line.count("{") - line.count("}")

        if (name := match_class_method(line)) is not None:
            declaration = TestDeclaration(
                name=name, line_number=line_number, is_class_method=True
            )
            declarations.append(declaration)
            if net > 0:
                stack.append(_OpenScope(declaration, depth + net))

        if (name := match_subtest(line)) is not None:
            declaration = TestDeclaration(
                name=name,
                line_number=line_number,
                ancestor_path=tuple(scope.declaration.name for scope in stack),
            )
            declarations.append(declaration)
            if net > 0:
                stack.append(_OpenScope(declaration, depth + net))

        depth += net

        while stack and depth <= stack[-1].depth_at_open - 1:
            stack.pop()

    return declarations
