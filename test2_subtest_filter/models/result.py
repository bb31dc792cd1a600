"""Models for test execution results."""

from dataclasses import dataclass
from typing import Literal

Status = Literal["passed", "failed", "error", "skipped"]


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single test execution.

    Contains only execution outcome - the caller knows file/test context.
    """

    __test__ = False

    status: Status
    duration: float
    message: str | None = None
    exit_code: int | None = None
