"""Models for command construction input and output."""

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import Field

from test2_subtest_filter.models.base import Model


class ExecutionTarget(Model):
    """A single test to run, as seen by the command builder."""

    file_path: str = Field(..., description="Absolute path of the test file")
    relative_file_path: str = Field(
        ..., description="Test file path relative to the working directory"
    )
    class_method: str | None = Field(
        default=None, description="Test::Class method, passed as TEST_METHOD"
    )
    filter_path: str | None = Field(
        default=None, description="Space-joined subtest chain, passed as SUBTEST_FILTER"
    )
    base_command: str = Field(default="prove -lv", description="Runner invocation")


@dataclass(frozen=True, kw_only=True)
class BuiltCommand:
    """Shell command ready to be executed for an execution target."""

    executable_command: str
    display_command: str
    environment: Mapping[str, str]
