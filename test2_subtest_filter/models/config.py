"""Configuration for discovering and running tests."""

from collections.abc import Sequence

from pydantic import Field

from test2_subtest_filter.models.base import Model


class RunnerConfig(Model):
    """Runner configuration loaded from the workspace config file."""

    base_command: str = Field(default="prove -lv", description="Runner invocation")
    extra_args: Sequence[str] = Field(
        default_factory=tuple,
        description="Extra arguments appended to the base command",
    )
    file_pattern: str = Field(default="**/*.t", description="Test file glob")
    force_color: bool = Field(
        default=True, description="Ask the runner for coloured output"
    )
    translate_newlines: bool = Field(
        default=False, description="Translate LF to CRLF in streamed output"
    )

    @property
    def command(self) -> str:
        """Base command with any extra arguments appended."""
        return " ".join([self.base_command, *self.extra_args])
