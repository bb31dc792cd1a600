"""Command executors."""

from test2_subtest_filter.executors.base import CommandExecutor, OutputSink, SpawnError
from test2_subtest_filter.executors.shell import ShellExecutor

__all__ = ["CommandExecutor", "OutputSink", "ShellExecutor", "SpawnError"]
