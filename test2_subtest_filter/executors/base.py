"""Abstract base class for command executors."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from test2_subtest_filter.models.result import TestResult
from test2_subtest_filter.models.target import BuiltCommand

log = logging.getLogger(__name__)

OutputSink = Callable[[str], None]


class SpawnError(Exception):
    """Raised when the test process could not be started."""


@dataclass(frozen=True, kw_only=True)
class CommandExecutor(ABC):
    """Abstract base for running built test commands."""

    @abstractmethod
    async def execute(
        self,
        command: str,
        *,
        env: Mapping[str, str],
        cwd: Path,
        sink: OutputSink,
        args: Sequence[str] = (),
    ) -> int:
        """Run a command and stream its output to the sink.

        Args:
            command: Shell command to run
            env: Complete environment for the process
            cwd: Working directory for the process
            sink: Receives output chunks as they arrive
            args: Extra arguments appended to the command

        Returns:
            Exit code of the process

        Raises:
            SpawnError: If the process could not be started

        """

    async def run_command(
        self,
        built: BuiltCommand,
        cwd: Path,
        sink: OutputSink,
        env: Mapping[str, str] | None = None,
    ) -> TestResult:
        """Run a built command and report the outcome as a test result.

        Args:
            built: Command returned by the command builder
            cwd: Working directory for the process
            sink: Receives output chunks as they arrive
            env: Environment to use instead of the built command's

        Returns:
            ``passed`` on exit code 0, ``failed`` with the exit code otherwise,
            ``error`` if the process could not be started

        """
        loop = asyncio.get_running_loop()
        started = loop.time()

        try:
            exit_code = await self.execute(
                built.executable_command,
                env=built.environment if env is None else env,
                cwd=cwd,
                sink=sink,
            )
        except SpawnError as e:
            log.error("Failed to start %s: %s", built.display_command, e)
            return TestResult(
                status="error",
                duration=loop.time() - started,
                message=str(e),
            )

        duration = loop.time() - started
        if exit_code == 0:
            return TestResult(status="passed", duration=duration, exit_code=0)

        return TestResult(
            status="failed",
            duration=duration,
            message=f"Test failed with exit code {exit_code}",
            exit_code=exit_code,
        )
