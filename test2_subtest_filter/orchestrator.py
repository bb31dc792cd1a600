"""Test orchestrator running discovered tests one at a time."""

import asyncio
import logging
from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from test2_subtest_filter.command_builder import build_test_command
from test2_subtest_filter.discovery import relative_test_path, resolve_working_directory
from test2_subtest_filter.executors.base import CommandExecutor, OutputSink
from test2_subtest_filter.models.config import RunnerConfig
from test2_subtest_filter.models.result import TestResult
from test2_subtest_filter.tree import TestFile, TestItem

log = logging.getLogger(__name__)

COLOR_ENV: Mapping[str, str] = {
    "FORCE_COLOR": "1",
    "CLICOLOR_FORCE": "1",
    "CURE_COLOR": "1",
}


@dataclass(frozen=True, kw_only=True)
class ItemResult:
    """Result container for a test item or file."""

    id: str
    label: str
    result: TestResult


@dataclass(frozen=True, kw_only=True)
class TestRunOrchestrator:
    """Runs test items sequentially with a single executor."""

    __test__ = False

    executor: CommandExecutor
    sink: OutputSink
    config: RunnerConfig = field(default_factory=RunnerConfig)
    workspace_roots: Sequence[Path] = ()

    async def run_tests(
        self,
        test_files: Sequence[TestFile],
        include: Collection[str] | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> Sequence[ItemResult]:
        """Run the requested tests and return one result per test.

        Args:
            test_files: Scanned test files
            include: Ids or labels of files and tests to run (None runs all)
            cancel_event: When set, tests not yet started are skipped

        Returns:
            Results in execution order

        """
        queue = self._build_queue(test_files, include)
        if not queue:
            log.info("No tests selected")
            return []

        log.info("Running %d test(s)...", len(queue))
        results: list[ItemResult] = []

        for entry in queue:
            if cancel_event is not None and cancel_event.is_set():
                results.append(self._skipped(entry, "Run cancelled"))
                continue

            if isinstance(entry, TestFile):
                results.append(self._skipped(entry, "No tests found"))
                continue

            try:
                result = await self._run_item(entry)
            except Exception as e:
                log.error("Test execution failed: %s", e, exc_info=e)
                result = TestResult(status="error", duration=0.0, message=str(e))

            log.info(
                "Test completed: test=%s status=%s duration=%.1fs",
                entry.label,
                result.status,
                result.duration,
            )
            results.append(ItemResult(id=entry.id, label=entry.label, result=result))

        log.info("Test execution completed")
        return results

    def _build_queue(
        self,
        test_files: Sequence[TestFile],
        include: Collection[str] | None,
    ) -> Sequence[TestItem | TestFile]:
        """Expand requested files into their tests.

        Files without tests stay in the queue so they are reported as skipped.
        """
        queue: list[TestItem | TestFile] = []
        for test_file in test_files:
            keys = {test_file.id, test_file.label, str(test_file.path)}
            if include is None or keys & set(include):
                queue.extend(test_file.items or [test_file])
                continue
            queue.extend(
                item
                for item in test_file.items
                if item.id in include or item.label in include
            )
        return queue

    async def _run_item(self, item: TestItem) -> TestResult:
        cwd = resolve_working_directory(item.file_path, self.workspace_roots)
        relative_path = relative_test_path(item.file_path, cwd)
        built = build_test_command(item.to_target(relative_path, self.config.command))

        env = dict(built.environment)
        if self.config.force_color:
            env.update(COLOR_ENV)

        log.info("Running %s", item.label)
        log.info("Working directory: %s", cwd)
        self._emit(f"> {built.display_command}\n\n")

        result = await self.executor.run_command(built, cwd, self.sink, env=env)

        if result.status == "error":
            self._emit(f"\n{'=' * 80}\nError: {result.message}\n")
        return result

    def _emit(self, text: str) -> None:
        if self.config.translate_newlines:
            text = text.replace("\n", "\r\n")
        self.sink(text)

    @staticmethod
    def _skipped(entry: TestItem | TestFile, message: str) -> ItemResult:
        return ItemResult(
            id=entry.id,
            label=entry.label,
            result=TestResult(status="skipped", duration=0.0, message=message),
        )
