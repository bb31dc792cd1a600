"""CLI entry point for discovering and running Perl subtests."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from test2_subtest_filter.config_loader import load_config
from test2_subtest_filter.discovery import collect_test_files, load_test_file
from test2_subtest_filter.executors.shell import ShellExecutor
from test2_subtest_filter.models.config import RunnerConfig
from test2_subtest_filter.orchestrator import ItemResult, TestRunOrchestrator
from test2_subtest_filter.tree import TestFile

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
    "error": "❗",
    "skipped": "⏭️",
}


def log_results_summary(
    log: logging.Logger, item_results: Sequence[ItemResult]
) -> None:
    """Log a formatted summary of test results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for item_result in item_results:
        result = item_result.result
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s: %s (%.2fs)",
            symbol,
            item_result.label,
            result.status,
            result.duration,
        )
        if result.message:
            log.info("  Message: %s", result.message)


def write_output(text: str) -> None:
    """Stream runner output to stderr, keeping stdout for the JSON summary."""
    sys.stderr.write(text)
    sys.stderr.flush()


def apply_overrides(
    config: RunnerConfig,
    base_command: str | None = None,
    extra_args: Sequence[str] | None = None,
) -> RunnerConfig:
    """Apply command line overrides on top of the loaded configuration."""
    update: dict[str, Any] = {}
    if base_command:
        update["base_command"] = base_command
    if extra_args:
        update["extra_args"] = tuple(extra_args)
    return config.model_copy(update=update) if update else config


async def load_test_files(
    paths: Sequence[Path], pattern: str
) -> Sequence[TestFile]:
    """Find and scan the test files under the given paths."""
    return [await load_test_file(path) for path in collect_test_files(paths, pattern)]


def format_discovery(test_files: Sequence[TestFile]) -> dict[str, Any]:
    """Format the test tree for JSON output."""
    files: list[dict[str, Any]] = []
    for test_file in test_files:
        files.append(
            {
                "id": test_file.id,
                "label": test_file.label,
                "path": str(test_file.path),
                "tests": [
                    {
                        "id": item.id,
                        "label": item.label,
                        "line": item.line_number,
                        "test_method": item.class_method,
                        "subtest_filter": item.filter_path,
                    }
                    for item in test_file.items
                ],
            }
        )

    return {
        "files": len(files),
        "tests": sum(len(f["tests"]) for f in files),
        "results": files,
    }


def format_output(item_results: Sequence[ItemResult]) -> dict[str, Any]:
    """Format test results for JSON output."""
    all_results = [
        {
            "id": item_result.id,
            "label": item_result.label,
            "status": item_result.result.status,
            "duration": item_result.result.duration,
            "message": item_result.result.message,
            "exit_code": item_result.result.exit_code,
        }
        for item_result in item_results
    ]

    return {
        "total": len(all_results),
        "passed": sum(1 for r in all_results if r["status"] == "passed"),
        "failed": sum(1 for r in all_results if r["status"] == "failed"),
        "errors": sum(1 for r in all_results if r["status"] == "error"),
        "skipped": sum(1 for r in all_results if r["status"] == "skipped"),
        "results": all_results,
    }


async def discover(paths: Sequence[Path], workspace: Path) -> int:
    """Print the discovered test tree and return exit code."""
    log = logging.getLogger("test2_subtest_filter")

    config = await load_config(workspace)
    test_files = await load_test_files(paths or [workspace], config.file_pattern)
    log.info("Found %d test file(s)", len(test_files))

    print(json.dumps(format_discovery(test_files), indent=2, ensure_ascii=False))
    return 0


async def run(
    paths: Sequence[Path],
    workspace: Path,
    include: Sequence[str] = (),
    base_command: str | None = None,
    extra_args: Sequence[str] = (),
) -> int:
    """Run the selected tests and return exit code."""
    log = logging.getLogger("test2_subtest_filter")

    config = apply_overrides(await load_config(workspace), base_command, extra_args)
    log.info("Using command: %s", config.command)

    test_files = await load_test_files(paths or [workspace], config.file_pattern)
    if not test_files:
        log.info("No test files found")
        print(json.dumps({"total": 0, "results": []}))
        return 0

    orchestrator = TestRunOrchestrator(
        executor=ShellExecutor(translate_newlines=config.translate_newlines),
        sink=write_output,
        config=config,
        workspace_roots=[workspace.resolve()],
    )
    item_results = await orchestrator.run_tests(test_files, include=include or None)

    log_results_summary(log, item_results)

    output = format_output(item_results)
    print(json.dumps(output, indent=2, ensure_ascii=False))

    has_failures = any(
        item_result.result.status in {"failed", "error"}
        for item_result in item_results
    )

    return 1 if has_failures else 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Discover and run Perl Test2 subtests and Test::Class methods"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    discover_parser = subparsers.add_parser("discover", help="List discovered tests")
    run_parser = subparsers.add_parser("run", help="Run tests")

    for subparser in (discover_parser, run_parser):
        subparser.add_argument(
            "paths",
            nargs="*",
            type=Path,
            help="Test files or directories (default: the workspace)",
        )
        subparser.add_argument(
            "--workspace",
            type=Path,
            default=Path.cwd(),
            help="Workspace root used as working directory and config location",
        )

    run_parser.add_argument(
        "--only",
        action="append",
        default=[],
        help="Id or label of a test or file to run (repeatable)",
    )
    run_parser.add_argument(
        "--base-command",
        default=None,
        help="Runner invocation, e.g. 'docker compose exec app prove -lv'",
    )
    run_parser.add_argument(
        "--extra-arg",
        action="append",
        default=[],
        help="Extra argument appended to the base command (repeatable)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    workspace = args.workspace.resolve()
    paths = [path.resolve() for path in args.paths]

    if args.command == "discover":
        exit_code = asyncio.run(discover(paths, workspace))
    else:
        exit_code = asyncio.run(
            run(
                paths,
                workspace,
                include=args.only,
                base_command=args.base_command,
                extra_args=args.extra_arg,
            )
        )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
