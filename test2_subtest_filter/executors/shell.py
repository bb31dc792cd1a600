"""Executor running commands through the system shell."""

import asyncio
import codecs
import contextlib
import logging
import os
import signal
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from test2_subtest_filter.executors.base import CommandExecutor, OutputSink, SpawnError

log = logging.getLogger(__name__)

CHUNK_SIZE = 4096


@dataclass(frozen=True, kw_only=True)
class ShellExecutor(CommandExecutor):
    """Runs commands with ``asyncio.create_subprocess_shell``."""

    translate_newlines: bool = False

    async def execute(
        self,
        command: str,
        *,
        env: Mapping[str, str],
        cwd: Path,
        sink: OutputSink,
        args: Sequence[str] = (),
    ) -> int:
        """Run the command, stream stdout and stderr, and return the exit code.

        Output is drained until both streams are closed before waiting for the
        process, so nothing written just before exit is lost. A process killed
        by a signal reports exit code 0. If handling the output fails or the
        call is cancelled, the whole process group is killed before the error
        propagates.
        """
        full_command = " ".join([command, *args])
        log.debug("Running %s in %s", full_command, cwd)

        try:
            process = await asyncio.create_subprocess_shell(
                full_command,
                cwd=cwd,
                env=dict(env),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            raise SpawnError(str(e)) from e

        if process.stdout is None or process.stderr is None:
            raise SpawnError("Process started without output pipes")

        try:
            await asyncio.gather(
                self._pump(process.stdout, sink),
                self._pump(process.stderr, sink),
            )
            returncode = await process.wait()
        except BaseException:
            log.warning("Killing process group %s", process.pid)
            with contextlib.suppress(ProcessLookupError):
                os.killpg(process.pid, signal.SIGKILL)
            await process.wait()
            raise

        if returncode is None or returncode < 0:
            log.info("Process ended without an exit code (%s)", returncode)
            return 0
        return returncode

    async def _pump(self, stream: asyncio.StreamReader, sink: OutputSink) -> None:
        """Forward decoded chunks from a stream to the sink until EOF."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while chunk := await stream.read(CHUNK_SIZE):
            if text := decoder.decode(chunk):
                sink(self._translate(text))
        if tail := decoder.decode(b"", final=True):
            sink(self._translate(tail))

    def _translate(self, text: str) -> str:
        if self.translate_newlines:
            return text.replace("\n", "\r\n")
        return text
