"""Handle over a spawned pipeline."""

from __future__ import annotations

import logging
import subprocess
import threading
from dataclasses import dataclass
from typing import BinaryIO, Iterable, List, Optional

from .exceptions import PipelineConsumed, StreamNotPiped
from .forwarding import close_quietly
from .models import Command, StageResult, Status, Stdio

logger = logging.getLogger(__name__)


@dataclass
class SpawnedStage:
    """A running stage: its spec and its process."""

    index: int
    command: Command
    process: subprocess.Popen


class Handle:
    """Live processes of a spawned pipeline, in spawn order.

    Every inter-stage pipe end has already been handed to its child by the
    time a Handle exists. The only pipe ends it may still hold are the
    caller-facing ones: stage 0's stdin and the last stage's output, when
    they were spawned as ``Stdio.PIPED``.

    ``wait()`` consumes the handle.
    """

    def __init__(
        self,
        stages: Iterable[SpawnedStage],
        *,
        stdin_tag: Stdio = Stdio.INHERIT,
        stdout_tag: Stdio = Stdio.INHERIT,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        threads: Iterable[threading.Thread] = (),
    ):
        self._stages: List[SpawnedStage] = list(stages)
        self._stdin_tag = stdin_tag
        self._stdout_tag = stdout_tag
        self._stdin = stdin
        self._stdout = stdout
        self._threads = list(threads)
        self._waited = False

    def __len__(self) -> int:
        return len(self._stages)

    @property
    def pids(self) -> List[int]:
        return [stage.process.pid for stage in self._stages]

    @property
    def commands(self) -> List[Command]:
        return [stage.command for stage in self._stages]

    def take_stdin(self) -> Optional[BinaryIO]:
        """Hand over the write end of stage 0's stdin.

        Closing it signals EOF to the pipeline.

        Returns:
            The pipe, or None if it was already taken

        Raises:
            StreamNotPiped: stdin was not spawned as ``Stdio.PIPED``
        """
        if self._stdin_tag is not Stdio.PIPED:
            raise StreamNotPiped("stdin of the first stage is not piped")
        stdin, self._stdin = self._stdin, None
        return stdin

    def take_stdout(self) -> Optional[BinaryIO]:
        """Hand over the read end carrying the last stage's captured output.

        Returns:
            The pipe, or None if it was already taken

        Raises:
            StreamNotPiped: output was not spawned as ``Stdio.PIPED``
        """
        if self._stdout_tag is not Stdio.PIPED:
            raise StreamNotPiped("output of the last stage is not piped")
        stdout, self._stdout = self._stdout, None
        return stdout

    def wait(self) -> Status:
        """Wait on every stage in spawn order and return the Status.

        Caller-facing pipe ends that were never taken are closed first, so
        the first stage sees EOF and the last stage is not left blocked on
        a full pipe. Forwarding threads are joined after the processes exit.

        Raises:
            PipelineConsumed: The handle was already waited on
        """
        if self._waited:
            raise PipelineConsumed("Pipeline handle has already been waited on")
        self._waited = True

        close_quietly(self._stdin)
        close_quietly(self._stdout)
        self._stdin = self._stdout = None

        results = []
        for stage in self._stages:
            returncode = stage.process.wait()
            logger.debug(
                "stage %d (%s) pid=%d exited with %d",
                stage.index,
                stage.command.program,
                stage.process.pid,
                returncode,
            )
            results.append(
                StageResult(
                    index=stage.index,
                    program=stage.command.program,
                    returncode=returncode,
                )
            )

        for thread in self._threads:
            thread.join()

        return Status(stages=results)


__all__ = ["Handle", "SpawnedStage"]
