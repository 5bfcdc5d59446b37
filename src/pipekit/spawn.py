"""Pipeline orchestration: turn a Pipeline into wired, running processes.

Stages are spawned strictly left to right because stage ``i + 1`` reads
from the pipe created while spawning stage ``i``. Pipe ownership moves
exactly once:

- the edge leaving stage ``i`` is a Popen pipe on the stream(s) its
  ``PipeMode`` selects; ``BOTH`` points stderr at the same write end
  (``subprocess.STDOUT`` duplicates it in the child)
- the parent passes the read end to stage ``i + 1`` as stdin, then closes
  its own copy so stage ``i`` gets SIGPIPE if stage ``i + 1`` exits early
- external input is copied into stage 0 by a feeder thread started right
  after stage 0 spawns, concurrently with the remaining spawns
"""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import TYPE_CHECKING, BinaryIO, List, Optional, Tuple

from .exceptions import SpawnFailure
from .forwarding import close_quietly, drain, feed, start_thread
from .handle import Handle, SpawnedStage
from .models import PipeMode, Status, Stdio
from .process_utils import popen_command

if TYPE_CHECKING:
    from .pipeline import Pipeline

logger = logging.getLogger(__name__)

StreamArg = Optional[int]


def _output_streams(mode: Optional[PipeMode]) -> Tuple[StreamArg, StreamArg]:
    """Popen stdout/stderr arguments for the stream(s) a mode selects."""
    if mode is None:
        return None, None
    if mode is PipeMode.STDOUT:
        return subprocess.PIPE, None
    if mode is PipeMode.STDERR:
        return None, subprocess.PIPE
    return subprocess.PIPE, subprocess.STDOUT


def _take_reader(
    process: subprocess.Popen, mode: PipeMode
) -> Optional[BinaryIO]:
    """Detach the read end selected by ``mode`` from ``process``."""
    if mode is PipeMode.STDERR:
        reader, process.stderr = process.stderr, None
    else:
        reader, process.stdout = process.stdout, None
    return reader


def _abort(
    spawned: List[SpawnedStage], threads: List[threading.Thread]
) -> Status:
    """Collect the stages spawned before a failure."""
    if spawned:
        # Stage 0 must see EOF if its stdin was being held for the caller
        first = spawned[0].process
        close_quietly(first.stdin)
        first.stdin = None
    return Handle(spawned, threads=threads).wait()


def check_streams(
    pipeline: "Pipeline",
    *,
    stdin: Stdio = Stdio.INHERIT,
    stdout: Stdio = Stdio.INHERIT,
    sink: Optional[BinaryIO] = None,
) -> None:
    """Reject stream options that conflict with each other or the input.

    Raises:
        ValueError: Conflicting stream options
    """
    if stdin is Stdio.PIPED and pipeline.input_source is not None:
        raise ValueError("stdin cannot be piped when input is attached")
    if sink is not None and stdout is Stdio.PIPED:
        raise ValueError("output cannot be both piped and sent to a sink")


def spawn_pipeline(
    pipeline: "Pipeline",
    *,
    stdin: Stdio = Stdio.INHERIT,
    stdout: Stdio = Stdio.INHERIT,
    sink: Optional[BinaryIO] = None,
) -> Handle:
    """Spawn every stage of ``pipeline`` and return a Handle.

    Args:
        pipeline: Pipeline to spawn (consumed by the caller)
        stdin: ``Stdio.PIPED`` hands stage 0's stdin to the caller via
            ``Handle.take_stdin``; not allowed when input is attached
        stdout: ``Stdio.PIPED`` captures the last stage's stream(s) chosen
            by the pipeline's capture mode, for ``Handle.take_stdout``
        sink: Capture the same stream(s) into ``sink`` on a background
            thread instead

    Returns:
        Handle over the running stages

    Raises:
        SpawnFailure: A stage could not be started. Stages spawned before it
            have been waited on; their results are in ``failure.status``
        ValueError: Conflicting stream options
    """
    check_streams(pipeline, stdin=stdin, stdout=stdout, sink=sink)

    source = pipeline.input_source
    capture = stdout is Stdio.PIPED or sink is not None
    commands = pipeline.stages
    last = len(commands) - 1

    pipeline.notify()

    spawned: List[SpawnedStage] = []
    threads: List[threading.Thread] = []
    upstream: Optional[BinaryIO] = None

    for index, command in enumerate(commands):
        if index == 0:
            piped = source is not None or stdin is Stdio.PIPED
            stage_stdin = subprocess.PIPE if piped else None
        else:
            stage_stdin = upstream

        if index < last:
            mode: Optional[PipeMode] = pipeline.edges[index]
        else:
            mode = pipeline.capture_mode if capture else None
        stage_stdout, stage_stderr = _output_streams(mode)

        try:
            process = popen_command(
                command,
                stdin=stage_stdin,
                stdout=stage_stdout,
                stderr=stage_stderr,
            )
        except Exception as exc:
            close_quietly(upstream)
            status = _abort(spawned, threads)
            if isinstance(exc, OSError):
                logger.debug("stage %d (%s) failed to spawn: %s", index, command.program, exc)
                raise SpawnFailure(index, command.program, exc, status) from exc
            raise

        # The child holds its own copy of the read end now
        close_quietly(upstream)
        upstream = None

        spawned.append(SpawnedStage(index, command, process))
        logger.debug("spawned stage %d (%s) pid=%d", index, command.program, process.pid)

        if index == 0 and source is not None:
            threads.append(
                start_thread(feed, source, process.stdin, name="pipekit-stdin")
            )
            process.stdin = None

        if index < last:
            upstream = _take_reader(process, pipeline.edges[index])

    first, final = spawned[0].process, spawned[-1].process

    handle_stdin = None
    if stdin is Stdio.PIPED:
        handle_stdin, first.stdin = first.stdin, None

    reader = _take_reader(final, pipeline.capture_mode) if capture else None
    if sink is not None:
        threads.append(start_thread(drain, reader, sink, name="pipekit-stdout"))
        reader = None

    return Handle(
        spawned,
        stdin_tag=stdin,
        stdout_tag=stdout,
        stdin=handle_stdin,
        stdout=reader,
        threads=threads,
    )


__all__ = ["check_streams", "spawn_pipeline"]
