"""Pipeline construction and execution.

A Pipeline is an ordered list of stages with one ``PipeMode`` per edge:

    Command("ls") --STDOUT--> Command("sort") --BOTH--> Command("wc", "-l")

built with chained calls and consumed when spawned.
"""

from __future__ import annotations

import io
from typing import BinaryIO, Callable, Iterable, Iterator, List, Optional, Tuple

import click

from . import context
from .echo import echo_pipeline, render_pipeline
from .exceptions import PipelineConsumed
from .forwarding import InputSource, copy_out
from .handle import Handle
from .models import Command, PipelinePlan, PipeMode, Status, Stdio
from .spawn import check_streams, spawn_pipeline

Observer = Callable[["Pipeline", bool], None]


class Pipeline:
    """Stages, edge modes, optional input and the observer to notify.

    Example:
        >>> text = (
        ...     Pipeline(Command("echo").arg("hello world"))
        ...     .pipe(Command("tr").args(["[:lower:]", "[:upper:]"]))
        ...     .output()
        ... )
        >>> text
        'HELLO WORLD\\n'
    """

    def __init__(self, first: Command, *, observer: Optional[Observer] = None):
        self.stages: List[Command] = [first]
        self.edges: List[PipeMode] = []
        self.input_source: Optional[InputSource] = None
        self.capture_mode: PipeMode = PipeMode.STDOUT
        self.quiet = False
        self.observer: Observer = observer or echo_pipeline
        self._consumed = False

    def __len__(self) -> int:
        return len(self.stages)

    def __repr__(self) -> str:
        return f"Pipeline({self.display()!r})"

    def connections(self) -> Iterator[Tuple[Command, Optional[PipeMode]]]:
        """Yield each stage with the mode of the edge entering it."""
        for index, command in enumerate(self.stages):
            yield command, self.edges[index - 1] if index else None

    # Builder

    def _append(self, command: Command, mode: PipeMode) -> "Pipeline":
        self.stages.append(command)
        self.edges.append(mode)
        return self

    def pipe(self, command: Command) -> "Pipeline":
        """Append ``command``, fed by the previous stage's stdout."""
        return self._append(command, PipeMode.STDOUT)

    def pipe_stderr(self, command: Command) -> "Pipeline":
        """Append ``command``, fed by the previous stage's stderr."""
        return self._append(command, PipeMode.STDERR)

    def pipe_both(self, command: Command) -> "Pipeline":
        """Append ``command``, fed by the previous stage's stdout and stderr."""
        return self._append(command, PipeMode.BOTH)

    def input(self, text: str) -> "Pipeline":
        """Feed UTF-8 encoded ``text`` to the first stage."""
        return self.input_bytes(text.encode("utf-8"))

    def input_bytes(self, data: bytes | bytearray | memoryview) -> "Pipeline":
        """Feed an owned buffer to the first stage in one write."""
        self.input_source = bytes(data)
        return self

    def input_reader(self, reader: BinaryIO) -> "Pipeline":
        """Stream a binary reader into the first stage until EOF."""
        self.input_source = reader
        return self

    def input_chunks(self, chunks: Iterable[bytes]) -> "Pipeline":
        """Stream an iterable of byte chunks into the first stage."""
        self.input_source = chunks
        return self

    def capture(self, mode: PipeMode) -> "Pipeline":
        """Choose which stream(s) of the last stage are captured."""
        self.capture_mode = PipeMode(mode)
        return self

    def no_echo(self) -> "Pipeline":
        self.quiet = True
        return self

    def on_spawn(self, observer: Observer) -> "Pipeline":
        """Replace the observer notified once before the first spawn."""
        self.observer = observer
        return self

    # Inspection

    @property
    def echo_enabled(self) -> bool:
        if self.quiet or any(command.quiet for command in self.stages):
            return False
        return context.echo_enabled()

    def display(self) -> str:
        """Plain-text rendering of the pipeline."""
        return click.unstyle(render_pipeline(self))

    def plan(self) -> PipelinePlan:
        """Describe the pipeline without running it."""
        stages = []
        for command in self.stages:
            stage = {"argv": command.argv}
            if command.cwd is not None:
                stage["cwd"] = command.cwd
            if command.env_pairs:
                stage["env"] = command.env_overrides
            if command.clear_env:
                stage["clear_env"] = True
            stages.append(stage)
        return PipelinePlan(
            stages=stages,
            edges=[mode.value for mode in self.edges],
            capture=self.capture_mode.value,
            has_input=self.input_source is not None,
        )

    def notify(self) -> None:
        """Fire the observer with the resolved pipeline."""
        self.observer(self, self.echo_enabled)

    # Execution

    def _consume(self) -> None:
        if self._consumed:
            raise PipelineConsumed("Pipeline has already been spawned")
        self._consumed = True

    def spawn(
        self, *, stdin: Stdio = Stdio.INHERIT, stdout: Stdio = Stdio.INHERIT
    ) -> Handle:
        """Spawn all stages and return without waiting.

        Args:
            stdin: ``Stdio.PIPED`` to write stage 0's stdin yourself
            stdout: ``Stdio.PIPED`` to read the last stage's captured
                stream(s) yourself

        Raises:
            PipelineConsumed: The pipeline was already spawned
            SpawnFailure: A stage could not be started
            ValueError: ``stdin`` is piped while input is attached; the
                pipeline is left unspawned and reusable
        """
        stdin, stdout = Stdio(stdin), Stdio(stdout)
        check_streams(self, stdin=stdin, stdout=stdout)
        self._consume()
        return spawn_pipeline(self, stdin=stdin, stdout=stdout)

    def spawn_with_io(self) -> Handle:
        """Spawn with both caller-facing ends piped."""
        return self.spawn(stdin=Stdio.PIPED, stdout=Stdio.PIPED)

    def spawn_to(self, sink: BinaryIO) -> Handle:
        """Spawn and stream captured output into ``sink`` in the background.

        ``Handle.wait`` joins the background copy.
        """
        self._consume()
        return spawn_pipeline(self, sink=sink)

    def run(self, check: bool = True) -> Status:
        """Run to completion with the last stage's output inherited.

        Raises:
            NonZeroExit, Terminated: ``check`` is set and a stage failed
        """
        status = self.spawn().wait()
        if check:
            status.check()
        return status

    def _collect(self, sink: BinaryIO) -> Status:
        handle = self.spawn(stdout=Stdio.PIPED)
        reader = handle.take_stdout()
        try:
            copy_out(reader, sink)
        except BaseException:
            # Every stage is reaped before the copy error propagates
            handle.wait()
            raise
        return handle.wait()

    def output_bytes(self, check: bool = True) -> bytes:
        """Run and return the captured output.

        Raises:
            NonZeroExit, Terminated: ``check`` is set and a stage failed;
                the bytes captured so far are in ``error.output``
        """
        buffer = io.BytesIO()
        status = self._collect(buffer)
        data = buffer.getvalue()
        if check:
            status.check(output=data)
        return data

    def output(self, check: bool = True) -> str:
        """Run and return the captured output decoded as UTF-8."""
        return self.output_bytes(check=check).decode("utf-8", errors="replace")

    def stream_to(self, sink: BinaryIO, check: bool = True) -> Status:
        """Run and copy the captured output into ``sink`` as it arrives.

        Raises:
            IoFailure: Writing to ``sink`` failed (raised after every stage
                has exited)
            NonZeroExit, Terminated: ``check`` is set and a stage failed
        """
        status = self._collect(sink)
        if check:
            status.check()
        return status

    def run_with_io(
        self, reader: BinaryIO, sink: BinaryIO, check: bool = True
    ) -> Status:
        """Stream ``reader`` into the first stage and the output into ``sink``."""
        return self.input_reader(reader).stream_to(sink, check=check)


__all__ = ["Observer", "Pipeline"]
