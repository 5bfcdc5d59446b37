"""Command specification: one process invocation."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, BinaryIO, Dict, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..quoting import join_arguments

if TYPE_CHECKING:
    from ..handle import Handle
    from ..pipeline import Pipeline
    from .status import Status

PathArg = str | os.PathLike[str]


class Command(BaseModel):
    """Immutable description of a process: program, argv, env and cwd.

    Every builder method returns a new ``Command``; the original is never
    modified. Nothing is validated here: a missing or empty program is only
    reported when the pipeline is spawned.

    Example:
        >>> ls = Command("ls").arg("-l").env("LC_ALL", "C")
        >>> ls.argv
        ['ls', '-l']
    """

    model_config = ConfigDict(frozen=True)

    program: str
    arguments: tuple[str, ...] = ()
    # (key, value) in insertion order; None marks a variable removed from
    # the inherited environment
    env_pairs: Tuple[Tuple[str, Optional[str]], ...] = ()
    clear_env: bool = False
    cwd: Optional[str] = None
    quiet: bool = False

    def __init__(self, program: PathArg = "", **data: Any) -> None:
        super().__init__(program=os.fspath(program), **data)

    @property
    def env_overrides(self) -> Dict[str, Optional[str]]:
        """Copy of the overrides as a dict (None means removed)."""
        return dict(self.env_pairs)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.arguments]

    def arg(self, value: PathArg) -> "Command":
        """Append one argument."""
        return self.model_copy(
            update={"arguments": (*self.arguments, os.fspath(value))}
        )

    def args(self, values: Iterable[PathArg]) -> "Command":
        """Append several arguments in order."""
        extra = tuple(os.fspath(value) for value in values)
        return self.model_copy(update={"arguments": (*self.arguments, *extra)})

    def env(self, key: str, value: PathArg) -> "Command":
        """Set an environment variable; the last write for a key wins."""
        overrides = self.env_overrides
        overrides.pop(key, None)
        overrides[key] = os.fspath(value)
        return self.model_copy(update={"env_pairs": tuple(overrides.items())})

    def envs(self, values: Mapping[str, PathArg]) -> "Command":
        command = self
        for key, value in values.items():
            command = command.env(key, value)
        return command

    def env_remove(self, key: str) -> "Command":
        """Remove a variable from the environment the child inherits."""
        overrides = self.env_overrides
        overrides.pop(key, None)
        overrides[key] = None
        return self.model_copy(update={"env_pairs": tuple(overrides.items())})

    def env_clear(self) -> "Command":
        """Start the child from an empty environment.

        Overrides set before this call are dropped as well; overrides set
        afterwards are applied on top of the empty environment.
        """
        return self.model_copy(update={"env_pairs": (), "clear_env": True})

    def current_dir(self, path: PathArg) -> "Command":
        return self.model_copy(update={"cwd": os.fspath(path)})

    def no_echo(self) -> "Command":
        """Do not echo pipelines containing this command."""
        return self.model_copy(update={"quiet": True})

    def resolve_env(self) -> Optional[Dict[str, str]]:
        """Environment for the child, or None to inherit unchanged."""
        if not self.clear_env and not self.env_pairs:
            return None

        env = {} if self.clear_env else os.environ.copy()
        for key, value in self.env_pairs:
            if value is None:
                env.pop(key, None)
            else:
                env[key] = value
        return env

    def display(self) -> str:
        """Human-readable rendering of the argv (not shell-safe)."""
        return join_arguments(self.argv)

    # Single-stage shortcuts. Each wraps this command in a Pipeline.

    def to_pipeline(self) -> "Pipeline":
        from ..pipeline import Pipeline

        return Pipeline(self)

    def pipe(self, next_command: "Command") -> "Pipeline":
        return self.to_pipeline().pipe(next_command)

    def pipe_stderr(self, next_command: "Command") -> "Pipeline":
        return self.to_pipeline().pipe_stderr(next_command)

    def pipe_both(self, next_command: "Command") -> "Pipeline":
        return self.to_pipeline().pipe_both(next_command)

    def input(self, text: str) -> "Pipeline":
        return self.to_pipeline().input(text)

    def input_bytes(self, data: bytes) -> "Pipeline":
        return self.to_pipeline().input_bytes(data)

    def input_reader(self, reader: BinaryIO) -> "Pipeline":
        return self.to_pipeline().input_reader(reader)

    def input_chunks(self, chunks: Iterable[bytes]) -> "Pipeline":
        return self.to_pipeline().input_chunks(chunks)

    def run(self, check: bool = True) -> "Status":
        return self.to_pipeline().run(check=check)

    def output(self, check: bool = True) -> str:
        return self.to_pipeline().output(check=check)

    def output_bytes(self, check: bool = True) -> bytes:
        return self.to_pipeline().output_bytes(check=check)

    def stream_to(self, sink: BinaryIO, check: bool = True) -> "Status":
        return self.to_pipeline().stream_to(sink, check=check)

    def run_with_io(
        self, reader: BinaryIO, sink: BinaryIO, check: bool = True
    ) -> "Status":
        return self.to_pipeline().run_with_io(reader, sink, check=check)

    def spawn(self, **kwargs: Any) -> "Handle":
        return self.to_pipeline().spawn(**kwargs)

    def spawn_with_io(self) -> "Handle":
        return self.to_pipeline().spawn_with_io()


def cmd(program: PathArg, *args: PathArg) -> Command:
    """Shorthand for ``Command(program).args(args)``."""
    return Command(program).args(args)


__all__ = ["Command", "cmd"]
