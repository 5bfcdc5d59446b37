"""pipekit exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models.status import Status


class PipelineError(Exception):
    """Base error for pipeline construction and execution."""

    pass


class PipelineConsumed(PipelineError):
    """A pipeline was spawned twice or a handle was waited twice."""

    pass


class StreamNotPiped(PipelineError):
    """A caller-facing stream was requested that was never piped."""

    pass


@dataclass(eq=False)
class SpawnFailure(PipelineError):
    """The OS could not create the process for a stage.

    Stages spawned before the failing one have already been waited on;
    their results are available in ``status``.
    """

    stage: int
    program: str
    error: OSError
    status: Optional["Status"] = field(default=None, repr=False)

    def __str__(self) -> str:
        return (
            f"Failed to spawn stage {self.stage} ({self.program!r}): "
            f"{self.error}"
        )


@dataclass(eq=False)
class StageFailure(PipelineError):
    """A stage ran to completion but did not succeed."""

    stage: int
    program: str
    status: Optional["Status"] = field(default=None, repr=False, kw_only=True)
    output: Optional[bytes] = field(default=None, repr=False, kw_only=True)


@dataclass(eq=False)
class NonZeroExit(StageFailure):
    """A stage exited with a non-zero code."""

    code: int = 1

    def __str__(self) -> str:
        return (
            f"Stage {self.stage} ({self.program!r}) failed with "
            f"exit code {self.code}"
        )


@dataclass(eq=False)
class Terminated(StageFailure):
    """A stage was killed by a signal and has no exit code."""

    signal: int = 0

    def __str__(self) -> str:
        return (
            f"Stage {self.stage} ({self.program!r}) was terminated by "
            f"signal {self.signal}"
        )


@dataclass(eq=False)
class IoFailure(PipelineError):
    """Copying pipeline output into the caller's sink failed."""

    context: str
    error: Optional[BaseException] = None

    def __str__(self) -> str:
        if self.error is None:
            return self.context
        return f"{self.context}: {self.error}"


__all__ = [
    "IoFailure",
    "NonZeroExit",
    "PipelineConsumed",
    "PipelineError",
    "SpawnFailure",
    "StageFailure",
    "StreamNotPiped",
    "Terminated",
]
