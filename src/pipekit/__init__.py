"""pipekit: shell-style subprocess pipelines driven from Python."""

from .exceptions import (
    IoFailure,
    NonZeroExit,
    PipelineConsumed,
    PipelineError,
    SpawnFailure,
    StageFailure,
    StreamNotPiped,
    Terminated,
)
from .handle import Handle
from .models import Command, PipelinePlan, PipeMode, StageResult, Status, Stdio, cmd
from .pipeline import Pipeline
from .quoting import quote_argument

__all__ = [
    "__version__",
    "Command",
    "Handle",
    "IoFailure",
    "NonZeroExit",
    "PipeMode",
    "Pipeline",
    "PipelineConsumed",
    "PipelineError",
    "PipelinePlan",
    "SpawnFailure",
    "StageFailure",
    "StageResult",
    "Status",
    "Stdio",
    "StreamNotPiped",
    "Terminated",
    "cmd",
    "quote_argument",
]

__version__ = "0.1.0"
