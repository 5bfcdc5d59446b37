"""Pydantic models and enums describing pipelines and their results."""

from .command import Command, cmd
from .modes import PipeMode, Stdio
from .plans import PipelinePlan
from .status import StageResult, Status

__all__ = [
    "Command",
    "PipeMode",
    "PipelinePlan",
    "StageResult",
    "Status",
    "Stdio",
    "cmd",
]
