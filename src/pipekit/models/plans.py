"""Plan models for explain outputs."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel


class PipelinePlan(BaseModel):
    """Resolved description of a pipeline, without executing it."""

    stages: List[Dict[str, Any]]
    edges: List[str]
    capture: str
    has_input: bool = False


__all__ = ["PipelinePlan"]
