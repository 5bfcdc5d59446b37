"""Per-stage results and the aggregate pipeline status."""

from __future__ import annotations

from typing import Iterator, List, Optional

from pydantic import BaseModel

from ..exceptions import NonZeroExit, StageFailure, Terminated


class StageResult(BaseModel):
    """Completion of one stage, in spawn order."""

    index: int
    program: str
    returncode: int

    @property
    def code(self) -> Optional[int]:
        """Exit code, or None when the stage was killed by a signal."""
        return self.returncode if self.returncode >= 0 else None

    @property
    def signal(self) -> Optional[int]:
        return -self.returncode if self.returncode < 0 else None

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def to_error(self, **kwargs) -> StageFailure:
        if self.code is None:
            return Terminated(
                self.index, self.program, signal=self.signal, **kwargs
            )
        return NonZeroExit(self.index, self.program, code=self.code, **kwargs)


class Status(BaseModel):
    """Aggregate result of a waited pipeline."""

    stages: List[StageResult] = []

    def success(self) -> bool:
        """True iff every stage exited with code 0."""
        return all(stage.success for stage in self.stages)

    def code(self) -> Iterator[int]:
        """Exit codes in spawn order; signalled stages yield nothing."""
        return (stage.code for stage in self.stages if stage.code is not None)

    def failures(self) -> List[StageResult]:
        return [stage for stage in self.stages if not stage.success]

    def first_failure(self) -> Optional[StageResult]:
        """Earliest-spawned failing stage, if any."""
        return next((stage for stage in self.stages if not stage.success), None)

    def check(self, output: Optional[bytes] = None) -> None:
        """Raise the earliest-spawned stage failure, if there is one.

        Args:
            output: Bytes captured before the failure, attached to the error

        Raises:
            NonZeroExit: The failing stage exited with a non-zero code
            Terminated: The failing stage was killed by a signal
        """
        failure = self.first_failure()
        if failure is not None:
            raise failure.to_error(status=self, output=output)

    def __len__(self) -> int:
        return len(self.stages)


__all__ = ["StageResult", "Status"]
