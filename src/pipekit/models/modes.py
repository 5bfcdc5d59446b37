"""Stream selection enums shared by the builder and the orchestrator."""

from __future__ import annotations

from enum import Enum


class PipeMode(str, Enum):
    """Which output stream(s) of a stage feed the next stage's stdin."""

    STDOUT = "stdout"
    STDERR = "stderr"
    BOTH = "both"

    @property
    def symbol(self) -> str:
        """Separator used when a pipeline is displayed or typed on the CLI."""
        return _SYMBOLS[self]

    @classmethod
    def from_symbol(cls, symbol: str) -> "PipeMode":
        for mode, candidate in _SYMBOLS.items():
            if candidate == symbol:
                return mode
        raise ValueError(f"Unknown pipe symbol: {symbol}")

    @classmethod
    def symbols(cls) -> tuple[str, ...]:
        return tuple(_SYMBOLS.values())


_SYMBOLS = {
    PipeMode.STDOUT: "|",
    PipeMode.STDERR: "2|",
    PipeMode.BOTH: "&|",
}


class Stdio(str, Enum):
    """Whether a caller-facing stream is inherited or handed to the caller."""

    INHERIT = "inherit"
    PIPED = "piped"


__all__ = ["PipeMode", "Stdio"]
