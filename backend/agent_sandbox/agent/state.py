from __future__ import annotations

import enum
from dataclasses import dataclass


class BlockState(enum.Enum):
    NO_BLOCK = "no_block"
    TEXT_BLOCK = "text_block"


@dataclass(frozen=True)
class TaskStats:
    turns: int
    cost_usd: float

    def to_dict(self) -> dict:
        return {"turns": self.turns, "costUsd": self.cost_usd}


@dataclass(frozen=True)
class ExecutionOutcome:
    """Aggregated result of one task. Built once, never mutated."""

    success: bool
    result: str | None = None
    error: str | None = None
    stats: TaskStats | None = None

    @classmethod
    def failed(cls, error: str) -> ExecutionOutcome:
        return cls(success=False, error=error)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def to_dict(self) -> dict:
        data: dict = {"success": self.success}
        if self.result is not None:
            data["result"] = self.result
        if self.error is not None:
            data["error"] = self.error
        if self.stats is not None:
            data["stats"] = self.stats.to_dict()
        return data

    def to_sandbox_response(self) -> dict:
        """The agent-sandbox /execute shape: stdout, stderr, exit_code."""
        return {
            "stdout": self.result or "",
            "stderr": self.error or "",
            "exit_code": self.exit_code,
        }
