"""TaskExecutor — one task lifecycle: invoke, dispatch, aggregate.

This is the error-containment boundary of the engine. Whatever happens while
talking to the agent runtime, ``execute`` returns an ExecutionOutcome and
never raises. Nothing is retried.
"""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import AsyncIterator, Protocol

from rich.console import Console

from agent_sandbox.agent.client import AgentClient
from agent_sandbox.agent.constants import BANNER_WIDTH, TASK_LOG_PREVIEW_CHARS
from agent_sandbox.agent.dispatcher import EventDispatcher
from agent_sandbox.agent.events import AgentEvent
from agent_sandbox.agent.state import ExecutionOutcome
from agent_sandbox.config import Settings

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    def stream(
        self, task: str, max_turns: int | None = None
    ) -> AsyncIterator[AgentEvent]: ...


class TaskExecutor:
    def __init__(
        self,
        settings: Settings,
        client: EventSource | None = None,
        console: Console | None = None,
    ) -> None:
        self.settings = settings
        self.client = client or AgentClient(settings)
        self.console = console or Console()

    async def execute(self, task: str, max_turns: int | None = None) -> ExecutionOutcome:
        budget = max_turns or self.settings.MAX_ITERATIONS
        logger.info("Executing task (max %d turns): %s", budget, task[:TASK_LOG_PREVIEW_CHARS])
        self._print_banner(task)

        # fresh dispatcher per task, accumulator state must not leak
        dispatcher = EventDispatcher(self.console)
        try:
            events = self.client.stream(task, budget)
            async with aclosing(events):
                outcome = await dispatcher.consume(events)
        except Exception as exc:
            logger.error("Error during task execution: %s", exc, exc_info=True)
            return ExecutionOutcome.failed(str(exc) or type(exc).__name__)

        if outcome.success:
            logger.info("Task succeeded")
        else:
            logger.info("Task did not succeed: %s", outcome.error)
        return outcome

    def _print_banner(self, task: str) -> None:
        print_ = self.console.print
        print_()
        print_("═" * BANNER_WIDTH, markup=False)
        print_(f"📋 Task: {task}", markup=False, highlight=False, soft_wrap=True)
        print_("═" * BANNER_WIDTH, markup=False)
        print_()
