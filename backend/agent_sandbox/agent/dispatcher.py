"""EventDispatcher — turns one task's event stream into a narrative and a verdict.

A dispatcher owns a single piece of state: the text accumulating in the
currently open text block. Create one per task; never share an instance
between concurrently running tasks.

State machine:

    NO_BLOCK   --BlockStart(text)-->      TEXT_BLOCK   (header, reset text)
    TEXT_BLOCK --BlockStop-->             NO_BLOCK     (closing rule if text)
    any        --BlockStart(tool_use)-->  NO_BLOCK     (closing rule if text, tool header)
    any        --TextDelta-->             unchanged    (fragment appended)

A TextDelta seen in NO_BLOCK still accumulates; the narrative just lacks its
header.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator

from rich.console import Console
from rich.control import Control

from agent_sandbox.agent.constants import (
    BANNER_WIDTH,
    BLOCK_RULE_WIDTH,
    FINAL_RESULT_DISPLAY_MAX_CHARS,
    FINAL_RESULT_TRUNCATION_MSG,
    STREAM_ENDED_WITHOUT_RESULT,
    TASK_FAILED_PREFIX,
    TOOL_RESULT_DISPLAY_MAX_CHARS,
    TOOL_RESULT_TRUNCATION_MSG,
)
from agent_sandbox.agent.events import (
    BLOCK_TEXT,
    BLOCK_TOOL_USE,
    AgentEvent,
    BlockStart,
    BlockStop,
    FailureOutcome,
    InitEvent,
    SuccessOutcome,
    TextDelta,
    ToolInvocation,
    ToolProgress,
    ToolResult,
    TurnEvent,
    UnknownEvent,
)
from agent_sandbox.agent.state import BlockState, ExecutionOutcome, TaskStats

logger = logging.getLogger(__name__)


def truncate_for_display(text: str, limit: int, marker: str) -> str:
    if len(text) > limit:
        return text[:limit] + marker
    return text


def format_tool_content(content: Any) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return json.dumps(content, indent=2, default=str)


class EventDispatcher:
    """Consumes AgentEvents in order and reports the task's outcome."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.state = BlockState.NO_BLOCK
        self.current_text = ""
        self.final_result: str | None = None
        self.final_stats: TaskStats | None = None
        self.outcome: ExecutionOutcome | None = None

    async def consume(self, events: AsyncIterator[AgentEvent]) -> ExecutionOutcome:
        """Drive the whole stream; stop at the first outcome event."""
        async for event in events:
            self.handle(event)
            if self.outcome is not None:
                return self.outcome

        logger.warning("Agent stream closed before an outcome event")
        self._print()
        self._print("❌ " + STREAM_ENDED_WITHOUT_RESULT)
        return ExecutionOutcome.failed(STREAM_ENDED_WITHOUT_RESULT)

    def handle(self, event: AgentEvent) -> None:
        if isinstance(event, InitEvent):
            self._on_init(event)
        elif isinstance(event, TextDelta):
            self._on_text_delta(event)
        elif isinstance(event, BlockStart):
            self._on_block_start(event)
        elif isinstance(event, BlockStop):
            self._on_block_stop()
        elif isinstance(event, ToolProgress):
            self._on_tool_progress(event)
        elif isinstance(event, TurnEvent):
            self._on_turn(event)
        elif isinstance(event, SuccessOutcome):
            self._on_success(event)
        elif isinstance(event, FailureOutcome):
            self._on_failure(event)
        elif isinstance(event, UnknownEvent):
            self._on_unknown(event)
        else:
            self._on_unknown(UnknownEvent(kind=type(event).__name__, payload=event))

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _on_init(self, event: InitEvent) -> None:
        logger.info("Claude Code initialized")
        logger.info("Model: %s", event.model)
        logger.info("Tools: %s", ", ".join(event.tools))
        if event.mcp_servers:
            logger.info(
                "MCP Servers: %s",
                ", ".join(f"{s.name}({s.status})" for s in event.mcp_servers),
            )

    def _on_text_delta(self, event: TextDelta) -> None:
        self._print(event.text, end="")
        self.current_text += event.text

    def _on_block_start(self, event: BlockStart) -> None:
        if event.block_type == BLOCK_TEXT:
            self._print()
            self._print("💬 Claude:")
            self._print("─" * BLOCK_RULE_WIDTH)
            self.current_text = ""
            self.state = BlockState.TEXT_BLOCK
        elif event.block_type == BLOCK_TOOL_USE:
            self._close_text_block()
            self._print()
            self._print(f"🔧 Tool: {event.tool_name or 'unknown'}")
            self.current_text = ""
            self.state = BlockState.NO_BLOCK
        else:
            logger.debug("Ignoring %s block start", event.block_type)

    def _on_block_stop(self) -> None:
        self._close_text_block()
        self.current_text = ""
        self.state = BlockState.NO_BLOCK

    def _on_tool_progress(self, event: ToolProgress) -> None:
        self.console.control(Control.move_to_column(0))
        self._print(
            f"⏳ {event.tool_name} running... ({event.elapsed_seconds:.1f}s)", end=""
        )

    def _on_turn(self, event: TurnEvent) -> None:
        for item in event.items:
            if isinstance(item, ToolInvocation):
                self._print()
                self._print(
                    "📥 Input: " + json.dumps(item.input, indent=2, default=str)
                )
            elif isinstance(item, ToolResult):
                self._print()
                self._print(f"{'❌' if item.is_error else '✅'} Result:")
                self._print("─" * BLOCK_RULE_WIDTH)
                self._print(
                    truncate_for_display(
                        format_tool_content(item.content),
                        TOOL_RESULT_DISPLAY_MAX_CHARS,
                        TOOL_RESULT_TRUNCATION_MSG,
                    )
                )
                self._print("─" * BLOCK_RULE_WIDTH)

    def _on_success(self, event: SuccessOutcome) -> None:
        self._print("\n")
        self._print("═" * BANNER_WIDTH)
        self._print("✅ Task Completed Successfully")
        self._print("─" * BANNER_WIDTH)
        if event.result:
            self._print(
                truncate_for_display(
                    event.result,
                    FINAL_RESULT_DISPLAY_MAX_CHARS,
                    FINAL_RESULT_TRUNCATION_MSG,
                )
            )
        self._print("─" * BANNER_WIDTH)
        self._print(f"📊 Stats: {event.turns} turns, ${event.cost_usd:.4f} USD")
        self._print("═" * BANNER_WIDTH)

        self.final_result = event.result
        self.final_stats = TaskStats(turns=event.turns, cost_usd=event.cost_usd)
        self.outcome = ExecutionOutcome(
            success=True, result=self.final_result, stats=self.final_stats
        )

    def _on_failure(self, event: FailureOutcome) -> None:
        self._print("\n")
        self._print("═" * BANNER_WIDTH)
        self._print("❌ Task Failed")
        self._print("─" * BANNER_WIDTH)
        self._print(f"Error type: {event.category}")
        for err in event.errors:
            self._print(f"  - {err}")
        self.outcome = ExecutionOutcome.failed(TASK_FAILED_PREFIX + event.category)

    def _on_unknown(self, event: UnknownEvent) -> None:
        logger.warning("Unrecognized agent event: %s", event.kind)
        self._print(f"[unrecognized agent event: {event.kind}]", style="dim")

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------

    def _close_text_block(self) -> None:
        if self.current_text:
            self._print()
            self._print("─" * BLOCK_RULE_WIDTH)

    def _print(self, text: str = "", end: str = "\n", style: str | None = None) -> None:
        self.console.print(
            text,
            end=end,
            style=style,
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
