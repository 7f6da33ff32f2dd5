"""Agent invocation client built on the Claude Agent SDK.

Opens one streaming ``query()`` per task and translates the SDK's message
objects into the closed AgentEvent set. Transport errors are not retried and
propagate to the caller; the executor decides what they mean.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import aclosing
from typing import Any, AsyncIterator, Callable

from claude_agent_sdk import query
from claude_agent_sdk.types import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    StreamEvent,
    SystemMessage,
    ToolResultBlock,
    ToolUseBlock,
    UserMessage,
)

from agent_sandbox.agent.constants import MCP_TRANSPORT, SYSTEM_PROMPT_PRESET
from agent_sandbox.agent.events import (
    AgentEvent,
    BlockStart,
    BlockStop,
    FailureOutcome,
    InitEvent,
    McpServerStatus,
    SuccessOutcome,
    TextDelta,
    ToolInvocation,
    ToolProgress,
    ToolResult,
    TurnEvent,
    UnknownEvent,
)
from agent_sandbox.agent.prompts import build_system_prompt
from agent_sandbox.agent.transport import ProgressAwareTransport
from agent_sandbox.config import Settings

logger = logging.getLogger(__name__)

QueryFn = Callable[..., AsyncIterator[Any]]
TransportFactory = Callable[..., Any]


def _forward_stderr(data: str) -> None:
    sys.stderr.write(data)


class AgentClient:
    """Streams one task through the external agent runtime."""

    def __init__(
        self,
        settings: Settings,
        query_fn: QueryFn = query,
        transport_factory: TransportFactory = ProgressAwareTransport.for_query,
    ):
        self.settings = settings
        self._query = query_fn
        self._transport_factory = transport_factory

    def build_options(self, max_turns: int) -> ClaudeAgentOptions:
        settings = self.settings
        return ClaudeAgentOptions(
            model=settings.ANTHROPIC_MODEL,
            max_turns=max_turns,
            cwd=os.getcwd(),
            system_prompt={
                "type": "preset",
                "preset": SYSTEM_PROMPT_PRESET,
                "append": build_system_prompt(
                    settings.K8S_NAMESPACE, settings.MCP_SERVER_NAME
                ),
            },
            mcp_servers={
                settings.MCP_SERVER_NAME: {
                    "type": MCP_TRANSPORT,
                    "command": settings.MCP_SERVER_COMMAND,
                    "args": list(settings.MCP_SERVER_ARGS),
                },
            },
            permission_mode=settings.PERMISSION_MODE,
            include_partial_messages=True,
            env=settings.agent_env(),
            stderr=_forward_stderr,
        )

    async def stream(
        self, task: str, max_turns: int | None = None
    ) -> AsyncIterator[AgentEvent]:
        """Yield AgentEvents for one task, in emission order."""
        options = self.build_options(max_turns or self.settings.MAX_ITERATIONS)
        transport = self._transport_factory(prompt=task, options=options)
        # close the SDK generator here, in this task, so the CLI subprocess
        # is torn down before the caller moves on
        messages = self._query(prompt=task, options=options, transport=transport)
        async with aclosing(messages):
            async for message in messages:
                event = translate_message(message)
                if event is None:
                    continue
                yield event


# ---------------------------------------------------------------------------
# SDK message -> AgentEvent
# ---------------------------------------------------------------------------


def translate_message(message: Any) -> AgentEvent | None:
    """Map one SDK message onto the event set. None means nothing to render."""
    if isinstance(message, SystemMessage):
        return _translate_system(message)
    if isinstance(message, StreamEvent):
        return _translate_stream_event(message.event)
    if isinstance(message, (AssistantMessage, UserMessage)):
        return _translate_turn(message.content)
    if isinstance(message, ResultMessage):
        return _translate_result(message)
    return UnknownEvent(kind=type(message).__name__, payload=message)


def _translate_system(message: SystemMessage) -> AgentEvent | None:
    data = message.data or {}
    if message.subtype == "init":
        servers = [
            McpServerStatus(
                name=str(server.get("name", "")),
                status=str(server.get("status", "unknown")),
            )
            for server in data.get("mcp_servers") or []
        ]
        return InitEvent(
            model=str(data.get("model", "")),
            tools=[str(tool) for tool in data.get("tools") or []],
            mcp_servers=servers,
        )
    if message.subtype == "tool_progress":
        return ToolProgress(
            tool_name=str(data.get("tool_name", "")),
            elapsed_seconds=float(data.get("elapsed_time_seconds") or 0.0),
        )
    logger.debug("Ignoring system message subtype %s", message.subtype)
    return None


def _translate_stream_event(event: dict) -> AgentEvent | None:
    event_type = event.get("type")
    if event_type == "content_block_delta":
        delta = event.get("delta") or {}
        if delta.get("type") == "text_delta" and delta.get("text"):
            return TextDelta(text=delta["text"])
        return None
    if event_type == "content_block_start":
        block = event.get("content_block") or {}
        return BlockStart(block_type=str(block.get("type", "")), tool_name=block.get("name"))
    if event_type == "content_block_stop":
        return BlockStop()
    # message_start, message_delta, message_stop carry nothing we render
    return None


def _translate_turn(content: Any) -> TurnEvent | None:
    if isinstance(content, str):
        # plain prompt echo, already shown as the task banner
        return None
    items: list[ToolInvocation | ToolResult] = []
    for block in content or []:
        if isinstance(block, ToolUseBlock):
            items.append(ToolInvocation(name=block.name, input=dict(block.input or {})))
        elif isinstance(block, ToolResultBlock):
            items.append(ToolResult(content=block.content, is_error=bool(block.is_error)))
    return TurnEvent(items=items)


def _translate_result(message: ResultMessage) -> SuccessOutcome | FailureOutcome:
    if message.subtype == "success":
        return SuccessOutcome(
            result=message.result or "",
            turns=message.num_turns,
            cost_usd=message.total_cost_usd or 0.0,
        )
    errors = getattr(message, "errors", None) or []
    return FailureOutcome(category=message.subtype, errors=[str(err) for err in errors])
