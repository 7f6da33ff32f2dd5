"""AgentEvent — the closed set of events the dispatcher understands.

Every message from the agent runtime is translated into exactly one of these
(or dropped when it carries nothing to render):

    InitEvent        — session started: model, tools, tool-provider status
    TextDelta        — streamed text fragment of the current block
    BlockStart       — a content block opened: "text" or "tool_use"
    BlockStop        — the current content block closed
    ToolProgress     — a tool call is still running: elapsed seconds
    TurnEvent        — a completed turn: tool invocations and tool results
    SuccessOutcome   — terminal, final text + turns + cost
    FailureOutcome   — terminal, failure category + error strings
    UnknownEvent     — anything else, reported but not fatal
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

BLOCK_TEXT = "text"
BLOCK_TOOL_USE = "tool_use"


@dataclass(frozen=True)
class McpServerStatus:
    name: str
    status: str


@dataclass(frozen=True)
class InitEvent:
    model: str
    tools: list[str] = field(default_factory=list)
    mcp_servers: list[McpServerStatus] = field(default_factory=list)


class StreamDelta:
    """Marker base for incremental stream events."""


@dataclass(frozen=True)
class TextDelta(StreamDelta):
    text: str


@dataclass(frozen=True)
class BlockStart(StreamDelta):
    block_type: str  # text, tool_use, or anything the runtime adds later
    tool_name: str | None = None


@dataclass(frozen=True)
class BlockStop(StreamDelta):
    pass


@dataclass(frozen=True)
class ToolProgress:
    tool_name: str
    elapsed_seconds: float


@dataclass(frozen=True)
class ToolInvocation:
    name: str
    input: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResult:
    content: Any
    is_error: bool = False


@dataclass(frozen=True)
class TurnEvent:
    items: list[ToolInvocation | ToolResult] = field(default_factory=list)


class Outcome:
    """Marker base for the single terminal event of a task."""


@dataclass(frozen=True)
class SuccessOutcome(Outcome):
    result: str
    turns: int
    cost_usd: float


@dataclass(frozen=True)
class FailureOutcome(Outcome):
    category: str
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UnknownEvent:
    kind: str
    payload: Any = None


AgentEvent = Union[
    InitEvent,
    TextDelta,
    BlockStart,
    BlockStop,
    ToolProgress,
    TurnEvent,
    SuccessOutcome,
    FailureOutcome,
    UnknownEvent,
]
