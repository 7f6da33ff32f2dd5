"""Subprocess transport that keeps tool-progress records visible.

The CLI reports long-running tool calls as top-level ``tool_progress``
records. The SDK's message parser skips record types it does not know, so
they are rewritten into a ``system`` message with subtype ``tool_progress``
before the parser sees them; the original fields stay at the top level of
the record and end up in ``SystemMessage.data``.
"""

from __future__ import annotations

from typing import Any, AsyncIterable, AsyncIterator

from claude_agent_sdk import Transport
from claude_agent_sdk._internal.transport.subprocess_cli import SubprocessCLITransport
from claude_agent_sdk.types import ClaudeAgentOptions

TOOL_PROGRESS = "tool_progress"


def normalize_record(data: dict[str, Any]) -> dict[str, Any]:
    if data.get("type") != TOOL_PROGRESS:
        return data
    return {**data, "type": "system", "subtype": TOOL_PROGRESS}


class ProgressAwareTransport(Transport):
    """Delegates to another transport, rewriting tool-progress records."""

    def __init__(self, inner: Transport) -> None:
        self._inner = inner

    @classmethod
    def for_query(
        cls, prompt: str | AsyncIterable[dict[str, Any]], options: ClaudeAgentOptions
    ) -> ProgressAwareTransport:
        return cls(SubprocessCLITransport(prompt=prompt, options=options))

    async def connect(self) -> None:
        await self._inner.connect()

    async def write(self, data: str) -> None:
        await self._inner.write(data)

    def read_messages(self) -> AsyncIterator[dict[str, Any]]:
        return self._read_messages()

    async def _read_messages(self) -> AsyncIterator[dict[str, Any]]:
        async for data in self._inner.read_messages():
            yield normalize_record(data)

    async def close(self) -> None:
        await self._inner.close()

    def is_ready(self) -> bool:
        return self._inner.is_ready()

    async def end_input(self) -> None:
        await self._inner.end_input()
