"""Tests for EventDispatcher: block state machine, rendering, verdicts."""

from __future__ import annotations

import asyncio

from agent_sandbox.agent.constants import STREAM_ENDED_WITHOUT_RESULT
from agent_sandbox.agent.dispatcher import EventDispatcher, format_tool_content, truncate_for_display
from agent_sandbox.agent.events import (
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
from agent_sandbox.agent.state import BlockState, TaskStats


async def _events(items, consumed: list | None = None):
    for item in items:
        if consumed is not None:
            consumed.append(item)
        yield item


def consume(dispatcher: EventDispatcher, items, consumed: list | None = None):
    return asyncio.run(dispatcher.consume(_events(items, consumed)))


def output(console) -> str:
    return console.file.getvalue()


# ── State machine ───────────────────────────────────────────────


def test_text_block_accumulates_and_closes(console):
    dispatcher = EventDispatcher(console)

    dispatcher.handle(BlockStart(block_type="text"))
    assert dispatcher.state is BlockState.TEXT_BLOCK

    dispatcher.handle(TextDelta(text="Listing "))
    dispatcher.handle(TextDelta(text="pods"))
    assert dispatcher.current_text == "Listing pods"

    dispatcher.handle(BlockStop())
    assert dispatcher.state is BlockState.NO_BLOCK
    assert dispatcher.current_text == ""

    rendered = output(console)
    assert "💬 Claude:" in rendered
    assert "Listing pods" in rendered


def test_tool_block_start_closes_open_text(console):
    dispatcher = EventDispatcher(console)

    dispatcher.handle(BlockStart(block_type="text"))
    dispatcher.handle(TextDelta(text="checking"))
    dispatcher.handle(BlockStart(block_type="tool_use", tool_name="Bash"))

    assert dispatcher.state is BlockState.NO_BLOCK
    assert dispatcher.current_text == ""
    assert "🔧 Tool: Bash" in output(console)


def test_text_delta_without_open_block_degrades(console):
    dispatcher = EventDispatcher(console)

    dispatcher.handle(TextDelta(text="orphan"))

    assert dispatcher.state is BlockState.NO_BLOCK
    assert dispatcher.current_text == "orphan"
    assert "orphan" in output(console)
    assert "💬 Claude:" not in output(console)


def test_other_block_types_leave_state_alone(console):
    dispatcher = EventDispatcher(console)
    dispatcher.handle(BlockStart(block_type="text"))
    dispatcher.handle(TextDelta(text="a"))

    dispatcher.handle(BlockStart(block_type="thinking"))

    assert dispatcher.state is BlockState.TEXT_BLOCK
    assert dispatcher.current_text == "a"


# ── Rendering ───────────────────────────────────────────────────


def test_init_events_render_independently(console, caplog):
    dispatcher = EventDispatcher(console)
    init = InitEvent(
        model="claude-sonnet",
        tools=["Bash"],
        mcp_servers=[McpServerStatus(name="prodisco-k8s", status="connected")],
    )

    with caplog.at_level("INFO"):
        dispatcher.handle(init)
        dispatcher.handle(init)

    assert caplog.text.count("Model: claude-sonnet") == 2
    assert "prodisco-k8s(connected)" in caplog.text
    assert dispatcher.outcome is None


def test_empty_turn_is_a_noop(console):
    dispatcher = EventDispatcher(console)

    dispatcher.handle(TurnEvent(items=[]))

    assert output(console) == ""


def test_tool_invocation_renders_input(console):
    dispatcher = EventDispatcher(console)

    dispatcher.handle(TurnEvent(items=[ToolInvocation(name="Bash", input={"command": "kubectl get pods"})]))

    assert "📥 Input:" in output(console)
    assert '"command": "kubectl get pods"' in output(console)


def test_long_tool_result_is_truncated_on_console(console):
    dispatcher = EventDispatcher(console)

    dispatcher.handle(TurnEvent(items=[ToolResult(content="x" * 1600)]))

    rendered = output(console)
    assert rendered.count("x") == 1500
    assert "...(truncated)" in rendered
    assert "✅ Result:" in rendered


def test_error_tool_result_and_structured_content(console):
    dispatcher = EventDispatcher(console)

    dispatcher.handle(
        TurnEvent(items=[ToolResult(content=[{"type": "text", "text": "forbidden"}], is_error=True)])
    )

    rendered = output(console)
    assert "❌ Result:" in rendered
    assert '"text": "forbidden"' in rendered
    assert "truncated" not in rendered


def test_tool_progress(console):
    dispatcher = EventDispatcher(console)

    dispatcher.handle(ToolProgress(tool_name="Bash", elapsed_seconds=1.24))
    dispatcher.handle(ToolProgress(tool_name="Bash", elapsed_seconds=2.0))

    assert "⏳ Bash running... (1.2s)" in output(console)
    assert "⏳ Bash running... (2.0s)" in output(console)


def test_unknown_event_is_reported_not_fatal(console, caplog):
    dispatcher = EventDispatcher(console)

    with caplog.at_level("WARNING"):
        dispatcher.handle(UnknownEvent(kind="hook_response"))

    assert dispatcher.outcome is None
    assert "hook_response" in output(console)
    assert "Unrecognized agent event: hook_response" in caplog.text


def test_helpers():
    assert truncate_for_display("abc", 5, "!") == "abc"
    assert truncate_for_display("abcdef", 5, "!") == "abcde!"
    assert format_tool_content(None) == ""
    assert format_tool_content({"a": 1}) == '{\n  "a": 1\n}'


# ── Verdicts ────────────────────────────────────────────────────


def test_success_keeps_full_result(console):
    long_result = "r" * 2500
    dispatcher = EventDispatcher(console)

    outcome = consume(
        dispatcher,
        [
            InitEvent(model="m"),
            SuccessOutcome(result=long_result, turns=3, cost_usd=0.05),
        ],
    )

    assert outcome.success is True
    assert outcome.result == long_result
    assert outcome.stats == TaskStats(turns=3, cost_usd=0.05)
    assert dispatcher.final_result == long_result

    rendered = output(console)
    assert rendered.count("r" * 2000) == 1
    assert "r" * 2001 not in rendered
    assert "...(truncated)" in rendered
    assert "📊 Stats: 3 turns, $0.0500 USD" in rendered


def test_failure_stops_consumption(console):
    consumed = []
    dispatcher = EventDispatcher(console)

    outcome = consume(
        dispatcher,
        [
            InitEvent(model="m"),
            FailureOutcome(category="error_during_execution", errors=["boom", "bang"]),
            TextDelta(text="should never be read"),
        ],
        consumed,
    )

    assert outcome.success is False
    assert outcome.error == "Task failed: error_during_execution"
    assert outcome.result is None
    assert outcome.stats is None
    assert len(consumed) == 2

    rendered = output(console)
    assert "❌ Task Failed" in rendered
    assert "  - boom" in rendered
    assert "  - bang" in rendered


def test_stream_without_outcome_is_a_failure(console):
    outcome = consume(
        EventDispatcher(console),
        [InitEvent(model="m"), BlockStart(block_type="text"), TextDelta(text="partial")],
    )

    assert outcome.success is False
    assert outcome.error == STREAM_ENDED_WITHOUT_RESULT


def test_empty_success_result(console):
    outcome = consume(EventDispatcher(console), [SuccessOutcome(result="", turns=1, cost_usd=0.0)])

    assert outcome.success is True
    assert outcome.result == ""
