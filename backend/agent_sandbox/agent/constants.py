"""Constants for the task-execution engine.

Single source of truth for display limits and console markers.
"""

# ---------------------------------------------------------------------------
# Console truncation (rendering only, structured results are never cut)
# ---------------------------------------------------------------------------
TOOL_RESULT_DISPLAY_MAX_CHARS = 1500
TOOL_RESULT_TRUNCATION_MSG = "\n...(truncated)"
FINAL_RESULT_DISPLAY_MAX_CHARS = 2000
FINAL_RESULT_TRUNCATION_MSG = "...(truncated)"
TASK_LOG_PREVIEW_CHARS = 100

# ---------------------------------------------------------------------------
# Console layout
# ---------------------------------------------------------------------------
BANNER_WIDTH = 50
BLOCK_RULE_WIDTH = 40

# ---------------------------------------------------------------------------
# Agent runtime
# ---------------------------------------------------------------------------
SYSTEM_PROMPT_PRESET = "claude_code"
MCP_TRANSPORT = "stdio"

# ---------------------------------------------------------------------------
# Failure messages
# ---------------------------------------------------------------------------
TASK_FAILED_PREFIX = "Task failed: "
STREAM_ENDED_WITHOUT_RESULT = "Agent stream ended without a result"
