"""POST /execute — the agent-sandbox task endpoint.

Request:  {"command": str, "max_turns": int (optional)}
Response: {"stdout": str, "stderr": str, "exit_code": int}

The response is always 200; a failed task is reported through exit_code and
stderr. Requests run concurrently, each with its own dispatcher.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from agent_sandbox.agent.constants import TASK_LOG_PREVIEW_CHARS
from agent_sandbox.agent.executor import TaskExecutor
from agent_sandbox.routers.deps import get_executor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["execute"])


class ExecuteRequest(BaseModel):
    command: str = Field(description="The task/command for the agent to execute")
    max_turns: int | None = Field(default=None, gt=0)


class ExecuteResponse(BaseModel):
    stdout: str
    stderr: str
    exit_code: int


@router.post("/execute", response_model=ExecuteResponse)
async def execute(
    body: ExecuteRequest, executor: TaskExecutor = Depends(get_executor)
):
    logger.info(
        "Received task via /execute: %s...", body.command[:TASK_LOG_PREVIEW_CHARS]
    )
    outcome = await executor.execute(body.command, body.max_turns)
    return outcome.to_sandbox_response()
