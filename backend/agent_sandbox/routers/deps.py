from fastapi import Request

from agent_sandbox.agent.executor import TaskExecutor
from agent_sandbox.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_executor(request: Request) -> TaskExecutor:
    return request.app.state.executor
