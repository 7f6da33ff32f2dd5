"""Streaming task-execution engine."""

from agent_sandbox.agent.client import AgentClient
from agent_sandbox.agent.dispatcher import EventDispatcher
from agent_sandbox.agent.executor import TaskExecutor
from agent_sandbox.agent.state import ExecutionOutcome, TaskStats

__all__ = [
    "AgentClient",
    "EventDispatcher",
    "TaskExecutor",
    "ExecutionOutcome",
    "TaskStats",
]
