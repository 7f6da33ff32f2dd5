import io

import pytest
from rich.console import Console

from agent_sandbox.config import Settings

AGENT_ENV_VARS = (
    "AGENT_MODE",
    "AGENT_TASK",
    "MAX_ITERATIONS",
    "SERVER_HOST",
    "SERVER_PORT",
    "K8S_NAMESPACE",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_API_KEY",
    "CLAUDE_CODE_USE_VERTEX",
    "CLOUD_ML_REGION",
    "ANTHROPIC_VERTEX_PROJECT_ID",
    "MCP_SERVER_NAME",
    "MCP_SERVER_COMMAND",
    "MCP_SERVER_ARGS",
    "PERMISSION_MODE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's shell environment out of Settings()."""
    for name in AGENT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(ANTHROPIC_API_KEY="test-key", K8S_NAMESPACE="payments")


@pytest.fixture
def console() -> Console:
    """A console that renders into memory; read it with console.file.getvalue()."""
    return Console(file=io.StringIO(), width=120, force_terminal=False, color_system=None)
