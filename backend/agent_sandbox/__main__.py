"""Process entry point: ``python -m agent_sandbox`` or ``agent-sandbox``.

Modes (AGENT_MODE):
  single-task  execute AGENT_TASK once, exit 0 on success and 1 otherwise
  daemon       serve the HTTP API until stopped
"""

import asyncio
import logging
import sys

from pydantic import ValidationError
from rich.console import Console

from agent_sandbox.agent.executor import TaskExecutor
from agent_sandbox.config import AUTH_MODE_VERTEX, ConfigError, Settings
from agent_sandbox.logging_config import configure_logging
from agent_sandbox.main import serve_daemon
from agent_sandbox.runner import run_single_task

logger = logging.getLogger("agent_sandbox")


def _print_auth(settings: Settings, console: Console) -> None:
    console.print()
    if settings.auth_mode == AUTH_MODE_VERTEX:
        console.print("Using Google Vertex AI authentication")
        console.print(f"  Region: {settings.CLOUD_ML_REGION}", markup=False)
        console.print(f"  Project: {settings.ANTHROPIC_VERTEX_PROJECT_ID}", markup=False)
    elif settings.auth_mode is not None:
        console.print("Using Anthropic API Key authentication")


def main() -> int:
    console = Console()
    try:
        settings = Settings()
    except ValidationError as exc:
        print(f"ERROR: invalid configuration\n{exc}", file=sys.stderr)
        return 1

    configure_logging(settings.LOG_LEVEL)
    _print_auth(settings, console)
    try:
        settings.validate_auth()
    except ConfigError as exc:
        logger.error("ERROR: %s", exc)
        return 1

    console.print("===================================")
    console.print("Agent Sandbox")
    console.print("===================================")
    logger.info("Initializing agent")
    logger.info("Mode: %s", settings.AGENT_MODE)
    logger.info("Model: %s", settings.ANTHROPIC_MODEL)
    logger.info("Namespace: %s", settings.K8S_NAMESPACE)
    logger.info("Max Turns: %d", settings.MAX_ITERATIONS)

    executor = TaskExecutor(settings, console=console)
    try:
        if settings.is_daemon:
            serve_daemon(settings, executor)
            return 0
        return asyncio.run(run_single_task(settings, executor))
    except Exception:
        logger.exception("Fatal error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
