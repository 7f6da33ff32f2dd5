import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from rich.console import Console

from agent_sandbox import __version__
from agent_sandbox.agent.constants import BANNER_WIDTH
from agent_sandbox.agent.executor import TaskExecutor
from agent_sandbox.config import Settings
from agent_sandbox.logging_config import uvicorn_level
from agent_sandbox.routers import execute, health

logger = logging.getLogger(__name__)

ENDPOINTS = (
    ("GET ", "/", "Health check"),
    ("GET ", "/healthz", "Health check (k8s)"),
    ("GET ", "/status", "Agent status"),
    ("POST", "/execute", "Execute a task { command: string }"),
)


def create_app(
    settings: Settings,
    executor: TaskExecutor | None = None,
    console: Console | None = None,
) -> FastAPI:
    console = console or Console()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info(
            "Daemon server listening on %s:%d", settings.SERVER_HOST, settings.SERVER_PORT
        )
        print_daemon_banner(settings, console)
        yield
        # Shutdown
        logger.info("Daemon server stopped")

    app = FastAPI(
        title="Agent Sandbox",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.executor = executor or TaskExecutor(settings, console=console)

    app.include_router(health.router)
    app.include_router(execute.router)
    return app


def print_daemon_banner(settings: Settings, console: Console) -> None:
    port = settings.SERVER_PORT
    lines = [
        "",
        "═" * BANNER_WIDTH,
        "🚀 ProDisco Agent Daemon Running",
        "═" * BANNER_WIDTH,
        f"📡 Server: http://{settings.SERVER_HOST}:{port}",
        "",
        "Endpoints (agent-sandbox pattern):",
        *(f"  {method} {path:<9} - {desc}" for method, path, desc in ENDPOINTS),
        "",
        "Response format: { stdout: string, stderr: string, exit_code: int }",
        "═" * BANNER_WIDTH,
        "",
        "Example usage:",
        f"  curl -X POST http://localhost:{port}/execute \\",
        '    -H "Content-Type: application/json" \\',
        "    -d '{\"command\": \"List all pods in the default namespace\"}'",
        "",
        "With Sandbox Router (X-Sandbox-ID header):",
        "  curl -X POST http://<router-ip>:8080/execute \\",
        '    -H "Content-Type: application/json" \\',
        '    -H "X-Sandbox-ID: <sandbox-name>" \\',
        "    -d '{\"command\": \"List all failing deployments\"}'",
        "",
    ]
    for line in lines:
        console.print(line, markup=False, highlight=False, soft_wrap=True)


def serve_daemon(settings: Settings, executor: TaskExecutor | None = None) -> None:
    """Run the HTTP listener until the process is stopped."""
    logger.info("Starting in daemon mode with HTTP API")
    app = create_app(settings, executor)
    uvicorn.run(
        app,
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_level=uvicorn_level(settings.LOG_LEVEL),
    )
