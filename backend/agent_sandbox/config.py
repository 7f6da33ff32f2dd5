from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

AUTH_MODE_VERTEX = "vertex"
AUTH_MODE_API_KEY = "api_key"

DAEMON_MODE = "daemon"
SINGLE_TASK_MODE = "single-task"


class ConfigError(RuntimeError):
    """Raised when the authentication settings cannot be used."""


class Settings(BaseSettings):
    # Agent
    AGENT_MODE: str = SINGLE_TASK_MODE
    AGENT_TASK: str = "List all pods in the default namespace and provide a summary"
    MAX_ITERATIONS: int = Field(default=10, gt=0)

    # HTTP server (daemon mode)
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8888

    # Kubernetes
    K8S_NAMESPACE: str = "default"

    # Claude
    ANTHROPIC_MODEL: str = "claude-sonnet-4-5-20250514"
    ANTHROPIC_API_KEY: str | None = None

    # Google Vertex AI
    CLAUDE_CODE_USE_VERTEX: bool = False
    CLOUD_ML_REGION: str = "us-east5"
    ANTHROPIC_VERTEX_PROJECT_ID: str = ""

    # Tool provider, started by the agent runtime as a stdio subprocess
    MCP_SERVER_NAME: str = "prodisco-k8s"
    MCP_SERVER_COMMAND: str = "prodisco-k8s"
    MCP_SERVER_ARGS: list[str] = Field(default_factory=list)

    # The sandbox is isolated, so every tool call is approved by default
    PERMISSION_MODE: str = "bypassPermissions"

    LOG_LEVEL: str = "info"

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().lower()
        if level not in ("debug", "info", "warn", "warning", "error"):
            raise ValueError(f"unsupported log level: {value!r}")
        return level

    @field_validator("CLAUDE_CODE_USE_VERTEX", mode="before")
    @classmethod
    def _vertex_flag(cls, value: object) -> object:
        # the agent runtime only treats the literal "1" as enabled
        if isinstance(value, str):
            return value == "1"
        return value

    @property
    def is_daemon(self) -> bool:
        return self.AGENT_MODE == DAEMON_MODE

    @property
    def auth_mode(self) -> str | None:
        """Which authentication the agent runtime will use, if any."""
        if self.CLAUDE_CODE_USE_VERTEX:
            return AUTH_MODE_VERTEX
        if self.ANTHROPIC_API_KEY:
            return AUTH_MODE_API_KEY
        return None

    def validate_auth(self) -> str:
        """Return the auth mode or raise ConfigError if it is unusable."""
        mode = self.auth_mode
        if mode is None:
            raise ConfigError(
                "No authentication configured. Set either ANTHROPIC_API_KEY or "
                "CLAUDE_CODE_USE_VERTEX=1 with ANTHROPIC_VERTEX_PROJECT_ID"
            )
        if mode == AUTH_MODE_VERTEX and not self.ANTHROPIC_VERTEX_PROJECT_ID:
            raise ConfigError(
                "ANTHROPIC_VERTEX_PROJECT_ID is required when using Vertex AI"
            )
        return mode

    def agent_env(self) -> dict[str, str]:
        """Environment overrides handed to the agent runtime subprocess."""
        if self.auth_mode == AUTH_MODE_VERTEX:
            return {
                "CLAUDE_CODE_USE_VERTEX": "1",
                "CLOUD_ML_REGION": self.CLOUD_ML_REGION,
                "ANTHROPIC_VERTEX_PROJECT_ID": self.ANTHROPIC_VERTEX_PROJECT_ID,
            }
        if self.ANTHROPIC_API_KEY:
            return {"ANTHROPIC_API_KEY": self.ANTHROPIC_API_KEY}
        return {}

    def status_snapshot(self) -> dict:
        return {
            "status": "running",
            "mode": self.AGENT_MODE,
            "model": self.ANTHROPIC_MODEL,
            "namespace": self.K8S_NAMESPACE,
            "maxTurns": self.MAX_ITERATIONS,
            "useVertex": self.CLAUDE_CODE_USE_VERTEX,
        }
