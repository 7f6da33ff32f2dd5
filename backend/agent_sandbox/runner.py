import logging

from agent_sandbox.agent.executor import TaskExecutor
from agent_sandbox.config import Settings

logger = logging.getLogger(__name__)


async def run_single_task(settings: Settings, executor: TaskExecutor) -> int:
    """Execute the configured task once and return the process exit code."""
    logger.info("Running in single-task mode")
    outcome = await executor.execute(settings.AGENT_TASK)
    if outcome.success:
        logger.info("Single task completed, shutting down")
    return outcome.exit_code
