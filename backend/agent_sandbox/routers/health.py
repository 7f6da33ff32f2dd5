from fastapi import APIRouter, Depends

from agent_sandbox.config import DAEMON_MODE, Settings
from agent_sandbox.routers.deps import get_settings

router = APIRouter(tags=["health"])


@router.get("/")
async def root(settings: Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "message": "ProDisco Agent Sandbox is active.",
        "mode": DAEMON_MODE,
        "namespace": settings.K8S_NAMESPACE,
    }


@router.get("/healthz")
async def healthz():
    return {"status": "ok"}


@router.get("/status")
async def status(settings: Settings = Depends(get_settings)):
    return settings.status_snapshot()
