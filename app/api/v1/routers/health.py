# app/api/v1/routers/health.py
import time
import subprocess
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from app.core.config import Settings, get_settings

router = APIRouter(tags=["health"])
START_TIME = time.time()


def _git_sha(short: bool = True) -> str:
    try:
        cmd = ["git", "rev-parse", "--short" if short else "HEAD"]
        return subprocess.check_output(cmd, stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        return "unknown"


@router.get("/", response_class=PlainTextResponse)
async def liveness():
    """Process is up and serving; says nothing about Mongo."""
    return "Backend Running"


@router.get("/health")
async def health(request: Request, settings: Settings = Depends(get_settings)):
    """
    Tolerant health check:
    - live Mongo ping through the shared store
    - basic build/runtime info
    Always answers 200; read `status` for the verdict.
    """
    version = settings.GIT_SHA if settings.GIT_SHA != "unknown" else _git_sha()
    checks: dict[str, object] = {
        "app_name": settings.APP_NAME,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
        "version": version,
        "uptime_seconds": int(time.time() - START_TIME),
    }

    # --- Mongo ---
    store = getattr(request.app.state, "mongo", None)
    if store is None:
        checks["mongodb"] = "error: not initialized"
    else:
        try:
            await store.ping()
            checks["mongodb"] = "ok"
        except Exception as e:
            checks["mongodb"] = f"error: {e}"

    status = "ok" if checks["mongodb"] == "ok" else "error"
    return {"status": status, "checks": checks, "timestamp": int(time.time())}
