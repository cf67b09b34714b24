from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from quickpaste.adapters.store.base import AbstractPasteStore
from quickpaste.api.dependencies import get_paste_store

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check.

    Returns a static status so load balancers can tell the process is up.
    """

    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(store: AbstractPasteStore = Depends(get_paste_store)) -> JSONResponse:
    """Readiness check.

    Pings the paste store; answers 503 while the backend is unreachable.
    """

    if await store.ping():
        return JSONResponse({"status": "ok", "store": "ok"})
    return JSONResponse({"status": "degraded", "store": "unavailable"}, status_code=503)
