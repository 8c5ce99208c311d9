from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Health check endpoint.

    Reports liveness plus the size of the in-memory stores, which is useful
    when watching memory growth between sweeps.
    """

    return {
        "status": "ok",
        "stored_plans": len(request.app.state.plan_store),
        "rate_limit_windows": len(request.app.state.rate_limiter),
    }
