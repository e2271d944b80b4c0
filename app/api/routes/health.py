from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Liveness probe.

    Reports the number of tracked rate-limit buckets so operators can watch
    the limiter's memory growth.
    """
    store = request.app.state.rate_limiter.store
    return {"ok": True, "data": {"status": "ok", "rate_limit_buckets": len(store)}}
