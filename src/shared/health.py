from time import perf_counter
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from src.shared.logging import get_logger

router = APIRouter(tags=["Health"])
log = get_logger("health")


@router.get("/_health/db", status_code=status.HTTP_200_OK)
async def health_db(request: Request):
    db = request.app.state.db
    t0 = perf_counter()
    try:
        await db.ping()
        dt_ms = int((perf_counter() - t0) * 1000)
        return {"ok": True, "checks": {"db_select_1_ms": dt_ms}}
    except Exception as e:
        log.error("db_health_failed", error=str(e))
        # Return 503 with the error string so the real cause is visible
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "ok": False,
                "checks": {"db": "SELECT 1 failed"},
                "error": type(e).__name__,
                "detail": str(e),
            },
        )
