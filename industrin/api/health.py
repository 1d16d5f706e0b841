# industrin/api/health.py
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from industrin.core.auth import get_db

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz() -> dict:
    # liveness: 200 while the process is up
    return {
        "ok": True,
        "service": "industrin",
        "status": "healthy",
        "ts": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/readyz")
def readyz(db: Session = Depends(get_db)):
    """Readiness: database round trip."""
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"ok": False, "db": "down"},
            headers={"Cache-Control": "no-store"},
        )
    return JSONResponse(
        content={
            "ok": True,
            "db": "up",
            "db_latency_ms": round((time.perf_counter() - started) * 1000.0, 2),
        },
        headers={"Cache-Control": "no-store"},
    )
