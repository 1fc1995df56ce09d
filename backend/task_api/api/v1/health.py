import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..dependencies import get_database
from ...core.config import settings
from ...db.session import Database

router = APIRouter(tags=["health"])

_started = time.monotonic()

@router.get("/health")
def health(db: Database = Depends(get_database)):
    connected = db.ping()
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _started, 3),
        "database": "Connected" if connected else "Disconnected",
        "version": settings.APP_VERSION,
    }
