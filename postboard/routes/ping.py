from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(prefix="/api/ping", tags=["ping"])


@router.get("")
def ping():
    return {
        "pingResult": "Ping is successful!",
        "serverTime": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }
