from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter
from pydantic import BaseModel

from app.schemas.result import Ok, ok

router = APIRouter(tags=["Health"])

JST = ZoneInfo("Asia/Tokyo")


class TimeOut(BaseModel):
    iso: str
    jst: str


def format_times(now: datetime) -> TimeOut:
    """Render an aware datetime as UTC ISO-8601 and Tokyo wall-clock time."""
    utc = now.astimezone(timezone.utc)
    return TimeOut(
        iso=utc.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        jst=now.astimezone(JST).strftime("%Y/%m/%d %H:%M:%S"),
    )


@router.get("/time", response_model=Ok[TimeOut])
def server_time() -> Ok[TimeOut]:
    """Current server time (UTC ISO string and Japan Standard Time)."""
    return ok(format_times(datetime.now(timezone.utc)))
