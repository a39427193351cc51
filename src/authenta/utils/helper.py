import datetime as _dt
import time
import uuid


def rel_time_iso(ts: float | None = None) -> str:
    if ts is None:
        now = _dt.datetime.now(_dt.timezone.utc)
    else:
        now = _dt.datetime.fromtimestamp(ts, _dt.timezone.utc)
    return now.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def now_millis() -> int:
    return int(time.time() * 1000)


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


def new_queue_id() -> str:
    return uuid.uuid4().hex[:9]
