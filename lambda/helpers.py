import re
import time
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

CHICAGO_TZ = ZoneInfo("America/Chicago")

_VIDEO_ID_RE = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})"
)

_SHEET_DATETIME_FORMATS = (
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
)


def extract_video_id(url):
    """Return the 11-character YouTube video id in ``url``, or None."""
    if not url:
        return None
    m = _VIDEO_ID_RE.search(str(url))
    return m.group(1) if m else None


def _now(now=None) -> datetime:
    if now is None:
        return datetime.now(CHICAGO_TZ)
    if now.tzinfo is None:
        return now.replace(tzinfo=CHICAGO_TZ)
    return now.astimezone(CHICAGO_TZ)


def today_str(now=None) -> str:
    return _now(now).date().isoformat()


def start_of_today(now=None) -> datetime:
    d = _now(now).date()
    return datetime(d.year, d.month, d.day, tzinfo=CHICAGO_TZ)


def parse_sheet_datetime(value):
    """
    Parse a cell value into an aware datetime.

    Sheets hands back whatever the cell's number format renders, so accept
    ISO dates/timestamps as well as the US ``M/D/YYYY`` forms. Naive values
    are read as Chicago time. Returns None when nothing matches.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        s = str(value).strip()
        if not s:
            return None
        parsed = None
        try:
            parsed = datetime.fromisoformat(s[:-1] + "+00:00" if s.endswith("Z") else s)
        except ValueError:
            for fmt in _SHEET_DATETIME_FORMATS:
                try:
                    parsed = datetime.strptime(s, fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=CHICAGO_TZ)
    return parsed


def calendar_day(value) -> str:
    dt = parse_sheet_datetime(value)
    if dt is None:
        return ""
    return dt.astimezone(CHICAGO_TZ).date().isoformat()


def display_date(value) -> str:
    dt = parse_sheet_datetime(value)
    if dt is None:
        return "N/A"
    d = dt.astimezone(CHICAGO_TZ).date()
    return f"{d.month}/{d.day}/{d.year}"


def iso_utc(dt: datetime) -> str:
    u = dt.astimezone(timezone.utc)
    return u.strftime("%Y-%m-%dT%H:%M:%S.") + f"{u.microsecond // 1000:03d}Z"


def new_task_id(now=None) -> str:
    if now is None:
        millis = time.time_ns() // 1_000_000
    else:
        millis = int(_now(now).timestamp() * 1000)
    return f"uuid-{millis}"
