import logging
from concurrent.futures import ThreadPoolExecutor

from helpers import (
    calendar_day,
    display_date,
    extract_video_id,
    iso_utc,
    new_task_id,
    parse_sheet_datetime,
    start_of_today,
    today_str,
)
from sheets import (
    COMMENTS_RANGE,
    TASK_ACTIVITY_RANGE,
    TASK_APPEND_RANGE,
    TASKS_RANGE,
    USERS_RANGE,
)

logger = logging.getLogger(__name__)

RECENT_ENTRIES_LIMIT = 5
DEFAULT_DURATION = "00:00:00"


class UsageError(ValueError):
    pass


def _cell(row, i: int):
    return row[i] if i < len(row) else None


def _text(v) -> str:
    return "" if v is None else str(v)


def _email_key(v) -> str:
    return _text(v).strip().lower()


def _required(task_data, *names: str) -> str:
    for name in names:
        v = task_data.get(name)
        if isinstance(v, str) and v.strip():
            return v
    raise UsageError(f"{names[0]} is required")


def get_comment_options(gw):
    rows = gw.read_range(COMMENTS_RANGE)
    return [str(v) for row in rows for v in row if v is not None and str(v).strip() != ""]


def submit_task(gw, task_data, now=None):
    if not isinstance(task_data, dict):
        raise UsageError("taskData must be an object")

    video_link = _required(task_data, "videoLink", "ytVideoLink")
    brand_name = _required(task_data, "brandName")
    user_email = _required(task_data, "userEmail")

    row = [
        new_task_id(now),
        today_str(now),
        video_link.strip(),
        user_email,
        _text(task_data.get("comments")),
        _text(task_data.get("screenshot")),
        _text(task_data.get("startTime")),
        _text(task_data.get("endTime")),
        _text(task_data.get("duration")) or DEFAULT_DURATION,
        brand_name.strip(),
    ]
    gw.append_row(TASK_APPEND_RANGE, row)
    logger.info("task %s submitted by %s", row[0], user_email)
    return {"success": True}


def get_recent_entries(gw, video_link):
    video_id = extract_video_id(video_link)
    if not video_id:
        return []

    rows = gw.read_range(TASKS_RANGE)
    matches = []
    for row in reversed(rows):
        if len(matches) >= RECENT_ENTRIES_LIMIT:
            break
        if extract_video_id(_cell(row, 1)) != video_id:
            continue
        matches.append(
            {
                "date": display_date(_cell(row, 0)),
                "ldap": _cell(row, 2) or "N/A",
                "comments": _cell(row, 3) or "None",
                "brandName": _cell(row, 8) or "N/A",
            }
        )
    return matches


def get_task_stats(gw, user_email, now=None):
    email = _email_key(user_email)
    if not email:
        return {"userTasks": 0}

    rows = gw.read_range(TASK_ACTIVITY_RANGE)
    today = today_str(now)

    count = 0
    for row in rows:
        if _email_key(_cell(row, 2)) != email:
            continue
        if calendar_day(_cell(row, 0)) == today:
            count += 1
    logger.debug("%s of %s rows counted for today", count, len(rows))
    return {"userTasks": count}


def get_real_users_scoreboard(gw, now=None):
    with ThreadPoolExecutor(max_workers=2) as pool:
        users_f = pool.submit(gw.read_range, USERS_RANGE)
        tasks_f = pool.submit(gw.read_range, TASK_ACTIVITY_RANGE)
        users = users_f.result()
        tasks = tasks_f.result()

    scoreboard = {}
    for row in users:
        name, email = _cell(row, 0), _cell(row, 1)
        key = _email_key(email)
        if not key:
            continue
        scoreboard[key] = {
            "email": str(email).strip(),
            "name": name,
            "tasksToday": 0,
            "lastActive": None,
        }

    since = start_of_today(now)
    for row in tasks:
        entry = scoreboard.get(_email_key(_cell(row, 2)))
        if entry is None:
            continue
        ts = parse_sheet_datetime(_cell(row, 0))
        if ts is None or ts < since:
            continue
        entry["tasksToday"] += 1
        if entry["lastActive"] is None or ts > entry["lastActive"]:
            entry["lastActive"] = ts

    return [
        {**entry, "lastActive": iso_utc(entry["lastActive"]) if entry["lastActive"] else None}
        for entry in scoreboard.values()
    ]
