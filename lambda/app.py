import base64
import json
import logging

from actions import (
    UsageError,
    get_comment_options,
    get_real_users_scoreboard,
    get_recent_entries,
    get_task_stats,
    submit_task,
)
from settings import Settings
from sheets import SheetsGateway

SETTINGS = Settings.from_env()

logger = logging.getLogger()
logger.setLevel(SETTINGS.log_level)

ACTIONS = {
    "getCommentOptions": lambda gw, params: get_comment_options(gw),
    "submitTask": lambda gw, params: submit_task(gw, params.get("taskData")),
    "getRecentEntries": lambda gw, params: get_recent_entries(gw, params.get("videoLink")),
    "getTaskStats": lambda gw, params: get_task_stats(gw, params.get("userEmail")),
    "getRealUsersScoreboard": lambda gw, params: get_real_users_scoreboard(gw),
}


def _resp(status, body, content_type="text/plain"):
    return {
        "statusCode": status,
        "headers": {
            "content-type": f"{content_type}; charset=utf-8",
            "cache-control": "no-store",
        },
        "body": body,
    }


def _json(status, obj):
    return _resp(status, json.dumps(obj), content_type="application/json")


def _method(event) -> str:
    method = ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return (method or event.get("httpMethod") or "GET").upper()


def _parse_request(event):
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise UsageError("Request body must be valid JSON") from e
    if not isinstance(payload, dict):
        raise UsageError("Request body must be a JSON object")

    action = payload.get("action")
    params = payload.get("params") or {}
    if not isinstance(params, dict):
        raise UsageError("params must be an object")
    return action, params


def handler(event, context, gateway=None):
    if _method(event) != "POST":
        return _resp(405, "Method Not Allowed")

    try:
        action, params = _parse_request(event)
        fn = ACTIONS.get(action) if isinstance(action, str) else None
        if fn is None:
            raise UsageError(f"Unknown action: {action}")

        logger.info("action=%s", action)
        gw = gateway if gateway is not None else SheetsGateway(SETTINGS)
        return _json(200, fn(gw, params))

    except Exception as e:
        logger.exception("request failed")
        return _json(500, {"success": False, "message": str(e)})
