"""Structured JSON logging to stdout.

One JSON object per line; sender numbers are redacted to their last digits.
"""

from typing import Any, Dict
from datetime import datetime, timezone
import json

from awardbot.obs.context import request_id_var, message_sid_var, from_var, route_var


def _redact_phone(value: Any) -> Any:
    s = str(value) if value is not None else ""
    if not s:
        return s
    digits = [c for c in s if c.isdigit()]
    if len(digits) < 4:
        return "***"
    tail = "".join(digits[-4:])
    return f"***{tail}"


def log_event(event: str, **fields: Any) -> None:
    now = datetime.now(timezone.utc).isoformat()
    payload: Dict[str, Any] = {
        "ts": now,
        "level": fields.pop("level", "INFO"),
        "event": event,
        "request_id": request_id_var.get(),
    }
    payload.setdefault("message_sid", message_sid_var.get())
    if route_var.get() and "route" not in fields:
        payload["award_route"] = route_var.get()
    if "user_from" not in fields:
        payload["user_from"] = _redact_phone(from_var.get())

    for k, v in fields.items():
        if k in ("from", "from_number", "user_from"):
            payload["user_from"] = _redact_phone(v)
        else:
            payload[k] = v

    try:
        print(json.dumps(payload, separators=(",", ":"), default=str))
    except (TypeError, ValueError):
        # logging must never take a request down
        pass
