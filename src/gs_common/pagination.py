"""Opaque cursor encoding for keyset pagination."""

import base64
import json


def cursor_encode(last_id: int | str) -> str:
    """Encode the last seen primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.urlsafe_b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | str | None:
    """Decode a cursor back to the last seen id. Returns None on a missing or malformed cursor."""
    if not cursor:
        return None
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    last_id = payload.get("id")
    if isinstance(last_id, bool) or not isinstance(last_id, (int, str)):
        return None
    return last_id
