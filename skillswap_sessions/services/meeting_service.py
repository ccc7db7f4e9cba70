import re
from typing import Optional

from skillswap_sessions.config import settings

_UNSAFE_ROOM_CHARS = re.compile(r"[^a-zA-Z0-9-_]")


def room_name_for_session(session_id, prefix: Optional[str] = None) -> str:
    """URL-safe conference room name; the same session id always maps to the same room."""
    prefix = prefix or settings.MEETING_ROOM_PREFIX
    return _UNSAFE_ROOM_CHARS.sub("-", f"{prefix}-{session_id}")


def generate_meeting_url(session_id, domain: Optional[str] = None, prefix: Optional[str] = None) -> str:
    domain = domain or settings.MEETING_DOMAIN
    return f"https://{domain}/{room_name_for_session(session_id, prefix)}"
