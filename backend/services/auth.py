"""
Best-effort authentication of social-frame users.

Frame payloads arrive as "untrusted data"; we only check that a user id and a
recent timestamp are present before creating or loading the user.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from domain.models import User
from repositories import UsersRepository

logger = logging.getLogger(__name__)
users_repo = UsersRepository()

MAX_FRAME_AGE_MS = 5 * 60 * 1000


@dataclass(frozen=True)
class FrameUser:
    fid: int
    username: str
    display_name: str
    pfp: Optional[str] = None


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def extract_frame_user(untrusted_data: Optional[Mapping[str, Any]]) -> Optional[FrameUser]:
    if not untrusted_data or not untrusted_data.get("fid"):
        return None
    try:
        fid = int(untrusted_data["fid"])
    except (TypeError, ValueError, OverflowError):
        return None
    username = _text(untrusted_data.get("username"))
    return FrameUser(
        fid=fid,
        username=username or f"user_{fid}",
        display_name=_text(untrusted_data.get("displayName")) or username or f"User {fid}",
        pfp=_text(untrusted_data.get("pfp")),
    )


def validate_frame_signature(
    untrusted_data: Optional[Mapping[str, Any]],
    now_ms: Optional[int] = None,
) -> bool:
    """Require fid and a timestamp (ms) within five minutes of now."""
    if not untrusted_data or not untrusted_data.get("fid") or not untrusted_data.get("timestamp"):
        return False
    try:
        timestamp = int(untrusted_data["timestamp"])
    except (TypeError, ValueError, OverflowError):
        return False
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return abs(now_ms - timestamp) <= MAX_FRAME_AGE_MS


def authenticate_frame_user(
    session: Session,
    untrusted_data: Optional[Mapping[str, Any]],
    now_ms: Optional[int] = None,
) -> Optional[User]:
    """Return the stored user for a valid frame payload, creating it on first sight."""
    if not validate_frame_signature(untrusted_data, now_ms=now_ms):
        logger.debug("[frame-auth] rejected frame payload without fresh fid/timestamp")
        return None
    frame_user = extract_frame_user(untrusted_data)
    if not frame_user:
        return None
    user_id = str(frame_user.fid)
    return users_repo.get_or_create_user(session, user_id, farcaster_id=user_id)
