from __future__ import annotations

import secrets

import structlog
from fastapi import Request

from geomaster.game.sessions.types import PlayerIdentity

INTERNAL_TOKEN_HEADER = "X-Internal-Token"
USER_ID_HEADER = "X-User-Id"
GUEST_ID_HEADER = "X-Guest-Id"
MAX_GUEST_ID_LENGTH = 64

logger = structlog.get_logger(__name__)


def is_valid_internal_token(*, expected_token: str, received_token: str | None) -> bool:
    if not expected_token or not received_token:
        return False
    return secrets.compare_digest(expected_token.encode("utf-8"), received_token.encode("utf-8"))


def _parse_user_id(raw_value: str | None) -> int | None:
    if raw_value is None:
        return None
    candidate = raw_value.strip()
    if not candidate.isdigit():
        return None
    user_id = int(candidate)
    return user_id if user_id > 0 else None


def _parse_guest_id(raw_value: str | None) -> str | None:
    if raw_value is None:
        return None
    candidate = raw_value.strip()
    if not candidate or len(candidate) > MAX_GUEST_ID_LENGTH:
        return None
    return candidate


def resolve_player_identity(request: Request, *, expected_token: str) -> PlayerIdentity:
    """User id is trusted only when the gateway token is valid; otherwise the guest id applies."""
    user_id = _parse_user_id(request.headers.get(USER_ID_HEADER))
    if user_id is not None:
        token = request.headers.get(INTERNAL_TOKEN_HEADER)
        if is_valid_internal_token(expected_token=expected_token, received_token=token):
            return PlayerIdentity(user_id=user_id)
        logger.warning("user_id_header_without_valid_token", path=request.url.path)

    return PlayerIdentity(guest_id=_parse_guest_id(request.headers.get(GUEST_ID_HEADER)))
