from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from geomaster.game.duels.errors import DuelChallengeDecodeError
from geomaster.game.duels.types import DuelChallenge

TOKEN_SEPARATOR = "."


class _ChallengePayload(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    seed: str = Field(min_length=1, max_length=32)
    game_type: str = Field(min_length=1, max_length=96)
    challenger_id: int
    challenger_name: str = Field(max_length=128)
    challenger_score: int = Field(ge=0)
    challenger_time: float = Field(ge=0)
    challenger_game_id: UUID


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64decode(value: str) -> bytes:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _signature(body: str, *, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body.encode("ascii"), hashlib.sha256).digest()
    return _b64encode(digest)


def encode_challenge(challenge: DuelChallenge, *, secret: str) -> str:
    """URL-safe ``<payload>.<signature>`` token."""
    payload = _ChallengePayload(
        seed=challenge.seed,
        game_type=challenge.game_type,
        challenger_id=challenge.challenger_id,
        challenger_name=challenge.challenger_name,
        challenger_score=challenge.challenger_score,
        challenger_time=float(challenge.challenger_time),
        challenger_game_id=challenge.challenger_game_id,
    )
    body = _b64encode(payload.model_dump_json().encode("utf-8"))
    return f"{body}{TOKEN_SEPARATOR}{_signature(body, secret=secret)}"


def decode_challenge(token: str, *, secret: str) -> DuelChallenge:
    body, separator, signature = token.strip().partition(TOKEN_SEPARATOR)
    if not body or not separator or not signature:
        raise DuelChallengeDecodeError("malformed challenge token")

    try:
        expected = _signature(body, secret=secret)
    except UnicodeEncodeError as exc:
        raise DuelChallengeDecodeError("malformed challenge token") from exc
    if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
        raise DuelChallengeDecodeError("challenge signature mismatch")

    try:
        payload = _ChallengePayload.model_validate_json(_b64decode(body))
    except (binascii.Error, ValueError, ValidationError) as exc:
        raise DuelChallengeDecodeError("invalid challenge payload") from exc

    return DuelChallenge(
        seed=payload.seed,
        game_type=payload.game_type,
        challenger_id=payload.challenger_id,
        challenger_name=payload.challenger_name,
        challenger_score=payload.challenger_score,
        challenger_time=payload.challenger_time,
        challenger_game_id=payload.challenger_game_id,
    )
