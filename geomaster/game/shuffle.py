from __future__ import annotations

import hashlib
import random
import secrets
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

SEED_BYTES = 9


def new_seed() -> str:
    """Opaque 12-character URL-safe seed."""
    return secrets.token_urlsafe(SEED_BYTES)


def seeded_random(seed: str) -> random.Random:
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return random.Random(int.from_bytes(digest, "big"))


def stable_index(seed: str, size: int) -> int:
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") % size


def shuffle(items: Sequence[T], seed: str) -> list[T]:
    """Fisher-Yates permutation fully determined by seed; the input is left untouched."""
    result = list(items)
    rng = seeded_random(seed)
    for index in range(len(result) - 1, 0, -1):
        swap_index = rng.randrange(index + 1)
        result[index], result[swap_index] = result[swap_index], result[index]
    return result


def pick(items: Sequence[T], *, count: int, seed: str) -> list[T]:
    return shuffle(items, seed)[:count]
