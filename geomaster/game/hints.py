from __future__ import annotations

import random
from dataclasses import dataclass

from geomaster.game.geo import Bounds, destination_point, haversine_km

HINT_CIRCLE_RADIUS_KM = 125.0
HINT_EDGE_BUFFER_KM = 10.0
MAX_PLACEMENT_ATTEMPTS = 24


@dataclass(frozen=True, slots=True)
class HintCircle:
    center_lat: float
    center_lng: float
    radius_km: float


def generate_hint_circle(
    target_lat: float,
    target_lng: float,
    *,
    radius_km: float = HINT_CIRCLE_RADIUS_KM,
    bounds: Bounds | None = None,
    rng: random.Random | None = None,
) -> HintCircle:
    """Places a search circle around the target without centering it on the target.

    The centre lies between the edge buffer and radius minus the buffer away from
    the target, so the target is always inside the circle with room to spare. When
    bounds are given the centre must also fall inside them; after the attempts are
    exhausted the last candidate is clamped into the bounds, which only moves it
    closer to an in-bounds target.
    """
    if radius_km <= 2 * HINT_EDGE_BUFFER_KM:
        raise ValueError(f"hint radius must exceed {2 * HINT_EDGE_BUFFER_KM} km, got {radius_km}")

    rng = rng or random.Random()
    min_distance = HINT_EDGE_BUFFER_KM
    max_distance = radius_km - HINT_EDGE_BUFFER_KM

    attempts = 1 if bounds is None else MAX_PLACEMENT_ATTEMPTS
    candidate = (target_lat, target_lng)
    for _ in range(attempts):
        candidate = destination_point(
            target_lat,
            target_lng,
            distance_km=rng.uniform(min_distance, max_distance),
            bearing_deg=rng.uniform(0.0, 360.0),
        )
        if bounds is None or bounds.contains(*candidate):
            return HintCircle(center_lat=candidate[0], center_lng=candidate[1], radius_km=radius_km)

    center_lat, center_lng = bounds.clamp(*candidate)
    if haversine_km(center_lat, center_lng, target_lat, target_lng) > max_distance:
        center_lat, center_lng = bounds.clamp(target_lat, target_lng)
    return HintCircle(center_lat=center_lat, center_lng=center_lng, radius_km=radius_km)
