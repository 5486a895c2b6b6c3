from __future__ import annotations

import logging
from typing import Any

from ..db.stores import TripStore, UserStore
from .cache import ResultCache
from .models import TripCandidate, UserProfile
from .scoring import parse_number, score_trip

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    """Raised when the requesting user does not exist."""

    def __init__(self, user_id: Any) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


def make_cache_key(user_id: Any, lat: Any, lng: Any, budget: Any, duration: Any) -> str:
    # Longitude goes before latitude in the key.
    return f"cache_{user_id}_{lng}_{lat}_{budget}_{duration}"


class RecommendationEngine:
    """Ranks the active trips for a user, caching each ranked list."""

    def __init__(self, users: UserStore, trips: TripStore, cache: ResultCache) -> None:
        self.users = users
        self.trips = trips
        self.cache = cache

    def recommend(
        self,
        user_id: Any,
        lat: Any = None,
        lng: Any = None,
        budget: Any = None,
        duration: Any = None,
        now: float | None = None,
    ) -> list[dict[str, Any]]:
        cache_key = make_cache_key(user_id, lat, lng, budget, duration)
        cached = self.cache.get(cache_key, now=now)
        if cached is not None:
            logger.info("Recommendation cache hit, key: %s", cache_key)
            return cached

        user_doc = self.users.find_user_by_id(user_id)
        if user_doc is None:
            raise UserNotFoundError(user_id)
        user = UserProfile.model_validate(user_doc)

        user_lat = parse_number(lat)
        user_lng = parse_number(lng)
        user_budget = parse_number(budget)
        user_duration = parse_number(duration)

        scored: list[dict[str, Any]] = []
        for trip_doc in self.trips.find_active_trips():
            total, breakdown = score_trip(
                TripCandidate.model_validate(trip_doc),
                user,
                lat=user_lat,
                lng=user_lng,
                budget=user_budget,
                duration=user_duration,
            )
            scored.append({
                **trip_doc,
                "recommendationScore": total,
                "scoreBreakdown": breakdown.model_dump(by_alias=True),
            })

        # sorted() is stable, so equal scores keep the store's order
        scored = sorted(scored, key=lambda t: t["recommendationScore"], reverse=True)

        self.cache.set(cache_key, scored, now=now)
        logger.info("Recommendation cache set, key: %s (%d trips)", cache_key, len(scored))
        return scored
