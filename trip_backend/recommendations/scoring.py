from __future__ import annotations

import math
import re
from typing import Any

from .models import ScoreBreakdown, TripCandidate, UserProfile

EARTH_RADIUS_KM = 6371

DIFFICULTY_LEVELS = {"easy": 1, "moderate": 2, "hard": 3}

ALTITUDE_POINTS = 25
DIFFICULTY_POINTS = 10
NEUTRAL_DIFFICULTY_POINTS = 5
INTEREST_POINTS = 15
DISTANCE_POINTS = 15
RATING_POINTS = 15
BUDGET_POINTS = 10
DURATION_POINTS = 10

_LEADING_NUMBER = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_number(value: Any) -> float | None:
    """
    Return ``value`` as a finite float, or ``None`` if it isn't one.

    Strings are read up to the end of their leading number, so ``"3h"``
    gives 3.0 and ``"1000rs"`` gives 1000.0.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return None
        value = match.group(0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two (lat, lon) points in kilometres."""
    d_lat = ((lat2 - lat1) * math.pi) / 180
    d_lon = ((lon2 - lon1) * math.pi) / 180
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos((lat1 * math.pi) / 180)
        * math.cos((lat2 * math.pi) / 180)
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def _altitude_score(trip: TripCandidate, user: UserProfile) -> float:
    sensitive = bool(user.preferences and user.preferences.altitude_sickness)
    if sensitive and trip.altitude_sickness:
        return -ALTITUDE_POINTS
    return ALTITUDE_POINTS


def _difficulty_score(trip: TripCandidate, user: UserProfile) -> float:
    user_level = DIFFICULTY_LEVELS.get(
        user.preferences.trip_difficulty if user.preferences else None
    )
    trip_level = DIFFICULTY_LEVELS.get(trip.difficulty)
    if user_level and trip_level:
        if trip_level <= user_level:
            return DIFFICULTY_POINTS * (trip_level / user_level)
        return 0
    return NEUTRAL_DIFFICULTY_POINTS


def _interest_score(trip: TripCandidate, user: UserProfile) -> float:
    if not user.interests:
        return 0
    keywords = {k.lower() for k in trip.keywords or []}
    description = (trip.description or "").lower()
    matches = 0
    for interest in user.interests:
        term = interest.lower()
        if term in keywords or term in description:
            matches += 1
    return min((matches / len(user.interests)) * INTEREST_POINTS, INTEREST_POINTS)


def _distance_score(trip: TripCandidate, lat: float | None, lng: float | None) -> float:
    coordinates = trip.start_coordinates
    # Zero coordinates count as missing, same as an unset location.
    if not (lat and lng and coordinates and len(coordinates) >= 2):
        return 0
    trip_lng, trip_lat = coordinates[0], coordinates[1]
    distance_km = haversine_km(lat, lng, trip_lat, trip_lng)
    return max(0, DISTANCE_POINTS - (distance_km / 100) * DISTANCE_POINTS)


def _rating_score(trip: TripCandidate) -> float:
    # A rating of 0 is treated like a missing rating.
    if not trip.rating or math.isnan(trip.rating):
        return 0
    return min((trip.rating / 5) * RATING_POINTS, RATING_POINTS)


def _capacity_score(actual: float | None, limit: float | None, points: int) -> float:
    """Full points when ``actual`` fits in ``limit``, decaying with the overrun."""
    if limit is None or actual is None:
        return 0
    if actual <= limit:
        return points
    if limit <= 0:
        return 0
    over = actual - limit
    return max(0, points - (over / limit) * points)


def score_trip(
    trip: TripCandidate,
    user: UserProfile,
    lat: float | None = None,
    lng: float | None = None,
    budget: float | None = None,
    duration: float | None = None,
) -> tuple[float, ScoreBreakdown]:
    """
    Score one trip for one user on a 0-100 scale.

    Returns the clamped total and the unclamped per-factor breakdown.
    Each factor is computed on its own; a missing input or trip field only
    zeroes (or neutralises) that factor.
    """
    breakdown = ScoreBreakdown(
        altitude_sickness=_altitude_score(trip, user),
        difficulty=_difficulty_score(trip, user),
        interests=_interest_score(trip, user),
        distance=_distance_score(trip, lat, lng),
        rating=_rating_score(trip),
        budget=_capacity_score(trip.car_total_cost, budget, BUDGET_POINTS),
        duration=_capacity_score(trip.duration, duration, DURATION_POINTS),
    )
    return breakdown.total(), breakdown
