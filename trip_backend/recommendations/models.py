from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Document(BaseModel):
    """Typed read view over a camelCase store document."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class UserPreferences(_Document):
    altitude_sickness: bool | None = None
    trip_difficulty: str | None = None


class UserProfile(_Document):
    preferences: UserPreferences | None = None
    interests: list[str] | None = None


class GeoPoint(_Document):
    coordinates: list[float] | None = None  # [longitude, latitude]


class TripEndpoint(_Document):
    name: str | None = None
    location: GeoPoint | None = None


class CostTier(_Document):
    total: float | None = None


class EstimatedCost(_Document):
    car: CostTier | None = None
    bike: CostTier | None = None


class TripCandidate(_Document):
    altitude_sickness: bool | None = None
    difficulty: str | None = None
    keywords: list[str] | None = None
    description: str | None = None
    start_point: TripEndpoint | None = None
    rating: float | None = None
    estimated_cost: EstimatedCost | None = None
    duration: float | None = None

    @property
    def start_coordinates(self) -> list[float] | None:
        if self.start_point and self.start_point.location:
            return self.start_point.location.coordinates
        return None

    @property
    def car_total_cost(self) -> float | None:
        if self.estimated_cost and self.estimated_cost.car:
            return self.estimated_cost.car.total
        return None


class ScoreBreakdown(_Document):
    altitude_sickness: float = 0
    difficulty: float = 0
    interests: float = 0
    distance: float = 0
    rating: float = 0
    budget: float = 0
    duration: float = 0

    def total(self) -> float:
        """Sum the factors in their fixed order and clamp to 0-100."""
        total = 0
        for value in (
            self.altitude_sickness,
            self.difficulty,
            self.interests,
            self.distance,
            self.rating,
            self.budget,
            self.duration,
        ):
            total += value
        return max(0, min(100, total))


class RecommendationResponse(BaseModel):
    recommendations: list[dict[str, Any]]
