from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Query
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_admin, require_user
from .db.config import DEFAULT_MONGO_CONFIG
from .db.stores import MongoTripStore, MongoUserStore, TripStore, UserStore, get_database
from .recommendations.cache import ResultCache, run_periodic_sweep
from .recommendations.config import DEFAULT_RECOMMENDATION_CONFIG
from .recommendations.engine import RecommendationEngine, UserNotFoundError
from .recommendations.models import RecommendationResponse

logger = logging.getLogger(__name__)

# One cache for the whole process, shared by every request.
_cache = ResultCache(default_ttl=DEFAULT_RECOMMENDATION_CONFIG.cache_ttl_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the expired-entry sweep for as long as the app is up."""
    sweep_task = asyncio.create_task(
        run_periodic_sweep(_cache, DEFAULT_RECOMMENDATION_CONFIG.sweep_interval_seconds)
    )
    app.state.sweep_task = sweep_task

    yield

    sweep_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweep_task


app = FastAPI(title="Trip Recommendation API", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "trip-planner-secret-change-in-production"),
)


# ── Dependencies ─────────────────────────────────────────────────────────


def get_cache() -> ResultCache:
    return _cache


def get_user_store() -> UserStore:
    return MongoUserStore(get_database()[DEFAULT_MONGO_CONFIG.users_collection])


def get_trip_store() -> TripStore:
    return MongoTripStore(get_database()[DEFAULT_MONGO_CONFIG.trips_collection])


def get_engine(
    users: UserStore = Depends(get_user_store),
    trips: TripStore = Depends(get_trip_store),
    cache: ResultCache = Depends(get_cache),
) -> RecommendationEngine:
    return RecommendationEngine(users, trips, cache)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── User endpoints ───────────────────────────────────────────────────────


@app.get("/recommendations", response_model=RecommendationResponse)
def recommendations(
    lat: str | None = Query(default=None),
    lng: str | None = Query(default=None),
    budget: str | None = Query(default=None),
    duration: str | None = Query(default=None),
    user: dict = Depends(require_user),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationResponse:
    # Query values stay raw strings: they form the cache key as given and
    # unparseable ones only zero their own scoring factor.
    try:
        ranked = engine.recommend(
            user["user_id"], lat=lat, lng=lng, budget=budget, duration=duration,
        )
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except Exception:
        logger.exception("Failed to fetch recommendations for user %s", user["user_id"])
        raise HTTPException(status_code=500, detail="Failed to fetch recommendations")
    return RecommendationResponse(recommendations=ranked)


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/cache/stats")
def cache_stats(
    user: dict = Depends(require_admin),
    cache: ResultCache = Depends(get_cache),
) -> dict:
    return cache.stats()


@app.post("/cache/invalidate")
def cache_invalidate(
    user: dict = Depends(require_admin),
    cache: ResultCache = Depends(get_cache),
) -> dict:
    removed = cache.invalidate_all()
    return {"status": "invalidated", "removed": removed}
