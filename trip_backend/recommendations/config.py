from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class RecommendationConfig:
    cache_ttl_seconds: float = float(os.getenv("RECOMMENDATION_CACHE_TTL", "300"))  # 5 minutes
    sweep_interval_seconds: float = float(os.getenv("RECOMMENDATION_SWEEP_INTERVAL", "600"))


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
