from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class MongoConfig:
    url: str = os.getenv("MONGO_URL", "mongodb://localhost:27017")
    database: str = os.getenv("MONGO_DB", "tripplanner")
    users_collection: str = "users"
    trips_collection: str = "trips"
    timeout_ms: int = 5000


DEFAULT_MONGO_CONFIG = MongoConfig()
