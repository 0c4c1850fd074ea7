"""
Runtime configuration for the transfer search service.
Values come from the environment (optionally a .env file next to the project).
"""

import os
from pathlib import Path
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / '.env')


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# Database Configuration
DATABASE_URL = os.getenv("DATABASE_URL") or os.getenv(
    "POSTGRES_URL",
    "sqlite+aiosqlite:///./transfers.db"  # SQLite for local dev only
)
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 20))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 30))

# Redis (rate limiting)
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# HTTP
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Search engine
SEARCH_TIMEOUT_SECONDS = float(os.getenv("SEARCH_TIMEOUT_SECONDS", 10.0))
SEARCH_MAX_CONCURRENCY = int(os.getenv("SEARCH_MAX_CONCURRENCY", 8))
DEFAULT_ROUTE_DURATION_MIN = int(os.getenv("DEFAULT_ROUTE_DURATION_MIN", 60))
CANCELLATION_POLICY_TEXT = os.getenv(
    "CANCELLATION_POLICY_TEXT",
    "Free cancellation up to 24 hours before pickup"
)

# Public search rate limit: 60 requests per minute per client
RATE_LIMIT_ENABLED = _as_bool(os.getenv("RATE_LIMIT_ENABLED", "true"))
SEARCH_RATE_LIMIT = int(os.getenv("SEARCH_RATE_LIMIT", 60))
SEARCH_RATE_WINDOW_SECONDS = int(os.getenv("SEARCH_RATE_WINDOW_SECONDS", 60))
